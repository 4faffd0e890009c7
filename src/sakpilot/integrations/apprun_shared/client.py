"""AppRun shared API client.

Credentials are injected per request by ``AppRunAuth``. The API answers 200 on
success; any other status is a failure, including other 2xx codes.
"""

from __future__ import annotations

import base64
from collections.abc import Generator
from typing import Any

import httpx

from sakpilot.core.exceptions import BackendError
from sakpilot.core.zones import BackendKind
from sakpilot.integrations.base import (
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT,
    BaseBackendClient,
    _error_message,
    path_segment,
)

DEFAULT_BASE_URL = "https://secure.sakura.ad.jp/cloud/api/apprun/1.0/apprun/api"


class AppRunAuth(httpx.Auth):
    """Request interceptor adding the token/secret pair to every request."""

    def __init__(self, access_token: str, access_token_secret: str) -> None:
        credentials = f"{access_token}:{access_token_secret}".encode()
        self._header = f"Basic {base64.b64encode(credentials).decode('ascii')}"

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response]:
        request.headers["Authorization"] = self._header
        request.headers.setdefault("Accept", "application/json")
        yield request


class AppRunSharedClient(BaseBackendClient):
    """Client for the AppRun shared API."""

    backend_kind = BackendKind.APPRUN_SHARED

    def __init__(
        self,
        access_token: str,
        access_token_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
    ) -> None:
        super().__init__(base_url, timeout=timeout, retries=retries)
        self._auth = AppRunAuth(access_token, access_token_secret)

    def _build_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            auth=self._auth,
        )

    def _expect_ok(self, response: httpx.Response) -> dict[str, Any]:
        """Return the JSON body of a 200 response.

        Raises:
            BackendError: For any other status, carrying the upstream message
                when the body parses and "request failed: status=<n>" otherwise.
        """
        if response.status_code != 200:
            if response.status_code in (401, 403, 404):
                self._raise_for_status(response)
            message = _error_message(response) or f"request failed: status={response.status_code}"
            self._log.warning("request_failed", status=response.status_code)
            raise BackendError(
                message,
                self.backend_kind.value,
                response.status_code,
                response.request.url.path,
            )
        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as e:
            raise BackendError(
                "invalid JSON in response",
                self.backend_kind.value,
                response.status_code,
                response.request.url.path,
            ) from e
        return body if isinstance(body, dict) else {"data": body}

    def _get_ok(self, path: str, **kwargs: Any) -> dict[str, Any]:
        return self._expect_ok(self._make_retry_request("GET", path, **kwargs))

    def list_applications(self) -> list[dict[str, Any]]:
        return list(self._get_ok("/applications").get("data") or [])

    def get_application(self, app_id: str) -> dict[str, Any]:
        app_id = path_segment("application id", app_id)
        return self._get_ok(f"/applications/{app_id}")

    def get_application_status(self, app_id: str) -> str:
        app_id = path_segment("application id", app_id)
        return str(self._get_ok(f"/applications/{app_id}/status").get("status") or "")

    def list_versions(self, app_id: str) -> list[dict[str, Any]]:
        app_id = path_segment("application id", app_id)
        return list(self._get_ok(f"/applications/{app_id}/versions").get("data") or [])

    def list_traffics(self, app_id: str) -> list[dict[str, Any]]:
        app_id = path_segment("application id", app_id)
        return list(self._get_ok(f"/applications/{app_id}/traffics").get("data") or [])

    def has_user(self) -> bool:
        """Return True if the AppRun user is registered (200), False on 404.

        Raises:
            BackendError: For any other status.
        """
        response = self._make_retry_request("GET", "/user")
        if response.status_code == 404:
            return False
        self._expect_ok(response)
        return True
