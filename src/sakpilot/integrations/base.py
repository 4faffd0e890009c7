"""Base HTTP client for upstream backends.

Provides the transport shared by every httpx-based backend client: one
``httpx.Client`` per handle, connection retries, and mapping of HTTP failures
onto the gateway error taxonomy tagged with the originating backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from sakpilot.core.exceptions import (
    BackendAuthError,
    BackendConnectionError,
    BackendError,
    BackendNotFoundError,
    InvalidIdentifierError,
)
from sakpilot.core.zones import BackendKind

logger = structlog.get_logger()

DEFAULT_TIMEOUT = 30
DEFAULT_RETRIES = 3

UNSAFE_SEGMENT_CHARS = frozenset("/?#%\\")


def path_segment(kind: str, value: str) -> str:
    """Validate an identifier that is placed in a URL path.

    Raises:
        InvalidIdentifierError: If the value is empty, a dot segment, or holds
            a character that would change the request path or query.
    """
    text = str(value).strip()
    if not text or text in (".", "..") or any(c in UNSAFE_SEGMENT_CHARS for c in text):
        raise InvalidIdentifierError(kind, value, details="not a valid path segment")
    return text


def _error_message(response: httpx.Response) -> str | None:
    """Extract the upstream error message from a JSON error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    for key in ("error_msg", "message", "detail"):
        if isinstance(body.get(key), str) and body[key]:
            return str(body[key])
    error = body.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    return None


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


class BaseBackendClient(ABC):
    """Abstract base class for upstream HTTP clients.

    Subclasses set ``backend_kind`` and provide their authentication through
    ``_build_client``. Instances are short-lived: create one per gateway call
    and close it (or use it as a context manager).
    """

    backend_kind: BackendKind

    def __init__(
        self,
        base_url: str,
        timeout: int = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
    ) -> None:
        """Initialize the base client.

        Args:
            base_url: Base URL for the API.
            timeout: Request timeout in seconds.
            retries: Number of connection attempts.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._retries = retries
        self._client: httpx.Client | None = None
        self._log = logger.bind(backend=self.backend_kind.value)

    @abstractmethod
    def _build_client(self) -> httpx.Client:
        """Build the authenticated httpx client."""

    @property
    def client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = self._build_client()
        return self._client

    def __enter__(self) -> BaseBackendClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit - close client."""
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._log.debug("client_closed")

    def _make_retry_request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Make an HTTP request, retrying connection failures.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: URL path relative to base_url.
            **kwargs: Additional arguments for the request.

        Returns:
            httpx.Response object.

        Raises:
            BackendConnectionError: If the backend cannot be reached.
        """

        @retry(
            retry=retry_if_exception_type((httpx.ConnectError, httpx.TimeoutException)),
            stop=stop_after_attempt(self._retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            reraise=True,
        )
        def _request() -> httpx.Response:
            return self.client.request(method, path, **kwargs)

        self._log.debug("request", method=method, path=path)
        try:
            return _request()
        except httpx.TransportError as e:
            url = f"{self.base_url}/{path.lstrip('/')}"
            self._log.error("connection_failed", error=str(e), url=url)
            raise BackendConnectionError(
                f"failed to connect: {e}",
                self.backend_kind.value,
                endpoint=url,
                original_error=e,
            ) from e

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Map an HTTP failure onto the error taxonomy.

        Raises:
            BackendAuthError: On 401/403.
            BackendNotFoundError: On 404.
            BackendError: On any other status >= 400.
        """
        status = response.status_code
        if status < 400:
            return

        endpoint = response.request.url.path
        upstream = _error_message(response)
        body = _json_body(response)
        kind = self.backend_kind.value
        self._log.warning("request_failed", status=status, endpoint=endpoint)

        if status in (401, 403):
            message = upstream or ("authentication failed" if status == 401 else "access forbidden")
            raise BackendAuthError(message, kind, status, endpoint, body)
        if status == 404:
            message = upstream or "resource not found"
            raise BackendNotFoundError(message, kind, status, endpoint, body)
        message = upstream or f"request failed: status={status}"
        raise BackendError(message, kind, status, endpoint, body)

    def _handle_response(self, response: httpx.Response) -> Any:
        """Check the status and return the parsed JSON body.

        An empty body returns None.
        """
        self._raise_for_status(response)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(
                "invalid JSON in response",
                self.backend_kind.value,
                response.status_code,
                str(response.request.url.path),
            ) from e

    def get(self, path: str, **kwargs: Any) -> Any:
        """Make a GET request and return the parsed body."""
        return self._handle_response(self._make_retry_request("GET", path, **kwargs))

    def post(self, path: str, **kwargs: Any) -> Any:
        """Make a POST request and return the parsed body."""
        return self._handle_response(self._make_retry_request("POST", path, **kwargs))

    def put(self, path: str, **kwargs: Any) -> Any:
        """Make a PUT request and return the parsed body."""
        return self._handle_response(self._make_retry_request("PUT", path, **kwargs))

    def patch(self, path: str, **kwargs: Any) -> Any:
        """Make a PATCH request and return the parsed body."""
        return self._handle_response(self._make_retry_request("PATCH", path, **kwargs))

    def delete(self, path: str, **kwargs: Any) -> Any:
        """Make a DELETE request and return the parsed body."""
        return self._handle_response(self._make_retry_request("DELETE", path, **kwargs))
