"""KMS API client built from a loaded profile."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from sakpilot.core.zones import BackendKind
from sakpilot.integrations.base import DEFAULT_RETRIES, DEFAULT_TIMEOUT, BaseBackendClient

if TYPE_CHECKING:
    from sakpilot.core.profiles import Profile

DEFAULT_BASE_URL = "https://secure.sakura.ad.jp/cloud/zone/is1a/api/cloud/1.1/kms"


class KMSClient(BaseBackendClient):
    """Client for the KMS key API."""

    backend_kind = BackendKind.KMS

    def __init__(
        self,
        profile: Profile,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
    ) -> None:
        """Initialize the KMS client.

        Args:
            profile: Profile whose credentials authenticate the calls.
            base_url: Base URL for the API.
            timeout: Request timeout in seconds.
            retries: Number of connection attempts.
        """
        super().__init__(base_url, timeout=timeout, retries=retries)
        self._profile = profile

    def _build_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            auth=self._profile.credentials,
            headers={"Accept": "application/json"},
        )

    def list_keys(self) -> list[dict[str, Any]]:
        data = self.get("/keys") or {}
        return list(data.get("keys") or [])
