"""Monitoring Suite API client.

Listings are paginated as ``{"count", "next", "previous", "results"}``; the
client follows ``next`` links until exhausted, for at most MAX_PAGES pages.
"""

from __future__ import annotations

from typing import Any

import httpx

from sakpilot.core.exceptions import BackendError, InvalidIdentifierError
from sakpilot.core.zones import BackendKind
from sakpilot.integrations.base import DEFAULT_RETRIES, DEFAULT_TIMEOUT, BaseBackendClient

DEFAULT_BASE_URL = "https://secure.sakura.ad.jp/cloud/api/monitoring/1.0"

# Guards against a misbehaving "next" link chain
MAX_PAGES = 100


def parse_storage_id(storage_id: str | int) -> int:
    """Parse a storage ID, which must be an integer.

    Raises:
        InvalidIdentifierError: If the ID is not an integer.
    """
    try:
        return int(str(storage_id).strip())
    except ValueError:
        raise InvalidIdentifierError(
            "storage id", storage_id, details="expected an integer"
        ) from None


class MonitoringClient(BaseBackendClient):
    """Client for the Monitoring Suite storage and routing API."""

    backend_kind = BackendKind.MONITORING

    def __init__(
        self,
        access_token: str,
        access_token_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
    ) -> None:
        super().__init__(base_url, timeout=timeout, retries=retries)
        self._auth = (access_token, access_token_secret)

    def _build_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            auth=self._auth,
            headers={"Accept": "application/json"},
        )

    def _list_all(self, path: str) -> list[dict[str, Any]]:
        """Collect every page of a listing.

        Raises:
            BackendError: If a "next" link remains after MAX_PAGES pages.
        """
        results: list[dict[str, Any]] = []
        next_url: str | None = path
        for _ in range(MAX_PAGES):
            if not next_url:
                break
            data = self.get(next_url) or {}
            results.extend(data.get("results") or [])
            next_url = data.get("next")
        if next_url:
            self._log.warning("page_limit_reached", path=path, pages=MAX_PAGES)
            raise BackendError(
                f"listing exceeds {MAX_PAGES} pages",
                self.backend_kind.value,
                endpoint=path,
            )
        return results

    def list_log_storages(self) -> list[dict[str, Any]]:
        return self._list_all("/logs/storages/")

    def list_log_routings(self) -> list[dict[str, Any]]:
        return self._list_all("/logs/routings/")

    def list_metrics_storages(self) -> list[dict[str, Any]]:
        return self._list_all("/metrics/storages/")

    def list_metrics_routings(self) -> list[dict[str, Any]]:
        return self._list_all("/metrics/routings/")

    def list_trace_storages(self) -> list[dict[str, Any]]:
        return self._list_all("/traces/storages/")

    def get_metrics_storage(self, storage_id: str | int) -> dict[str, Any]:
        sid = parse_storage_id(storage_id)
        return dict(self.get(f"/metrics/storages/{sid}/") or {})

    def list_metrics_access_keys(self, storage_id: str | int) -> list[dict[str, Any]]:
        sid = parse_storage_id(storage_id)
        return self._list_all(f"/metrics/storages/{sid}/keys/")
