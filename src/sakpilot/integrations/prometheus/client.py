"""Prometheus Query API client for Monitoring Suite metrics storages.

Each metrics storage exposes a Prometheus-compatible API under
``/prometheus/api/v1`` authenticated with a storage access key as bearer token.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, cast

import httpx

from sakpilot.core.exceptions import PrometheusQueryError
from sakpilot.core.zones import BackendKind
from sakpilot.integrations.base import DEFAULT_RETRIES, DEFAULT_TIMEOUT, BaseBackendClient

API_PREFIX = "/prometheus/api/v1"
PUBLISHER_LABEL = "sakuracloud_publisher"


def normalize_endpoint(endpoint: str) -> str:
    """Prepend ``https://`` to an endpoint that has no scheme."""
    endpoint = endpoint.strip()
    if not endpoint.startswith(("http://", "https://")):
        endpoint = f"https://{endpoint}"
    return endpoint.rstrip("/")


class PrometheusClient(BaseBackendClient):
    """Client for the Prometheus Query API of a single metrics storage.

    Example:
        ```python
        with PrometheusClient("abc.metrics.monitoring.example", token) as client:
            names = client.get_label_values("__name__")
        ```
    """

    backend_kind = BackendKind.PROMETHEUS

    def __init__(
        self,
        endpoint: str,
        token: str,
        timeout: int = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
    ) -> None:
        """Initialize Prometheus client.

        Args:
            endpoint: Storage endpoint, with or without scheme.
            token: Storage access key used as bearer token.
            timeout: Request timeout in seconds.
            retries: Number of connection attempts.
        """
        super().__init__(normalize_endpoint(endpoint), timeout=timeout, retries=retries)
        self._token = token

    def _build_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            headers={
                "Authorization": f"Bearer {self._token}",
                "Accept": "application/json",
            },
        )

    def _check_envelope(self, data: Any) -> Any:
        """Return the ``data`` member of a success envelope.

        Raises:
            PrometheusQueryError: If the envelope status is not "success".
        """
        if not isinstance(data, dict) or data.get("status") != "success":
            error = data.get("error") if isinstance(data, dict) else None
            message = f"query failed: {error or 'unknown error'}"
            raise PrometheusQueryError(message, self.backend_kind.value)
        return data.get("data")

    def get_label_values(self, label: str) -> list[str]:
        """Get all values for a label."""
        data = self.get(f"{API_PREFIX}/label/{label}/values")
        return [str(v) for v in self._check_envelope(data) or []]

    def query_range(
        self,
        query: str,
        start: datetime | float,
        end: datetime | float,
        step: str = "60s",
    ) -> dict[str, Any]:
        """Execute a range query.

        Args:
            query: PromQL query expression.
            start: Start timestamp.
            end: End timestamp.
            step: Query resolution step (e.g., "15s", "1m", "1h").

        Returns:
            The full response envelope (status and data).
        """
        params = {
            "query": query,
            "start": start.timestamp() if isinstance(start, datetime) else start,
            "end": end.timestamp() if isinstance(end, datetime) else end,
            "step": step,
        }
        self._log.debug("prometheus_range_query", query=query, step=step)
        data = self.get(f"{API_PREFIX}/query_range", params=params)
        self._check_envelope(data)
        return cast(dict[str, Any], data)

    def series(self, match: str) -> list[dict[str, str]]:
        """Find series by label matcher."""
        data = self.get(f"{API_PREFIX}/series", params={"match[]": match})
        return list(self._check_envelope(data) or [])

    def publishers(self) -> list[str]:
        """List the publishers that have written metrics."""
        return self.get_label_values(PUBLISHER_LABEL)

    def metric_names_by_publisher(self, publisher: str) -> list[str]:
        """List the distinct metric names written by one publisher, sorted."""
        escaped = publisher.replace("\\", "\\\\").replace('"', '\\"')
        series = self.series(f'{{{PUBLISHER_LABEL}="{escaped}"}}')
        names = {s["__name__"] for s in series if s.get("__name__")}
        return sorted(names)
