"""Monitoring Suite storage manager."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Any

from sakpilot.core.exceptions import BackendError
from sakpilot.integrations.monitoring import MonitoringClient
from sakpilot.integrations.monitoring.models import (
    MetricsAccessKey,
    MetricsStorageDetail,
    Routing,
    Storage,
)
from sakpilot.services.base import BaseResourceManager


class MonitoringManager(BaseResourceManager[MonitoringClient]):
    """Manager for log, metrics and trace storages.

    Log and metrics storages are returned with the routings that feed them.
    Routings are best effort: if they cannot be listed, the storages are still
    returned, each with no routings.
    """

    _family = "monitoring"
    _entity_name = "monitoring_storage"

    def _routings_by_storage(
        self,
        fetch: Callable[[], list[dict[str, Any]]],
        storage_key: str,
    ) -> dict[str, list[Routing]]:
        try:
            routings = fetch()
        except BackendError as e:
            self._log.warning("routings_unavailable", storage_key=storage_key, error=str(e))
            return {}
        grouped: dict[str, list[Routing]] = defaultdict(list)
        for item in routings:
            storage_id = str((item.get(storage_key) or {}).get("id") or "")
            if storage_id:
                grouped[storage_id].append(Routing.from_api(item))
        return grouped

    def list_logs(self, profile_name: str) -> list[Storage]:
        with self._session(profile_name) as (client, _):
            storages = client.list_log_storages()
            routings = self._routings_by_storage(client.list_log_routings, "log_storage")
        return [Storage.from_api(s, routings.get(str(s.get("id")), [])) for s in storages]

    def list_metrics(self, profile_name: str) -> list[Storage]:
        with self._session(profile_name) as (client, _):
            storages = client.list_metrics_storages()
            routings = self._routings_by_storage(client.list_metrics_routings, "metrics_storage")
        return [Storage.from_api(s, routings.get(str(s.get("id")), [])) for s in storages]

    def list_traces(self, profile_name: str) -> list[Storage]:
        with self._session(profile_name) as (client, _):
            storages = client.list_trace_storages()
        return [Storage.from_api(s) for s in storages]

    def get_metrics_storage(self, profile_name: str, storage_id: str) -> MetricsStorageDetail:
        """Get a metrics storage with its query endpoint.

        Raises:
            InvalidIdentifierError: If the storage ID is not an integer.
        """
        with self._session(profile_name) as (client, _):
            return MetricsStorageDetail.from_api(client.get_metrics_storage(storage_id))

    def list_metrics_access_keys(
        self, profile_name: str, storage_id: str
    ) -> list[MetricsAccessKey]:
        with self._session(profile_name) as (client, _):
            keys = client.list_metrics_access_keys(storage_id)
        return [MetricsAccessKey.from_api(k) for k in keys]
