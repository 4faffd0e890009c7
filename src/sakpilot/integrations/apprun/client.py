"""AppRun dedicated API client.

Every listing carries ``maxItems``, clamped into the bounds the API accepts for
that resource.
"""

from __future__ import annotations

import uuid
from typing import Any, NamedTuple

import httpx

from sakpilot.core.exceptions import InvalidIdentifierError
from sakpilot.core.zones import BackendKind
from sakpilot.integrations.base import DEFAULT_RETRIES, DEFAULT_TIMEOUT, BaseBackendClient

DEFAULT_BASE_URL = "https://secure.sakura.ad.jp/cloud/api/apprun-dedicated/1.0"


class ItemBounds(NamedTuple):
    """Accepted ``maxItems`` range of a listing."""

    minimum: int
    maximum: int

    def clamp(self, value: int | None) -> int:
        """Clamp ``value`` into range; None means the maximum."""
        if value is None:
            return self.maximum
        return max(self.minimum, min(self.maximum, value))


MAX_ITEMS: dict[str, ItemBounds] = {
    "clusters": ItemBounds(5, 30),
    "applications": ItemBounds(1, 30),
    "versions": ItemBounds(1, 30),
    "auto_scaling_groups": ItemBounds(1, 30),
    "load_balancers": ItemBounds(2, 30),
    "worker_nodes": ItemBounds(2, 100),
    "load_balancer_nodes": ItemBounds(2, 30),
}


def parse_uuid(kind: str, value: str) -> str:
    """Validate a UUID argument and return its canonical form.

    Raises:
        InvalidIdentifierError: If ``value`` is not a UUID.
    """
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        raise InvalidIdentifierError(kind, value, details="expected a UUID") from None


class Page(NamedTuple):
    """Raw listing page."""

    items: list[dict[str, Any]]
    next_cursor: str


class AppRunClient(BaseBackendClient):
    """Client for the AppRun dedicated API using token/secret basic auth."""

    backend_kind = BackendKind.APPRUN_DEDICATED

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

    def _list(
        self,
        path: str,
        key: str,
        bounds: str,
        max_items: int | None,
        cursor: str | None = None,
        **params: Any,
    ) -> Page:
        query: dict[str, Any] = {"maxItems": MAX_ITEMS[bounds].clamp(max_items)}
        if cursor:
            query["cursor"] = cursor
        query.update({k: v for k, v in params.items() if v})
        data = self.get(path, params=query) or {}
        return Page(list(data.get(key) or []), str(data.get("nextCursor") or ""))

    def list_clusters(self, max_items: int | None = None, cursor: str | None = None) -> Page:
        return self._list("/clusters", "clusters", "clusters", max_items, cursor)

    def list_applications(
        self,
        cluster_id: str | None = None,
        max_items: int | None = None,
        cursor: str | None = None,
    ) -> Page:
        cid = parse_uuid("cluster id", cluster_id) if cluster_id else None
        return self._list(
            "/applications", "applications", "applications", max_items, cursor, clusterId=cid
        )

    def list_versions(
        self, application_id: str, max_items: int | None = None, cursor: str | None = None
    ) -> Page:
        aid = parse_uuid("application id", application_id)
        return self._list(
            f"/applications/{aid}/versions", "versions", "versions", max_items, cursor
        )

    def get_version(self, application_id: str, version: int) -> dict[str, Any]:
        aid = parse_uuid("application id", application_id)
        data = self.get(f"/applications/{aid}/versions/{int(version)}") or {}
        return dict(data.get("applicationVersion") or {})

    def update_active_version(self, application_id: str, version: int | None) -> None:
        """Set (or clear, with None) an application's active version."""
        aid = parse_uuid("application id", application_id)
        self.patch(f"/applications/{aid}", json={"activeVersion": version})

    def list_auto_scaling_groups(
        self, cluster_id: str, max_items: int | None = None, cursor: str | None = None
    ) -> Page:
        cid = parse_uuid("cluster id", cluster_id)
        return self._list(
            f"/clusters/{cid}/auto-scaling-groups",
            "autoScalingGroups",
            "auto_scaling_groups",
            max_items,
            cursor,
        )

    def list_load_balancers(
        self,
        cluster_id: str,
        asg_id: str,
        max_items: int | None = None,
        cursor: str | None = None,
    ) -> Page:
        cid = parse_uuid("cluster id", cluster_id)
        gid = parse_uuid("auto scaling group id", asg_id)
        return self._list(
            f"/clusters/{cid}/auto-scaling-groups/{gid}/load-balancers",
            "loadBalancers",
            "load_balancers",
            max_items,
            cursor,
        )

    def list_worker_nodes(
        self,
        cluster_id: str,
        asg_id: str,
        max_items: int | None = None,
        cursor: str | None = None,
    ) -> Page:
        cid = parse_uuid("cluster id", cluster_id)
        gid = parse_uuid("auto scaling group id", asg_id)
        return self._list(
            f"/clusters/{cid}/auto-scaling-groups/{gid}/worker-nodes",
            "workerNodes",
            "worker_nodes",
            max_items,
            cursor,
        )

    def list_load_balancer_nodes(
        self,
        cluster_id: str,
        asg_id: str,
        lb_id: str,
        max_items: int | None = None,
        cursor: str | None = None,
    ) -> Page:
        cid = parse_uuid("cluster id", cluster_id)
        gid = parse_uuid("auto scaling group id", asg_id)
        lid = parse_uuid("load balancer id", lb_id)
        return self._list(
            f"/clusters/{cid}/auto-scaling-groups/{gid}/load-balancers/{lid}/nodes",
            "loadBalancerNodes",
            "load_balancer_nodes",
            max_items,
            cursor,
        )
