"""IaaS (cloud resource) API client.

Zone-scoped resources live under ``/zone/<zone>/api/cloud/1.1``; global
resources are served through the ``is1a`` endpoint.
"""

from __future__ import annotations

from typing import Any, NamedTuple

import httpx

from sakpilot.core.exceptions import BackendNotFoundError, InvalidIdentifierError
from sakpilot.core.models import _safe_get
from sakpilot.core.zones import FALLBACK_ZONE, BackendKind
from sakpilot.integrations.base import (
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT,
    BaseBackendClient,
    path_segment,
)

DEFAULT_BASE_URL = "https://secure.sakura.ad.jp/cloud/zone/{zone}/api/cloud/1.1"
GLOBAL_ZONE = "is1a"


class IaaSResource(NamedTuple):
    """Wire layout of one IaaS resource type.

    Appliances and common service items share one path each and are told
    apart by a class field in every entry.
    """

    path: str
    list_key: str
    item_key: str
    class_field: tuple[str, ...] = ()
    class_value: str = ""

    def matches(self, item: dict[str, Any]) -> bool:
        if not self.class_field:
            return True
        return bool(_safe_get(item, *self.class_field) == self.class_value)


def _common_service(provider_class: str) -> IaaSResource:
    return IaaSResource(
        "commonserviceitem",
        "CommonServiceItems",
        "CommonServiceItem",
        ("Provider", "Class"),
        provider_class,
    )


IAAS_RESOURCES: dict[str, IaaSResource] = {
    "server": IaaSResource("server", "Servers", "Server"),
    "switch": IaaSResource("switch", "Switches", "Switch"),
    "packetfilter": IaaSResource("packetfilter", "PacketFilters", "PacketFilter"),
    "disk": IaaSResource("disk", "Disks", "Disk"),
    "archive": IaaSResource("archive", "Archives", "Archive"),
    "database": IaaSResource("appliance", "Appliances", "Appliance", ("Class",), "database"),
    "dns": _common_service("dns"),
    "gslb": _common_service("gslb"),
    "simplemon": _common_service("simplemon"),
    "proxylb": _common_service("proxylb"),
    "containerregistry": _common_service("containerregistry"),
    "enhanceddb": _common_service("enhanceddb"),
    "certificateauthority": _common_service("certificateauthority"),
}


def parse_resource_id(kind: str, value: str | int) -> str:
    """Validate an IaaS resource ID, which is a positive decimal number.

    Raises:
        InvalidIdentifierError: If the ID is not a positive decimal number.
    """
    text = str(value).strip()
    if not text.isascii() or not text.isdigit() or int(text) == 0:
        raise InvalidIdentifierError(kind, value, details="expected a numeric ID")
    return str(int(text))


def _resource(name: str) -> IaaSResource:
    try:
        return IAAS_RESOURCES[name]
    except KeyError:
        raise ValueError(f"unknown IaaS resource: {name}") from None


class IaaSClient(BaseBackendClient):
    """Client for the IaaS API using token/secret basic auth.

    Example:
        ```python
        with IaaSClient(token, secret) as client:
            servers = client.find("server", "is1a")
        ```
    """

    backend_kind = BackendKind.IAAS

    def __init__(
        self,
        access_token: str,
        access_token_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
    ) -> None:
        """Initialize the IaaS client.

        Args:
            access_token: API access token.
            access_token_secret: API access token secret.
            base_url: URL template with a ``{zone}`` placeholder.
            timeout: Request timeout in seconds.
            retries: Number of connection attempts.
        """
        self._url_template = base_url.rstrip("/")
        super().__init__(self.zone_url(GLOBAL_ZONE), timeout=timeout, retries=retries)
        self._auth = (access_token, access_token_secret)

    def _build_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            auth=self._auth,
            headers={"Accept": "application/json"},
        )

    def zone_url(self, zone: str) -> str:
        """Return the API root for a zone."""
        return self._url_template.format(zone=path_segment("zone", zone or FALLBACK_ZONE))

    def _url(self, zone: str, path: str) -> str:
        return f"{self.zone_url(zone)}/{path.lstrip('/')}"

    # Generic resource access

    def find(self, resource: str, zone: str) -> list[dict[str, Any]]:
        """List all entries of a resource type in a zone."""
        spec = _resource(resource)
        data = self.get(self._url(zone, spec.path)) or {}
        items = data.get(spec.list_key) or []
        return [item for item in items if spec.matches(item)]

    def read(self, resource: str, zone: str, resource_id: str) -> dict[str, Any]:
        """Read one entry of a resource type.

        Raises:
            BackendNotFoundError: If the entry does not exist or is of another class.
        """
        spec = _resource(resource)
        resource_id = parse_resource_id(f"{resource} id", resource_id)
        data = self.get(self._url(zone, f"{spec.path}/{resource_id}")) or {}
        item = data.get(spec.item_key)
        if not isinstance(item, dict) or not spec.matches(item):
            raise BackendNotFoundError(
                f"{resource} {resource_id} not found",
                self.backend_kind.value,
                404,
                f"{spec.path}/{resource_id}",
            )
        return item

    def find_global(self, resource: str) -> list[dict[str, Any]]:
        """List all entries of a global resource type."""
        return self.find(resource, GLOBAL_ZONE)

    def read_global(self, resource: str, resource_id: str) -> dict[str, Any]:
        """Read one entry of a global resource type."""
        return self.read(resource, GLOBAL_ZONE, resource_id)

    # Server power

    def boot_server(self, zone: str, server_id: str) -> None:
        server_id = parse_resource_id("server id", server_id)
        self.put(self._url(zone, f"server/{server_id}/power"))

    def shutdown_server(self, zone: str, server_id: str, force: bool = False) -> None:
        server_id = parse_resource_id("server id", server_id)
        self.delete(self._url(zone, f"server/{server_id}/power"), json={"Force": force})

    def server_power_status(self, zone: str, server_id: str) -> str:
        server_id = parse_resource_id("server id", server_id)
        data = self.get(self._url(zone, f"server/{server_id}/power")) or {}
        return str(_safe_get(data, "Instance", "Status", default=""))

    # Common service item sub-resources

    def proxylb_health(self, proxylb_id: str) -> dict[str, Any]:
        proxylb_id = parse_resource_id("proxylb id", proxylb_id)
        data = self.get(self._url(GLOBAL_ZONE, f"commonserviceitem/{proxylb_id}/health")) or {}
        return dict(data.get("ProxyLB") or {})

    def container_registry_users(self, registry_id: str) -> list[dict[str, Any]]:
        registry_id = parse_resource_id("container registry id", registry_id)
        path = f"commonserviceitem/{registry_id}/containerregistry/users"
        data = self.get(self._url(GLOBAL_ZONE, path)) or {}
        return list(_safe_get(data, "ContainerRegistry", "Users", default=[]))

    # Account

    def auth_status(self) -> dict[str, Any]:
        return dict(self.get(self._url(GLOBAL_ZONE, "auth-status")) or {})

    def bills_by_contract(self, account_id: str) -> list[dict[str, Any]]:
        account_id = parse_resource_id("account id", account_id)
        data = self.get(self._url(GLOBAL_ZONE, f"bill/by-contract/{account_id}")) or {}
        return list(data.get("Bills") or [])

    def bill_details(self, member_code: str, bill_id: str) -> list[dict[str, Any]]:
        member_code = path_segment("member code", member_code)
        bill_id = parse_resource_id("bill id", bill_id)
        data = self.get(self._url(GLOBAL_ZONE, f"billdetail/{member_code}/{bill_id}")) or {}
        return list(data.get("BillDetails") or [])
