"""Zone and scope resolution for resource families.

Each resource family is either zone-scoped (its IDs are local to one
datacenter zone) or global-scoped. Zone-scoped calls resolve the zone from the
explicit argument, then the profile default, then FALLBACK_ZONE.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

from pydantic import BaseModel

from sakpilot.core.exceptions import InvalidIdentifierError

if TYPE_CHECKING:
    from sakpilot.core.profiles import Profile

FALLBACK_ZONE = "is1a"

ZONES: dict[str, str] = {
    "is1a": "石狩第1ゾーン",
    "is1b": "石狩第2ゾーン",
    "tk1a": "東京第1ゾーン",
    "tk1b": "東京第2ゾーン",
    "tk1v": "サンドボックス",
}


class ScopeKind(str, Enum):
    """Addressing scope of a resource family."""

    ZONE = "zone"
    GLOBAL = "global"


class BackendKind(str, Enum):
    """Upstream backends the gateway integrates."""

    IAAS = "iaas"
    APPRUN_DEDICATED = "apprun_dedicated"
    APPRUN_SHARED = "apprun_shared"
    KMS = "kms"
    MONITORING = "monitoring"
    OBJECT_STORAGE = "object_storage"
    REGISTRY = "registry"
    PROMETHEUS = "prometheus"


class FamilyInfo(NamedTuple):
    """Static metadata for one resource family."""

    scope: ScopeKind
    backend: BackendKind


RESOURCE_FAMILIES: dict[str, FamilyInfo] = {
    "servers": FamilyInfo(ScopeKind.ZONE, BackendKind.IAAS),
    "switches": FamilyInfo(ScopeKind.ZONE, BackendKind.IAAS),
    "packet_filters": FamilyInfo(ScopeKind.ZONE, BackendKind.IAAS),
    "disks": FamilyInfo(ScopeKind.ZONE, BackendKind.IAAS),
    "archives": FamilyInfo(ScopeKind.ZONE, BackendKind.IAAS),
    "databases": FamilyInfo(ScopeKind.ZONE, BackendKind.IAAS),
    "dns": FamilyInfo(ScopeKind.GLOBAL, BackendKind.IAAS),
    "gslb": FamilyInfo(ScopeKind.GLOBAL, BackendKind.IAAS),
    "certificates": FamilyInfo(ScopeKind.GLOBAL, BackendKind.IAAS),
    "simple_monitors": FamilyInfo(ScopeKind.GLOBAL, BackendKind.IAAS),
    "container_registries": FamilyInfo(ScopeKind.GLOBAL, BackendKind.IAAS),
    "enhanced_dbs": FamilyInfo(ScopeKind.GLOBAL, BackendKind.IAAS),
    "proxy_lbs": FamilyInfo(ScopeKind.GLOBAL, BackendKind.IAAS),
    "bills": FamilyInfo(ScopeKind.GLOBAL, BackendKind.IAAS),
    "auth_status": FamilyInfo(ScopeKind.GLOBAL, BackendKind.IAAS),
    "kms_keys": FamilyInfo(ScopeKind.GLOBAL, BackendKind.KMS),
    "apprun": FamilyInfo(ScopeKind.GLOBAL, BackendKind.APPRUN_DEDICATED),
    "apprun_shared": FamilyInfo(ScopeKind.GLOBAL, BackendKind.APPRUN_SHARED),
    "monitoring": FamilyInfo(ScopeKind.GLOBAL, BackendKind.MONITORING),
    "object_storage": FamilyInfo(ScopeKind.GLOBAL, BackendKind.OBJECT_STORAGE),
    "registry_images": FamilyInfo(ScopeKind.GLOBAL, BackendKind.REGISTRY),
}


class ZoneInfo(BaseModel):
    """A known zone with its display name."""

    id: str
    name: str


def list_zones() -> list[ZoneInfo]:
    """Return the known zones in their canonical order."""
    return [ZoneInfo(id=zone_id, name=name) for zone_id, name in ZONES.items()]


def family_info(family: str) -> FamilyInfo:
    """Look up the scope/backend metadata of a resource family.

    Raises:
        InvalidIdentifierError: If the family is unknown.
    """
    try:
        return RESOURCE_FAMILIES[family]
    except KeyError:
        raise InvalidIdentifierError("resource family", family) from None


def is_zone_scoped(family: str) -> bool:
    """Return True if the family's resources live in a single zone."""
    return family_info(family).scope is ScopeKind.ZONE


def validate_zone(zone: str) -> str:
    """Ensure zone is a known zone code.

    Raises:
        InvalidIdentifierError: If the zone is unknown.
    """
    if zone not in ZONES:
        raise InvalidIdentifierError("zone", zone, details=f"expected one of {', '.join(ZONES)}")
    return zone


def resolve_zone(
    family: str,
    zone: str | None,
    profile: Profile | None = None,
    fallback_zone: str = FALLBACK_ZONE,
) -> str | None:
    """Resolve the zone a call against ``family`` should target.

    Args:
        family: Resource family name (key of RESOURCE_FAMILIES).
        zone: Explicit zone argument, if any.
        profile: The profile the call runs under.
        fallback_zone: Zone used when neither argument nor profile names one.

    Returns:
        The zone code for zone-scoped families, None for global ones.
    """
    if not is_zone_scoped(family):
        return None
    if zone:
        return validate_zone(zone)
    if profile is not None and profile.default_zone:
        return validate_zone(profile.default_zone)
    return validate_zone(fallback_zone)
