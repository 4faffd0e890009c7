"""Switch and packet filter managers."""

from __future__ import annotations

from typing import Any

from sakpilot.integrations.iaas.models import PacketFilter, Switch
from sakpilot.services.iaas.base import IaaSResourceManager


class SwitchManager(IaaSResourceManager[Switch]):
    _family = "switches"
    _entity_name = "switch"
    _resource = "switch"

    def _adapt(self, item: dict[str, Any], zone: str) -> Switch:
        return Switch.from_api(item)

    def get(self, profile_name: str, switch_id: str, zone: str | None = None) -> Switch:
        """Get a switch with its routed subnets."""
        return Switch.from_api(self._get(profile_name, switch_id, zone), include_subnets=True)


class PacketFilterManager(IaaSResourceManager[PacketFilter]):
    _family = "packet_filters"
    _entity_name = "packet_filter"
    _resource = "packetfilter"

    def _adapt(self, item: dict[str, Any], zone: str) -> PacketFilter:
        return PacketFilter.from_api(item)

    def get(self, profile_name: str, filter_id: str, zone: str | None = None) -> PacketFilter:
        """Get a packet filter with its rules."""
        return PacketFilter.from_api(self._get(profile_name, filter_id, zone), include_rules=True)
