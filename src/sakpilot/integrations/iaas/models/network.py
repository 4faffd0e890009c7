"""Network view models: switches and packet filters."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from sakpilot.core.models import ViewModel, _safe_get, str_id, to_int


class SwitchSubnet(ViewModel):
    """Subnet routed to a switch."""

    id: str = ""
    network_address: str = ""
    network_mask_len: int = 0
    default_route: str = ""
    next_hop: str = ""
    static_route: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> SwitchSubnet:
        return cls(
            id=str_id(item.get("ID")),
            network_address=item.get("NetworkAddress") or "",
            network_mask_len=to_int(item.get("NetworkMaskLen")),
            default_route=item.get("DefaultRoute") or "",
            next_hop=item.get("NextHop") or "",
            static_route=item.get("StaticRoute") or "",
        )


class Switch(ViewModel):
    """Switch display model.

    ``subnets`` is only populated by the single-switch read.
    """

    id: str = Field(description="Switch ID")
    name: str = Field(default="", description="Switch name")
    description: str = Field(default="", description="Switch description")
    server_count: int = Field(default=0, description="Connected server count")
    network_mask_len: int = Field(default=0, description="User subnet mask length")
    default_route: str = Field(default="", description="User subnet default route")
    scope: str = Field(default="", description="Switch scope (user/shared)")
    subnets: list[SwitchSubnet] = Field(default_factory=list, description="Routed subnets")

    @classmethod
    def from_api(cls, item: dict[str, Any], include_subnets: bool = False) -> Switch:
        """Create from an IaaS Switch object."""
        subnets = (
            [SwitchSubnet.from_api(s) for s in item.get("Subnets") or []] if include_subnets else []
        )
        return cls(
            id=str_id(item.get("ID")),
            name=item.get("Name") or "",
            description=item.get("Description") or "",
            server_count=to_int(item.get("ServerCount")),
            network_mask_len=to_int(_safe_get(item, "UserSubnet", "NetworkMaskLen")),
            default_route=_safe_get(item, "UserSubnet", "DefaultRoute", default=""),
            scope=item.get("Scope") or "",
            subnets=subnets,
        )


class PacketFilterRule(ViewModel):
    """One packet filter expression."""

    protocol: str = ""
    source_network: str = ""
    source_port: str = ""
    destination_port: str = ""
    action: str = ""
    description: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> PacketFilterRule:
        return cls(
            protocol=str(item.get("Protocol") or ""),
            source_network=str(item.get("SourceNetwork") or ""),
            source_port=str(item.get("SourcePort") or ""),
            destination_port=str(item.get("DestinationPort") or ""),
            action=str(item.get("Action") or ""),
            description=item.get("Description") or "",
        )


class PacketFilter(ViewModel):
    """Packet filter display model; ``rules`` only on single reads."""

    id: str
    name: str = ""
    description: str = ""
    rules: list[PacketFilterRule] = Field(default_factory=list)

    @classmethod
    def from_api(cls, item: dict[str, Any], include_rules: bool = False) -> PacketFilter:
        rules = (
            [PacketFilterRule.from_api(e) for e in item.get("Expression") or []]
            if include_rules
            else []
        )
        return cls(
            id=str_id(item.get("ID")),
            name=item.get("Name") or "",
            description=item.get("Description") or "",
            rules=rules,
        )
