"""Compute and storage view models: servers, disks, archives."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from sakpilot.core.models import (
    ViewModel,
    _safe_get,
    format_timestamp,
    str_id,
    to_int,
    to_str_list,
)


class Server(ViewModel):
    """Server display model."""

    id: str = Field(description="Server ID")
    name: str = Field(default="", description="Server name")
    description: str = Field(default="", description="Server description")
    zone: str = Field(default="", description="Zone the server lives in")
    cpu: int = Field(default=0, description="Virtual CPU count")
    memory: int = Field(default=0, description="Memory in GB")
    status: str = Field(default="", description="Instance status (up/down/...)")
    ip_addresses: list[str] = Field(default_factory=list, description="Interface IP addresses")
    tags: list[str] = Field(default_factory=list, description="Server tags")
    created_at: str = Field(default="", description="Creation time")

    @classmethod
    def from_api(cls, item: dict[str, Any], zone: str) -> Server:
        """Create from an IaaS Server object."""
        ips: list[str] = []
        for iface in item.get("Interfaces") or []:
            address = _safe_get(iface, "IPAddress") or _safe_get(iface, "UserIPAddress")
            if address:
                ips.append(str(address))

        return cls(
            id=str_id(item.get("ID")),
            name=item.get("Name") or "",
            description=item.get("Description") or "",
            zone=zone,
            cpu=to_int(_safe_get(item, "ServerPlan", "CPU")),
            memory=to_int(_safe_get(item, "ServerPlan", "MemoryMB")) // 1024,
            status=_safe_get(item, "Instance", "Status", default=""),
            ip_addresses=ips,
            tags=to_str_list(item.get("Tags")),
            created_at=format_timestamp(item.get("CreatedAt")),
        )


class Disk(ViewModel):
    """Disk display model."""

    id: str
    name: str = ""
    description: str = ""
    zone: str = ""
    size_gb: int = 0
    disk_plan_name: str = ""
    connection: str = ""
    server_id: str = ""
    server_name: str = ""
    tags: list[str] = Field(default_factory=list)
    created_at: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any], zone: str) -> Disk:
        """Create from an IaaS Disk object."""
        return cls(
            id=str_id(item.get("ID")),
            name=item.get("Name") or "",
            description=item.get("Description") or "",
            zone=zone,
            size_gb=to_int(item.get("SizeMB")) // 1024,
            disk_plan_name=_safe_get(item, "Plan", "Name", default=""),
            connection=item.get("Connection") or "",
            server_id=str_id(_safe_get(item, "Server", "ID")),
            server_name=_safe_get(item, "Server", "Name", default=""),
            tags=to_str_list(item.get("Tags")),
            created_at=format_timestamp(item.get("CreatedAt")),
        )


class Archive(ViewModel):
    """Archive display model."""

    id: str
    name: str = ""
    description: str = ""
    size_gb: int = 0
    scope: str = ""
    availability: str = ""
    tags: list[str] = Field(default_factory=list)
    created_at: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> Archive:
        """Create from an IaaS Archive object."""
        return cls(
            id=str_id(item.get("ID")),
            name=item.get("Name") or "",
            description=item.get("Description") or "",
            size_gb=to_int(item.get("SizeMB")) // 1024,
            scope=item.get("Scope") or "",
            availability=item.get("Availability") or "",
            tags=to_str_list(item.get("Tags")),
            created_at=format_timestamp(item.get("CreatedAt")),
        )
