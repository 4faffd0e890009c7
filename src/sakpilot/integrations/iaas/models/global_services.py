"""Global service view models: DNS, GSLB, certificates, monitors, registries."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from sakpilot.core.models import ViewModel, _safe_get, str_id, to_bool, to_int


class DNSRecord(ViewModel):
    """DNS resource record."""

    name: str = ""
    type: str = ""
    rdata: str = ""
    ttl: int = 0


class DNSZone(ViewModel):
    """DNS zone display model."""

    id: str
    name: str = ""
    description: str = ""
    zone: str = ""
    records: list[DNSRecord] = Field(default_factory=list)

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> DNSZone:
        """Create from an IaaS CommonServiceItem of class ``dns``."""
        records = [
            DNSRecord(
                name=rr.get("Name") or "",
                type=rr.get("Type") or "",
                rdata=rr.get("RData") or "",
                ttl=to_int(rr.get("TTL")),
            )
            for rr in _safe_get(item, "Settings", "DNS", "ResourceRecordSets", default=[])
        ]
        return cls(
            id=str_id(item.get("ID")),
            name=item.get("Name") or "",
            description=item.get("Description") or "",
            zone=_safe_get(item, "Status", "Zone", default=""),
            records=records,
        )


class GSLBServer(ViewModel):
    """GSLB destination server."""

    ip_address: str = ""
    enabled: bool = False
    weight: int = 0


class GSLBHealthCheck(ViewModel):
    """GSLB health check settings."""

    protocol: str = ""
    host_header: str = ""
    path: str = ""
    response_code: int = 0
    port: int = 0


class GSLB(ViewModel):
    """GSLB display model.

    ``health_check`` is None when the GSLB has no health check configured and
    is then absent from the serialized form.
    """

    id: str
    name: str = ""
    description: str = ""
    fqdn: str = ""
    sorry_server: str = ""
    servers: list[GSLBServer] = Field(default_factory=list)
    health_check: GSLBHealthCheck | None = None
    delay_loop: int = 0
    weighted: bool = False

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> GSLB:
        """Create from an IaaS CommonServiceItem of class ``gslb``."""
        settings = _safe_get(item, "Settings", "GSLB", default={})

        health_check = None
        hc = settings.get("HealthCheck")
        if isinstance(hc, dict) and hc.get("Protocol"):
            health_check = GSLBHealthCheck(
                protocol=hc.get("Protocol") or "",
                host_header=hc.get("Host") or "",
                path=hc.get("Path") or "",
                response_code=to_int(hc.get("Status")),
                port=to_int(hc.get("Port")),
            )

        return cls(
            id=str_id(item.get("ID")),
            name=item.get("Name") or "",
            description=item.get("Description") or "",
            fqdn=_safe_get(item, "Status", "FQDN", default=""),
            sorry_server=settings.get("SorryServer") or "",
            servers=[
                GSLBServer(
                    ip_address=srv.get("IPAddress") or "",
                    enabled=to_bool(srv.get("Enabled")),
                    weight=to_int(srv.get("Weight")),
                )
                for srv in settings.get("Servers") or []
            ],
            health_check=health_check,
            delay_loop=to_int(settings.get("DelayLoop")),
            weighted=to_bool(settings.get("Weighted")),
        )


class Certificate(ViewModel):
    """Managed certificate authority display model."""

    id: str
    name: str = ""
    description: str = ""
    common_name: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> Certificate:
        return cls(
            id=str_id(item.get("ID")),
            name=item.get("Name") or "",
            description=item.get("Description") or "",
            common_name=_safe_get(item, "Status", "Subject", "CommonName", default=""),
        )


class SimpleMonitor(ViewModel):
    """Simple monitor display model."""

    id: str
    name: str = ""
    description: str = ""
    target: str = ""
    enabled: bool = False

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> SimpleMonitor:
        return cls(
            id=str_id(item.get("ID")),
            name=item.get("Name") or "",
            description=item.get("Description") or "",
            target=_safe_get(item, "Status", "Target", default=""),
            enabled=to_bool(_safe_get(item, "Settings", "SimpleMonitor", "Enabled")),
        )


class ContainerRegistry(ViewModel):
    """Container registry display model."""

    id: str
    name: str = ""
    description: str = ""
    fqdn: str = ""
    access_level: str = ""
    virtual_domain: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> ContainerRegistry:
        settings = _safe_get(item, "Settings", "ContainerRegistry", default={})
        return cls(
            id=str_id(item.get("ID")),
            name=item.get("Name") or "",
            description=item.get("Description") or "",
            fqdn=_safe_get(item, "Status", "FQDN", default=""),
            access_level=settings.get("Public") or "",
            virtual_domain=settings.get("VirtualDomain") or "",
        )


class ContainerRegistryUser(ViewModel):
    """Registry user and its permission."""

    user_name: str = ""
    permission: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> ContainerRegistryUser:
        return cls(user_name=item.get("UserName") or "", permission=item.get("Permission") or "")
