"""Managed appliance view models: databases, enhanced DBs, proxy load balancers."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from sakpilot.core.models import (
    ViewModel,
    _safe_get,
    format_timestamp,
    str_id,
    to_bool,
    to_float,
    to_int,
    to_str_list,
)


class Database(ViewModel):
    """Database appliance display model."""

    id: str
    name: str = ""
    description: str = ""
    zone: str = ""
    status: str = ""
    ip_addresses: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    created_at: str = ""
    plan_id: str = ""
    default_route: str = ""
    network_mask_len: int = 0

    @classmethod
    def from_api(cls, item: dict[str, Any], zone: str) -> Database:
        """Create from an IaaS Appliance object of class ``database``."""
        servers = _safe_get(item, "Remark", "Servers", default=[])
        return cls(
            id=str_id(item.get("ID")),
            name=item.get("Name") or "",
            description=item.get("Description") or "",
            zone=zone,
            status=_safe_get(item, "Instance", "Status", default=""),
            ip_addresses=to_str_list([_safe_get(s, "IPAddress") for s in servers]),
            tags=to_str_list(item.get("Tags")),
            created_at=format_timestamp(item.get("CreatedAt")),
            plan_id=str_id(_safe_get(item, "Plan", "ID")),
            default_route=_safe_get(item, "Remark", "Network", "DefaultRoute", default=""),
            network_mask_len=to_int(_safe_get(item, "Remark", "Network", "NetworkMaskLen")),
        )


class EnhancedDB(ViewModel):
    """Enhanced database display model."""

    id: str
    name: str = ""
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    database_name: str = ""
    database_type: str = ""
    region: str = ""
    host_name: str = ""
    port: int = 0
    created_at: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> EnhancedDB:
        status = item.get("Status") or {}
        return cls(
            id=str_id(item.get("ID")),
            name=item.get("Name") or "",
            description=item.get("Description") or "",
            tags=to_str_list(item.get("Tags")),
            database_name=status.get("DatabaseName") or "",
            database_type=status.get("DatabaseType") or "",
            region=status.get("Region") or "",
            host_name=status.get("HostName") or "",
            port=to_int(status.get("Port")),
            created_at=format_timestamp(item.get("CreatedAt")),
        )


class ProxyLBBindPort(ViewModel):
    """Listening port of a proxy load balancer."""

    port: int = 0
    proxy_mode: str = ""
    redirect_to_https: bool = False
    support_http2: bool = False


class ProxyLBServer(ViewModel):
    """Real server behind a proxy load balancer."""

    ip_address: str = ""
    port: int = 0
    server_group: str = ""
    enabled: bool = False


class ProxyLB(ViewModel):
    """Proxy load balancer display model."""

    id: str = Field(description="Proxy LB ID")
    name: str = Field(default="", description="Proxy LB name")
    description: str = Field(default="", description="Proxy LB description")
    tags: list[str] = Field(default_factory=list, description="Tags")
    plan: str = Field(default="", description="Plan (max connections)")
    region: str = Field(default="", description="Anycast region")
    fqdn: str = Field(default="", description="Assigned FQDN")
    virtual_ip_address: str = Field(
        default="", alias="virtualIPAddress", description="Virtual IP address"
    )
    proxy_networks: list[str] = Field(default_factory=list, description="Source networks")
    use_vip_failover: bool = Field(
        default=False, alias="useVIPFailover", description="VIP failover enabled"
    )
    bind_ports: list[ProxyLBBindPort] = Field(default_factory=list, description="Bind ports")
    servers: list[ProxyLBServer] = Field(default_factory=list, description="Real servers")
    created_at: str = Field(default="", description="Creation time")
    modified_at: str = Field(default="", description="Last modification time")

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> ProxyLB:
        """Create from an IaaS CommonServiceItem of class ``proxylb``."""
        settings = _safe_get(item, "Settings", "ProxyLB", default={})
        status = item.get("Status") or {}
        bind_ports = [
            ProxyLBBindPort(
                port=to_int(bp.get("Port")),
                proxy_mode=bp.get("ProxyMode") or "",
                redirect_to_https=to_bool(bp.get("RedirectToHttps")),
                support_http2=to_bool(bp.get("SupportHttp2")),
            )
            for bp in settings.get("BindPorts") or []
        ]
        servers = [
            ProxyLBServer(
                ip_address=srv.get("IPAddress") or "",
                port=to_int(srv.get("Port")),
                server_group=srv.get("ServerGroup") or "",
                enabled=to_bool(srv.get("Enabled")),
            )
            for srv in settings.get("Servers") or []
        ]
        # ServiceClass is "cloud/proxylb/plain/<plan>"
        service_class = str(item.get("ServiceClass") or "")
        return cls(
            id=str_id(item.get("ID")),
            name=item.get("Name") or "",
            description=item.get("Description") or "",
            tags=to_str_list(item.get("Tags")),
            plan=service_class.rsplit("/", 1)[-1] if service_class else "",
            region=status.get("Region") or "",
            fqdn=status.get("FQDN") or "",
            virtual_ip_address=status.get("VirtualIPAddress") or "",
            proxy_networks=to_str_list(status.get("ProxyNetworks")),
            use_vip_failover=to_bool(status.get("UseVIPFailover")),
            bind_ports=bind_ports,
            servers=servers,
            created_at=format_timestamp(item.get("CreatedAt")),
            modified_at=format_timestamp(item.get("ModifiedAt")),
        )


class ProxyLBServerStatus(ViewModel):
    """Health of one real server."""

    ip_address: str = ""
    port: int = 0
    status: str = ""
    active_conn: int = 0
    cps: float = 0.0


class ProxyLBHealth(ViewModel):
    """Proxy load balancer health snapshot."""

    active_conn: int = 0
    cps: float = 0.0
    current_vip: str = ""
    servers: list[ProxyLBServerStatus] = Field(default_factory=list)

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> ProxyLBHealth:
        return cls(
            active_conn=to_int(item.get("ActiveConn")),
            cps=to_float(item.get("CPS")),
            current_vip=item.get("CurrentVIP") or "",
            servers=[
                ProxyLBServerStatus(
                    ip_address=srv.get("IPAddress") or "",
                    port=to_int(srv.get("Port")),
                    status=srv.get("Status") or "",
                    active_conn=to_int(srv.get("ActiveConn")),
                    cps=to_float(srv.get("CPS")),
                )
                for srv in item.get("Servers") or []
            ],
        )
