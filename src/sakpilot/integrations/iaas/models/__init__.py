"""IaaS resource display models."""

from sakpilot.integrations.iaas.models.account import AuthStatus, Bill, BillDetail
from sakpilot.integrations.iaas.models.appliance import (
    Database,
    EnhancedDB,
    ProxyLB,
    ProxyLBBindPort,
    ProxyLBHealth,
    ProxyLBServer,
    ProxyLBServerStatus,
)
from sakpilot.integrations.iaas.models.compute import Archive, Disk, Server
from sakpilot.integrations.iaas.models.global_services import (
    GSLB,
    Certificate,
    ContainerRegistry,
    ContainerRegistryUser,
    DNSRecord,
    DNSZone,
    GSLBHealthCheck,
    GSLBServer,
    SimpleMonitor,
)
from sakpilot.integrations.iaas.models.network import (
    PacketFilter,
    PacketFilterRule,
    Switch,
    SwitchSubnet,
)

__all__ = [
    "GSLB",
    "Archive",
    "AuthStatus",
    "Bill",
    "BillDetail",
    "Certificate",
    "ContainerRegistry",
    "ContainerRegistryUser",
    "DNSRecord",
    "DNSZone",
    "Database",
    "Disk",
    "EnhancedDB",
    "GSLBHealthCheck",
    "GSLBServer",
    "PacketFilter",
    "PacketFilterRule",
    "ProxyLB",
    "ProxyLBBindPort",
    "ProxyLBHealth",
    "ProxyLBServer",
    "ProxyLBServerStatus",
    "Server",
    "SimpleMonitor",
    "Switch",
    "SwitchSubnet",
]
