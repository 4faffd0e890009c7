"""IaaS resource managers - one manager per resource family."""

from sakpilot.services.iaas.account import AuthStatusManager, BillManager
from sakpilot.services.iaas.appliance import DatabaseManager, EnhancedDBManager, ProxyLBManager
from sakpilot.services.iaas.base import IaaSResourceManager
from sakpilot.services.iaas.compute import ArchiveManager, DiskManager, ServerManager
from sakpilot.services.iaas.global_services import (
    CertificateManager,
    ContainerRegistryManager,
    DNSManager,
    GSLBManager,
    SimpleMonitorManager,
)
from sakpilot.services.iaas.network import PacketFilterManager, SwitchManager

__all__ = [
    "ArchiveManager",
    "AuthStatusManager",
    "BillManager",
    "CertificateManager",
    "ContainerRegistryManager",
    "DNSManager",
    "DatabaseManager",
    "DiskManager",
    "EnhancedDBManager",
    "GSLBManager",
    "IaaSResourceManager",
    "PacketFilterManager",
    "ProxyLBManager",
    "ServerManager",
    "SimpleMonitorManager",
    "SwitchManager",
]
