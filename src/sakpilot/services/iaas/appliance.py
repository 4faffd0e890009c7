"""Database, enhanced database and proxy load balancer managers."""

from __future__ import annotations

from typing import Any

from sakpilot.integrations.iaas.models import Database, EnhancedDB, ProxyLB, ProxyLBHealth
from sakpilot.services.iaas.base import IaaSResourceManager


class DatabaseManager(IaaSResourceManager[Database]):
    _family = "databases"
    _entity_name = "database"
    _resource = "database"

    def _adapt(self, item: dict[str, Any], zone: str) -> Database:
        return Database.from_api(item, zone)


class EnhancedDBManager(IaaSResourceManager[EnhancedDB]):
    _family = "enhanced_dbs"
    _entity_name = "enhanced_db"
    _resource = "enhanceddb"

    def _adapt(self, item: dict[str, Any], zone: str) -> EnhancedDB:
        return EnhancedDB.from_api(item)


class ProxyLBManager(IaaSResourceManager[ProxyLB]):
    """Manager for proxy load balancers (enhanced load balancers)."""

    _family = "proxy_lbs"
    _entity_name = "proxy_lb"
    _resource = "proxylb"

    def _adapt(self, item: dict[str, Any], zone: str) -> ProxyLB:
        return ProxyLB.from_api(item)

    def get(self, profile_name: str, proxylb_id: str) -> ProxyLB:
        return ProxyLB.from_api(self._get(profile_name, proxylb_id))

    def get_health(self, profile_name: str, proxylb_id: str) -> ProxyLBHealth:
        """Get the live health of a proxy load balancer and its servers."""
        with self._session(profile_name) as (client, _):
            item = client.proxylb_health(proxylb_id)
        return ProxyLBHealth.from_api(item)
