"""GUI-facing gateway surface.

Every operation takes a profile name (and a zone and/or identifiers where
relevant) and returns JSON-serializable data: view models are dumped with
camelCase keys. Failures raise a ``GatewayError``; ``Gateway.call`` wraps any
operation in an ``{"ok": ..., "data" | "error": ...}`` envelope so a shell can
render errors without crashing.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any, cast

import structlog
from pydantic import BaseModel

from sakpilot.core.config import GatewaySettings
from sakpilot.core.dispatcher import ClientFactory
from sakpilot.core.exceptions import BackendAuthError, GatewayError, InvalidIdentifierError
from sakpilot.core.models import ViewModel
from sakpilot.core.profiles import CredentialStore, ProfileManager
from sakpilot.core.vault import SecretVault
from sakpilot.core.zones import BackendKind, family_info, list_zones, resolve_zone
from sakpilot.integrations.iaas import IaaSClient
from sakpilot.integrations.iaas.models import AuthStatus
from sakpilot.services.apprun import AppRunManager
from sakpilot.services.apprun_shared import AppRunSharedManager
from sakpilot.services.iaas import (
    ArchiveManager,
    AuthStatusManager,
    BillManager,
    CertificateManager,
    ContainerRegistryManager,
    DatabaseManager,
    DiskManager,
    DNSManager,
    EnhancedDBManager,
    GSLBManager,
    PacketFilterManager,
    ProxyLBManager,
    ServerManager,
    SimpleMonitorManager,
    SwitchManager,
)
from sakpilot.services.kms import KMSKeyManager
from sakpilot.services.monitoring import MetricsQueryPipeline, MonitoringManager
from sakpilot.services.object_storage import ObjectStorageManager

logger = structlog.get_logger()


def to_json(value: Any) -> Any:
    """Convert view models (and containers of them) to JSON-ready data."""
    if isinstance(value, ViewModel):
        return value.to_json_dict()
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True, mode="json")
    if isinstance(value, list | tuple):
        return [to_json(v) for v in value]
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    return value


class Gateway:
    """Profile-scoped entry point to every resource family.

    Example:
        ```python
        gateway = Gateway()
        servers = gateway.list_servers("default", zone="tk1b")
        envelope = gateway.call("list_servers", profile_name="default")
        ```
    """

    def __init__(
        self,
        settings: GatewaySettings | None = None,
        vault: SecretVault | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            settings: Gateway settings (default: loaded from file and environment).
            vault: Secret vault (default: OS keychain under the configured service).
        """
        self.settings = settings or GatewaySettings.load()
        self.store = CredentialStore(self.settings.usacloud_dir)
        self.profiles = ProfileManager(self.store)
        self.vault = vault or SecretVault(self.settings.keyring_service)
        self.factory = ClientFactory(self.settings, self.store)

        self.servers = ServerManager(self.factory)
        self.switches = SwitchManager(self.factory)
        self.packet_filters = PacketFilterManager(self.factory)
        self.disks = DiskManager(self.factory)
        self.archives = ArchiveManager(self.factory)
        self.databases = DatabaseManager(self.factory)
        self.dns = DNSManager(self.factory)
        self.gslb = GSLBManager(self.factory)
        self.certificates = CertificateManager(self.factory)
        self.simple_monitors = SimpleMonitorManager(self.factory)
        self.container_registries = ContainerRegistryManager(self.factory, self.vault)
        self.enhanced_dbs = EnhancedDBManager(self.factory)
        self.proxy_lbs = ProxyLBManager(self.factory)
        self.bills = BillManager(self.factory)
        self.auth_status = AuthStatusManager(self.factory)
        self.kms_keys = KMSKeyManager(self.factory)
        self.apprun = AppRunManager(self.factory)
        self.apprun_shared = AppRunSharedManager(self.factory)
        self.monitoring = MonitoringManager(self.factory)
        self.metrics = MetricsQueryPipeline(self.factory, self.monitoring)
        self.object_storage = ObjectStorageManager(self.factory, self.vault)

        self._family_listers: dict[str, Callable[[str, str | None], Any]] = {
            "servers": self.servers.list,
            "switches": self.switches.list,
            "packet_filters": self.packet_filters.list,
            "disks": self.disks.list,
            "archives": self.archives.list,
            "databases": self.databases.list,
            "dns": lambda p, z: self.dns.list(p),
            "gslb": lambda p, z: self.gslb.list(p),
            "certificates": lambda p, z: self.certificates.list(p),
            "simple_monitors": lambda p, z: self.simple_monitors.list(p),
            "container_registries": lambda p, z: self.container_registries.list(p),
            "enhanced_dbs": lambda p, z: self.enhanced_dbs.list(p),
            "proxy_lbs": lambda p, z: self.proxy_lbs.list(p),
            "bills": lambda p, z: self.bills.list_by_contract(p),
            "auth_status": lambda p, z: self.auth_status.get(p),
            "kms_keys": lambda p, z: self.kms_keys.list(p),
            "apprun": lambda p, z: self.apprun.list_clusters(p),
            "apprun_shared": lambda p, z: self.apprun_shared.list_applications(p),
            "monitoring": lambda p, z: self.monitoring.list_metrics(p),
            "object_storage": lambda p, z: self.object_storage.list_sites(p),
        }

    # Envelope

    def call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        """Run an operation by name and wrap its outcome in an envelope.

        Returns:
            ``{"ok": True, "data": ...}`` on success, or
            ``{"ok": False, "error": {"type", "message", ...}}`` on failure.
        """
        method = getattr(self, operation, None) if not operation.startswith("_") else None
        if operation == "call" or not callable(method):
            error = InvalidIdentifierError("operation", operation)
            return {"ok": False, "error": error.to_dict()}
        log = logger.bind(operation=operation)
        try:
            data = method(**kwargs)
        except GatewayError as e:
            log.warning("operation_failed", error_type=e.error_type, error=e.message)
            return {"ok": False, "error": e.to_dict()}
        log.debug("operation_succeeded")
        return {"ok": True, "data": to_json(data)}

    # Profiles

    def list_profiles(self) -> list[dict[str, Any]]:
        return to_json(self.store.list_profiles())

    def current_profile(self) -> str:
        return self.store.current_profile_name()

    def default_profile(self) -> str:
        return self.store.default_profile_name()

    def set_current_profile(self, name: str) -> None:
        self.store.set_current(name)

    def create_profile(
        self, name: str, access_token: str, access_token_secret: str, zone: str = ""
    ) -> None:
        self.profiles.create(name, access_token, access_token_secret, zone)

    def update_profile(
        self,
        old_name: str,
        new_name: str,
        access_token: str,
        access_token_secret: str,
        zone: str = "",
    ) -> None:
        self.profiles.update(old_name, new_name, access_token, access_token_secret, zone)

    def delete_profile(self, name: str) -> None:
        self.profiles.delete(name)

    def get_profile_credentials(self, name: str) -> dict[str, Any]:
        return to_json(self.profiles.get_credentials(name))

    def validate_credentials(self, access_token: str, access_token_secret: str) -> dict[str, Any]:
        """Check a credential pair against the IaaS API before saving it.

        Raises:
            BackendAuthError: If the credentials are rejected.
        """
        client = cast(
            IaaSClient,
            self.factory.create_unsaved(BackendKind.IAAS, access_token, access_token_secret),
        )
        with client:
            status = AuthStatus.from_api(client.auth_status())
        if not status.account_id:
            raise BackendAuthError("credentials not accepted", BackendKind.IAAS.value)
        return to_json(status)

    def get_default_zone(self, profile_name: str = "") -> str:
        """Return the zone zone-scoped calls use when none is given."""
        profile = self.factory.load_profile(profile_name)
        return resolve_zone("servers", None, profile, self.settings.fallback_zone) or ""

    # Zones and families

    def list_zones(self) -> list[dict[str, Any]]:
        return to_json(list_zones())

    def list_resources(self, family: str, profile_name: str = "", zone: str | None = None) -> Any:
        """List any resource family by name with its default listing.

        Raises:
            InvalidIdentifierError: If the family is unknown or needs more
                arguments than a profile and zone.
        """
        family_info(family)
        lister = self._family_listers.get(family)
        if lister is None:
            raise InvalidIdentifierError(
                "resource family", family, details="not listable by family name"
            )
        return to_json(lister(profile_name, zone))

    # Servers

    def list_servers(self, profile_name: str = "", zone: str | None = None) -> list[dict[str, Any]]:
        return to_json(self.servers.list(profile_name, zone))

    def get_server(
        self, profile_name: str, server_id: str, zone: str | None = None
    ) -> dict[str, Any]:
        return to_json(self.servers.get(profile_name, server_id, zone))

    def get_server_status(self, profile_name: str, server_id: str, zone: str | None = None) -> str:
        return self.servers.get_status(profile_name, server_id, zone)

    def power_on_server(self, profile_name: str, server_id: str, zone: str | None = None) -> None:
        self.servers.power_on(profile_name, server_id, zone)

    def power_off_server(self, profile_name: str, server_id: str, zone: str | None = None) -> None:
        self.servers.power_off(profile_name, server_id, zone)

    def force_stop_server(self, profile_name: str, server_id: str, zone: str | None = None) -> None:
        self.servers.force_stop(profile_name, server_id, zone)

    # Network

    def list_switches(
        self, profile_name: str = "", zone: str | None = None
    ) -> list[dict[str, Any]]:
        return to_json(self.switches.list(profile_name, zone))

    def get_switch(
        self, profile_name: str, switch_id: str, zone: str | None = None
    ) -> dict[str, Any]:
        return to_json(self.switches.get(profile_name, switch_id, zone))

    def list_packet_filters(
        self, profile_name: str = "", zone: str | None = None
    ) -> list[dict[str, Any]]:
        return to_json(self.packet_filters.list(profile_name, zone))

    def get_packet_filter(
        self, profile_name: str, filter_id: str, zone: str | None = None
    ) -> dict[str, Any]:
        return to_json(self.packet_filters.get(profile_name, filter_id, zone))

    # Storage and appliances

    def list_disks(self, profile_name: str = "", zone: str | None = None) -> list[dict[str, Any]]:
        return to_json(self.disks.list(profile_name, zone))

    def list_archives(
        self, profile_name: str = "", zone: str | None = None
    ) -> list[dict[str, Any]]:
        return to_json(self.archives.list(profile_name, zone))

    def list_databases(
        self, profile_name: str = "", zone: str | None = None
    ) -> list[dict[str, Any]]:
        return to_json(self.databases.list(profile_name, zone))

    def list_enhanced_dbs(self, profile_name: str = "") -> list[dict[str, Any]]:
        return to_json(self.enhanced_dbs.list(profile_name))

    def list_proxy_lbs(self, profile_name: str = "") -> list[dict[str, Any]]:
        return to_json(self.proxy_lbs.list(profile_name))

    def get_proxy_lb(self, profile_name: str, proxylb_id: str) -> dict[str, Any]:
        return to_json(self.proxy_lbs.get(profile_name, proxylb_id))

    def get_proxy_lb_health(self, profile_name: str, proxylb_id: str) -> dict[str, Any]:
        return to_json(self.proxy_lbs.get_health(profile_name, proxylb_id))

    # Global services

    def list_dns(self, profile_name: str = "") -> list[dict[str, Any]]:
        return to_json(self.dns.list(profile_name))

    def get_dns(self, profile_name: str, dns_id: str) -> dict[str, Any]:
        return to_json(self.dns.get(profile_name, dns_id))

    def list_gslb(self, profile_name: str = "") -> list[dict[str, Any]]:
        return to_json(self.gslb.list(profile_name))

    def get_gslb(self, profile_name: str, gslb_id: str) -> dict[str, Any]:
        return to_json(self.gslb.get(profile_name, gslb_id))

    def list_certificates(self, profile_name: str = "") -> list[dict[str, Any]]:
        return to_json(self.certificates.list(profile_name))

    def list_simple_monitors(self, profile_name: str = "") -> list[dict[str, Any]]:
        return to_json(self.simple_monitors.list(profile_name))

    # Container registries

    def list_container_registries(self, profile_name: str = "") -> list[dict[str, Any]]:
        return to_json(self.container_registries.list(profile_name))

    def list_container_registry_users(
        self, profile_name: str, registry_id: str
    ) -> list[dict[str, Any]]:
        return to_json(self.container_registries.list_users(profile_name, registry_id))

    def list_registry_images(
        self, fqdn: str, username: str = "", password: str = "", registry_id: str = ""
    ) -> list[dict[str, Any]]:
        return to_json(self.container_registries.list_images(fqdn, username, password, registry_id))

    def list_registry_tags(
        self,
        fqdn: str,
        image: str,
        username: str = "",
        password: str = "",
        registry_id: str = "",
    ) -> list[dict[str, Any]]:
        return to_json(
            self.container_registries.list_tags(fqdn, image, username, password, registry_id)
        )

    # Account

    def get_auth_status(self, profile_name: str = "") -> dict[str, Any]:
        return to_json(self.auth_status.get(profile_name))

    def list_bills(self, profile_name: str = "", account_id: str = "") -> list[dict[str, Any]]:
        return to_json(self.bills.list_by_contract(profile_name, account_id))

    def get_bill_details(
        self, profile_name: str, member_code: str, bill_id: str
    ) -> list[dict[str, Any]]:
        return to_json(self.bills.get_details(profile_name, member_code, bill_id))

    # KMS

    def list_kms_keys(self, profile_name: str = "") -> list[dict[str, Any]]:
        return to_json(self.kms_keys.list(profile_name))

    # AppRun dedicated

    def list_apprun_clusters(
        self, profile_name: str = "", max_items: int | None = None, cursor: str | None = None
    ) -> dict[str, Any]:
        return to_json(self.apprun.list_clusters(profile_name, max_items, cursor))

    def list_apprun_applications(
        self,
        profile_name: str = "",
        cluster_id: str | None = None,
        max_items: int | None = None,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        return to_json(self.apprun.list_applications(profile_name, cluster_id, max_items, cursor))

    def list_apprun_versions(
        self,
        profile_name: str,
        application_id: str,
        max_items: int | None = None,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        return to_json(self.apprun.list_versions(profile_name, application_id, max_items, cursor))

    def get_apprun_version(
        self, profile_name: str, application_id: str, version: int
    ) -> dict[str, Any]:
        return to_json(self.apprun.get_version(profile_name, application_id, version))

    def set_apprun_active_version(
        self, profile_name: str, application_id: str, version: int
    ) -> None:
        self.apprun.set_active_version(profile_name, application_id, version)

    def clear_apprun_active_version(self, profile_name: str, application_id: str) -> None:
        self.apprun.clear_active_version(profile_name, application_id)

    def list_apprun_auto_scaling_groups(
        self,
        profile_name: str,
        cluster_id: str,
        max_items: int | None = None,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        return to_json(
            self.apprun.list_auto_scaling_groups(profile_name, cluster_id, max_items, cursor)
        )

    def list_apprun_load_balancers(
        self,
        profile_name: str,
        cluster_id: str,
        asg_id: str,
        max_items: int | None = None,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        return to_json(
            self.apprun.list_load_balancers(profile_name, cluster_id, asg_id, max_items, cursor)
        )

    def list_apprun_worker_nodes(
        self,
        profile_name: str,
        cluster_id: str,
        asg_id: str,
        max_items: int | None = None,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        return to_json(
            self.apprun.list_worker_nodes(profile_name, cluster_id, asg_id, max_items, cursor)
        )

    def list_apprun_load_balancer_nodes(
        self,
        profile_name: str,
        cluster_id: str,
        asg_id: str,
        lb_id: str,
        max_items: int | None = None,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        return to_json(
            self.apprun.list_load_balancer_nodes(
                profile_name, cluster_id, asg_id, lb_id, max_items, cursor
            )
        )

    # AppRun shared

    def list_apprun_shared_applications(self, profile_name: str = "") -> list[dict[str, Any]]:
        return to_json(self.apprun_shared.list_applications(profile_name))

    def get_apprun_shared_application(self, profile_name: str, app_id: str) -> dict[str, Any]:
        return to_json(self.apprun_shared.get_application(profile_name, app_id))

    def get_apprun_shared_application_status(self, profile_name: str, app_id: str) -> str:
        return self.apprun_shared.get_application_status(profile_name, app_id)

    def list_apprun_shared_versions(self, profile_name: str, app_id: str) -> list[dict[str, Any]]:
        return to_json(self.apprun_shared.list_versions(profile_name, app_id))

    def list_apprun_shared_traffics(self, profile_name: str, app_id: str) -> list[dict[str, Any]]:
        return to_json(self.apprun_shared.list_traffics(profile_name, app_id))

    def has_apprun_shared_user(self, profile_name: str = "") -> bool:
        return self.apprun_shared.has_user(profile_name)

    # Monitoring Suite

    def list_log_storages(self, profile_name: str = "") -> list[dict[str, Any]]:
        return to_json(self.monitoring.list_logs(profile_name))

    def list_metrics_storages(self, profile_name: str = "") -> list[dict[str, Any]]:
        return to_json(self.monitoring.list_metrics(profile_name))

    def list_trace_storages(self, profile_name: str = "") -> list[dict[str, Any]]:
        return to_json(self.monitoring.list_traces(profile_name))

    def get_metrics_storage(self, profile_name: str, storage_id: str) -> dict[str, Any]:
        return to_json(self.monitoring.get_metrics_storage(profile_name, storage_id))

    def list_metrics_access_keys(self, profile_name: str, storage_id: str) -> list[dict[str, Any]]:
        return to_json(self.monitoring.list_metrics_access_keys(profile_name, storage_id))

    def query_metric_labels(self, profile_name: str, storage_id: str) -> list[dict[str, Any]]:
        return to_json(self.metrics.query_labels(profile_name, storage_id))

    def query_metric_range(
        self,
        profile_name: str,
        storage_id: str,
        query: str,
        start: datetime | float,
        end: datetime | float,
        step: str = "60s",
    ) -> dict[str, Any]:
        return to_json(self.metrics.query_range(profile_name, storage_id, query, start, end, step))

    def query_metric_publishers(self, profile_name: str, storage_id: str) -> list[str]:
        return self.metrics.query_publishers(profile_name, storage_id)

    def query_metrics_by_publisher(
        self, profile_name: str, storage_id: str, publisher: str
    ) -> list[str]:
        return self.metrics.query_metrics_by_publisher(profile_name, storage_id, publisher)

    # Object storage

    def list_object_storage_sites(self, profile_name: str = "") -> list[dict[str, Any]]:
        return to_json(self.object_storage.list_sites(profile_name))

    def list_object_storage_access_keys(
        self, profile_name: str, site_id: str
    ) -> list[dict[str, Any]]:
        return to_json(self.object_storage.list_access_keys(profile_name, site_id))

    def list_buckets(
        self, profile_name: str, site_id: str, access_key_id: str, secret_key: str = ""
    ) -> list[dict[str, Any]]:
        return to_json(
            self.object_storage.list_buckets(profile_name, site_id, access_key_id, secret_key)
        )

    def list_objects(
        self,
        profile_name: str,
        site_id: str,
        access_key_id: str,
        bucket: str,
        prefix: str = "",
        cursor: str = "",
        max_keys: int | None = None,
        secret_key: str = "",
    ) -> dict[str, Any]:
        return to_json(
            self.object_storage.list_objects(
                profile_name, site_id, access_key_id, bucket, prefix, cursor, max_keys, secret_key
            )
        )

    # Secret vault

    def save_secret(self, namespace: str, scope_id: str, principal: str, secret: str) -> None:
        self.vault.save(namespace, scope_id, principal, secret)

    def get_secret(self, namespace: str, scope_id: str, principal: str) -> str:
        return self.vault.get(namespace, scope_id, principal)

    def delete_secret(self, namespace: str, scope_id: str, principal: str) -> None:
        self.vault.delete(namespace, scope_id, principal)

    def has_secret(self, namespace: str, scope_id: str, principal: str) -> bool:
        return self.vault.has(namespace, scope_id, principal)
