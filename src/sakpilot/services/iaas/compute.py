"""Server, disk and archive managers."""

from __future__ import annotations

from typing import Any

from sakpilot.integrations.iaas.models import Archive, Disk, Server
from sakpilot.services.iaas.base import IaaSResourceManager

USER_SCOPE = "user"


class ServerManager(IaaSResourceManager[Server]):
    """Manager for servers, including power control.

    Power actions are fire-and-forget: they return once the API accepted the
    request. Use ``get_status`` to follow the instance state.
    """

    _family = "servers"
    _entity_name = "server"
    _resource = "server"

    def _adapt(self, item: dict[str, Any], zone: str) -> Server:
        return Server.from_api(item, zone)

    def get(self, profile_name: str, server_id: str, zone: str | None = None) -> Server:
        """Get a single server.

        Raises:
            BackendNotFoundError: If the server doesn't exist.
        """
        with self._session(profile_name, zone) as (client, resolved):
            item = client.read(self._resource, resolved, server_id)
        return Server.from_api(item, resolved)

    def get_status(self, profile_name: str, server_id: str, zone: str | None = None) -> str:
        """Return the instance status (e.g. "up", "down")."""
        with self._session(profile_name, zone) as (client, resolved):
            return client.server_power_status(resolved, server_id)

    def power_on(self, profile_name: str, server_id: str, zone: str | None = None) -> None:
        with self._session(profile_name, zone) as (client, resolved):
            client.boot_server(resolved, server_id)
        self._log.info("server_power_on", id=server_id, zone=resolved)

    def power_off(self, profile_name: str, server_id: str, zone: str | None = None) -> None:
        """Request a graceful (ACPI) shutdown."""
        with self._session(profile_name, zone) as (client, resolved):
            client.shutdown_server(resolved, server_id, force=False)
        self._log.info("server_power_off", id=server_id, zone=resolved)

    def force_stop(self, profile_name: str, server_id: str, zone: str | None = None) -> None:
        """Stop the server immediately."""
        with self._session(profile_name, zone) as (client, resolved):
            client.shutdown_server(resolved, server_id, force=True)
        self._log.info("server_force_stop", id=server_id, zone=resolved)


class DiskManager(IaaSResourceManager[Disk]):
    _family = "disks"
    _entity_name = "disk"
    _resource = "disk"

    def _adapt(self, item: dict[str, Any], zone: str) -> Disk:
        return Disk.from_api(item, zone)


class ArchiveManager(IaaSResourceManager[Archive]):
    """Manager for archives owned by the account.

    Public and shared archives are never listed.
    """

    _family = "archives"
    _entity_name = "archive"
    _resource = "archive"

    def _adapt(self, item: dict[str, Any], zone: str) -> Archive:
        return Archive.from_api(item)

    def _include(self, item: dict[str, Any]) -> bool:
        return item.get("Scope") == USER_SCOPE
