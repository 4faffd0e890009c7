"""Managers for global IaaS services: DNS, GSLB, certificates, simple
monitors and container registries.
"""

from __future__ import annotations

import builtins
from typing import TYPE_CHECKING, Any, cast

from sakpilot.core.exceptions import BackendError, SecretNotFoundError
from sakpilot.core.vault import SecretNamespace
from sakpilot.core.zones import BackendKind
from sakpilot.integrations.iaas.models import (
    GSLB,
    Certificate,
    ContainerRegistry,
    ContainerRegistryUser,
    DNSZone,
    SimpleMonitor,
)
from sakpilot.integrations.registry import RegistryClient
from sakpilot.integrations.registry.models import RegistryImage, RegistryTag
from sakpilot.services.iaas.base import IaaSResourceManager

if TYPE_CHECKING:
    from sakpilot.core.dispatcher import ClientFactory
    from sakpilot.core.vault import SecretVault


class DNSManager(IaaSResourceManager[DNSZone]):
    _family = "dns"
    _entity_name = "dns_zone"
    _resource = "dns"

    def _adapt(self, item: dict[str, Any], zone: str) -> DNSZone:
        return DNSZone.from_api(item)

    def get(self, profile_name: str, dns_id: str) -> DNSZone:
        """Get a DNS zone with its records."""
        return DNSZone.from_api(self._get(profile_name, dns_id))


class GSLBManager(IaaSResourceManager[GSLB]):
    _family = "gslb"
    _entity_name = "gslb"
    _resource = "gslb"

    def _adapt(self, item: dict[str, Any], zone: str) -> GSLB:
        return GSLB.from_api(item)

    def get(self, profile_name: str, gslb_id: str) -> GSLB:
        return GSLB.from_api(self._get(profile_name, gslb_id))


class CertificateManager(IaaSResourceManager[Certificate]):
    _family = "certificates"
    _entity_name = "certificate_authority"
    _resource = "certificateauthority"

    def _adapt(self, item: dict[str, Any], zone: str) -> Certificate:
        return Certificate.from_api(item)


class SimpleMonitorManager(IaaSResourceManager[SimpleMonitor]):
    _family = "simple_monitors"
    _entity_name = "simple_monitor"
    _resource = "simplemon"

    def _adapt(self, item: dict[str, Any], zone: str) -> SimpleMonitor:
        return SimpleMonitor.from_api(item)


class ContainerRegistryManager(IaaSResourceManager[ContainerRegistry]):
    """Manager for container registries and the images they hold.

    Registries and their users are read through the IaaS API. Images and tags
    are read from the registry itself, authenticated as a registry user. When
    no password is given, the one saved in the vault for
    ``(registry_id, username)`` is used; without either, access is anonymous.
    """

    _family = "container_registries"
    _entity_name = "container_registry"
    _resource = "containerregistry"

    def __init__(self, factory: ClientFactory, vault: SecretVault | None = None) -> None:
        super().__init__(factory)
        self._vault = vault

    def _adapt(self, item: dict[str, Any], zone: str) -> ContainerRegistry:
        return ContainerRegistry.from_api(item)

    def list_users(
        self, profile_name: str, registry_id: str
    ) -> builtins.list[ContainerRegistryUser]:
        with self._session(profile_name) as (client, _):
            users = client.container_registry_users(registry_id)
        return [ContainerRegistryUser.from_api(u) for u in users]

    def _registry_password(self, registry_id: str, username: str, password: str) -> str:
        if password or not (registry_id and username and self._vault):
            return password
        try:
            return self._vault.get(SecretNamespace.CONTAINER_REGISTRY, registry_id, username)
        except SecretNotFoundError:
            self._log.debug("registry_secret_not_saved", registry_id=registry_id, user=username)
            return ""

    def _registry(
        self, fqdn: str, username: str, password: str, registry_id: str
    ) -> RegistryClient:
        client = self._factory.create_detached(
            BackendKind.REGISTRY,
            fqdn=fqdn,
            username=username,
            password=self._registry_password(registry_id, username, password),
        )
        return cast(RegistryClient, client)

    def list_images(
        self,
        fqdn: str,
        username: str = "",
        password: str = "",
        registry_id: str = "",
    ) -> builtins.list[RegistryImage]:
        """List the repositories of a registry."""
        with self._registry(fqdn, username, password, registry_id) as client:
            repositories = client.list_repositories()
        self._log.debug("listed_images", registry=fqdn, count=len(repositories))
        return [RegistryImage(name=name) for name in repositories]

    def list_tags(
        self,
        fqdn: str,
        image: str,
        username: str = "",
        password: str = "",
        registry_id: str = "",
    ) -> builtins.list[RegistryTag]:
        """List the tags of an image with digest and size.

        A tag whose manifest cannot be read is listed with size 0 and no digest.
        """
        tags: builtins.list[RegistryTag] = []
        with self._registry(fqdn, username, password, registry_id) as client:
            for name in client.list_tags(image):
                try:
                    digest, size = client.get_manifest(image, name)
                except BackendError as e:
                    self._log.warning("manifest_unreadable", image=image, tag=name, error=str(e))
                    tags.append(RegistryTag(name=name))
                    continue
                tags.append(RegistryTag(name=name, size=size, digest=digest))
        return tags
