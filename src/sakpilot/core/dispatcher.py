"""Backend client construction.

Each ``BackendKind`` maps to exactly one constructor in ``CLIENT_BUILDERS``.
Callers name the profile and the backend; the factory resolves the profile
through the credential store and hands the constructor the loaded profile and
the gateway settings. Extra keyword arguments carry what a backend needs
beyond the profile (a registry FQDN, a storage endpoint and token).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog
from pydantic import SecretStr

from sakpilot.core.config import GatewaySettings
from sakpilot.core.profiles import CredentialStore, Profile
from sakpilot.core.zones import BackendKind
from sakpilot.integrations.apprun import AppRunClient
from sakpilot.integrations.apprun_shared import AppRunSharedClient
from sakpilot.integrations.base import BaseBackendClient
from sakpilot.integrations.iaas import IaaSClient
from sakpilot.integrations.kms import KMSClient
from sakpilot.integrations.monitoring import MonitoringClient
from sakpilot.integrations.object_storage import ObjectStorageClient, ObjectStorageCredentials
from sakpilot.integrations.prometheus import PrometheusClient
from sakpilot.integrations.registry import RegistryClient
from sakpilot.logging import token_prefix

logger = structlog.get_logger()

type ClientBuilder = Callable[..., BaseBackendClient]


def _iaas(profile: Profile, settings: GatewaySettings) -> IaaSClient:
    token, secret = profile.credentials
    return IaaSClient(token, secret, settings.endpoints.iaas, settings.timeout, settings.retries)


def _apprun_dedicated(profile: Profile, settings: GatewaySettings) -> AppRunClient:
    token, secret = profile.credentials
    return AppRunClient(
        token, secret, settings.endpoints.apprun_dedicated, settings.timeout, settings.retries
    )


def _apprun_shared(profile: Profile, settings: GatewaySettings) -> AppRunSharedClient:
    token, secret = profile.credentials
    return AppRunSharedClient(
        token, secret, settings.endpoints.apprun_shared, settings.timeout, settings.retries
    )


def _kms(profile: Profile, settings: GatewaySettings) -> KMSClient:
    return KMSClient(profile, settings.endpoints.kms, settings.timeout, settings.retries)


def _monitoring(profile: Profile, settings: GatewaySettings) -> MonitoringClient:
    token, secret = profile.credentials
    return MonitoringClient(
        token, secret, settings.endpoints.monitoring, settings.timeout, settings.retries
    )


def _object_storage(profile: Profile, settings: GatewaySettings) -> ObjectStorageClient:
    token, secret = profile.credentials
    return ObjectStorageClient(
        ObjectStorageCredentials(token=token, secret=secret),
        settings.endpoints.object_storage,
        settings.timeout,
        settings.retries,
    )


def _registry(
    profile: Profile | None,
    settings: GatewaySettings,
    *,
    fqdn: str,
    username: str = "",
    password: str = "",
) -> RegistryClient:
    return RegistryClient(fqdn, username, password, settings.timeout, settings.retries)


def _prometheus(
    profile: Profile | None,
    settings: GatewaySettings,
    *,
    endpoint: str,
    token: str,
) -> PrometheusClient:
    return PrometheusClient(endpoint, token, settings.timeout, settings.retries)


CLIENT_BUILDERS: dict[BackendKind, ClientBuilder] = {
    BackendKind.IAAS: _iaas,
    BackendKind.APPRUN_DEDICATED: _apprun_dedicated,
    BackendKind.APPRUN_SHARED: _apprun_shared,
    BackendKind.KMS: _kms,
    BackendKind.MONITORING: _monitoring,
    BackendKind.OBJECT_STORAGE: _object_storage,
    BackendKind.REGISTRY: _registry,
    BackendKind.PROMETHEUS: _prometheus,
}

# Backends that carry their own credentials instead of the profile's
DETACHED_KINDS = frozenset({BackendKind.REGISTRY, BackendKind.PROMETHEUS})


class ClientFactory:
    """Builds backend clients for a named profile.

    Example:
        ```python
        factory = ClientFactory(settings, CredentialStore(settings.usacloud_dir))
        with factory.create("default", BackendKind.IAAS) as client:
            servers = client.find(IAAS_RESOURCES["server"], "is1a")
        ```
    """

    def __init__(self, settings: GatewaySettings, store: CredentialStore) -> None:
        self.settings = settings
        self.store = store

    def load_profile(self, profile_name: str) -> Profile:
        """Load a profile; the current profile when the name is empty."""
        return self.store.load_profile(profile_name or self.store.default_profile_name())

    def create(self, profile_name: str, kind: BackendKind, **kwargs: Any) -> BaseBackendClient:
        """Create a client for ``kind`` authenticated as ``profile_name``.

        Raises:
            ProfileNotFoundError: If the profile does not exist.
            ProfileCorruptError: If the profile cannot be parsed.
        """
        return self.create_for(self.load_profile(profile_name), kind, **kwargs)

    def create_for(self, profile: Profile, kind: BackendKind, **kwargs: Any) -> BaseBackendClient:
        """Create a client for ``kind`` from an already loaded profile."""
        builder = CLIENT_BUILDERS[BackendKind(kind)]
        logger.debug(
            "client_created",
            backend=BackendKind(kind).value,
            profile=profile.name,
            token_prefix=token_prefix(profile.access_token),
        )
        return builder(profile, self.settings, **kwargs)

    def create_unsaved(
        self, kind: BackendKind, access_token: str, access_token_secret: str
    ) -> BaseBackendClient:
        """Create a client from a credential pair that is not stored as a profile."""
        profile = Profile(
            name="", access_token=access_token, access_token_secret=SecretStr(access_token_secret)
        )
        return self.create_for(profile, kind)

    def create_detached(self, kind: BackendKind, **kwargs: Any) -> BaseBackendClient:
        """Create a client for a backend that does not authenticate with a profile.

        Raises:
            ValueError: If ``kind`` needs a profile.
        """
        kind = BackendKind(kind)
        if kind not in DETACHED_KINDS:
            raise ValueError(f"backend {kind.value} requires a profile")
        logger.debug("client_created", backend=kind.value)
        return CLIENT_BUILDERS[kind](None, self.settings, **kwargs)
