"""Base resource manager for profile-scoped resource families.

Every family manager inherits from ``BaseResourceManager``. The base class
binds the logger to the entity name, resolves the zone for zone-scoped
families and opens a short-lived backend client for each call.
"""

from __future__ import annotations

from abc import ABC
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, cast

import structlog

from sakpilot.core.zones import BackendKind, family_info, resolve_zone

if TYPE_CHECKING:
    from sakpilot.core.dispatcher import ClientFactory
    from sakpilot.core.profiles import Profile
    from sakpilot.integrations.base import BaseBackendClient

logger = structlog.get_logger()


class BaseResourceManager[C: BaseBackendClient](ABC):
    """Abstract base class for resource family managers.

    Type Parameters:
        C: The backend client class this family talks to.

    Class Attributes:
        _family: Key of the family in RESOURCE_FAMILIES.
        _entity_name: Human-readable entity name for logging.

    Example:
        >>> class DiskManager(BaseResourceManager[IaaSClient]):
        ...     _family = "disks"
        ...     _entity_name = "disk"
    """

    _family: str = ""
    _entity_name: str = ""

    def __init__(self, factory: ClientFactory) -> None:
        """Initialize the resource manager.

        Args:
            factory: Client factory resolving profiles to backend clients.
        """
        self._factory = factory
        self._log = logger.bind(entity=self._entity_name)

    @property
    def backend_kind(self) -> BackendKind:
        """Return the backend serving this family."""
        return family_info(self._family).backend

    def _profile(self, profile_name: str) -> Profile:
        return self._factory.load_profile(profile_name)

    def _resolve_zone(self, profile: Profile, zone: str | None) -> str | None:
        """Resolve the target zone; None for global families."""
        return resolve_zone(self._family, zone, profile, self._factory.settings.fallback_zone)

    @contextmanager
    def _client(self, profile: Profile, **kwargs: Any) -> Iterator[C]:
        """Open a backend client for one call and close it afterwards."""
        client = cast("C", self._factory.create_for(profile, self.backend_kind, **kwargs))
        with client:
            yield client

    @contextmanager
    def _session(self, profile_name: str, zone: str | None = None) -> Iterator[tuple[C, str]]:
        """Load the profile, resolve the zone and open a client.

        Yields:
            Tuple of (client, resolved zone). The zone is "" for global families.
        """
        profile = self._profile(profile_name)
        resolved = self._resolve_zone(profile, zone) or ""
        self._log.debug("session_opened", profile=profile.name, zone=resolved or None)
        with self._client(profile) as client:
            yield client, resolved
