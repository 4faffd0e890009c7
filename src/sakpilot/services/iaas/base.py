"""Shared list/get behaviour for families served by the IaaS API."""

from __future__ import annotations

import builtins
from abc import abstractmethod
from typing import Any

from sakpilot.core.models import ViewModel
from sakpilot.integrations.iaas import IaaSClient
from sakpilot.services.base import BaseResourceManager


class IaaSResourceManager[T: ViewModel](BaseResourceManager[IaaSClient]):
    """Base class for IaaS-backed families.

    Subclasses name the IaaS resource and adapt one upstream entry into the
    family's view model. Zone-scoped families get the resolved zone passed to
    ``_adapt``; global families get "".

    Class Attributes:
        _resource: Key of the resource in IAAS_RESOURCES.
    """

    _resource: str = ""

    @abstractmethod
    def _adapt(self, item: dict[str, Any], zone: str) -> T:
        """Convert one upstream entry into the view model."""

    def _include(self, item: dict[str, Any]) -> bool:
        """Filter applied to every listed entry."""
        return True

    def _find(self, client: IaaSClient, zone: str) -> builtins.list[dict[str, Any]]:
        if zone:
            return client.find(self._resource, zone)
        return client.find_global(self._resource)

    def _read(self, client: IaaSClient, zone: str, resource_id: str) -> dict[str, Any]:
        if zone:
            return client.read(self._resource, zone, resource_id)
        return client.read_global(self._resource, resource_id)

    def list(self, profile_name: str, zone: str | None = None) -> builtins.list[T]:
        """List the family's resources.

        Args:
            profile_name: Profile to authenticate as ("" for the current one).
            zone: Target zone for zone-scoped families; ignored otherwise.

        Returns:
            The adapted resources; an empty list when there are none.
        """
        with self._session(profile_name, zone) as (client, resolved):
            items = self._find(client, resolved)
        entities = [self._adapt(item, resolved) for item in items if self._include(item)]
        self._log.debug("listed_entities", zone=resolved or None, count=len(entities))
        return entities

    def _get(self, profile_name: str, resource_id: str, zone: str | None = None) -> dict[str, Any]:
        with self._session(profile_name, zone) as (client, resolved):
            item = self._read(client, resolved, resource_id)
        self._log.debug("got_entity", id=resource_id, zone=resolved or None)
        return item
