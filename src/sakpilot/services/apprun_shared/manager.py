"""AppRun shared manager."""

from __future__ import annotations

from sakpilot.integrations.apprun_shared import AppRunSharedClient
from sakpilot.integrations.apprun_shared.models import (
    SharedApplication,
    SharedApplicationDetail,
    SharedVersion,
    Traffic,
)
from sakpilot.services.base import BaseResourceManager


class AppRunSharedManager(BaseResourceManager[AppRunSharedClient]):
    """Manager for AppRun shared applications, versions and traffic splits."""

    _family = "apprun_shared"
    _entity_name = "apprun_shared"

    def list_applications(self, profile_name: str) -> list[SharedApplication]:
        with self._session(profile_name) as (client, _):
            items = client.list_applications()
        self._log.debug("listed_entities", count=len(items))
        return [SharedApplication.from_api(item) for item in items]

    def get_application(self, profile_name: str, app_id: str) -> SharedApplicationDetail:
        with self._session(profile_name) as (client, _):
            return SharedApplicationDetail.from_api(client.get_application(app_id))

    def get_application_status(self, profile_name: str, app_id: str) -> str:
        with self._session(profile_name) as (client, _):
            return client.get_application_status(app_id)

    def list_versions(self, profile_name: str, app_id: str) -> list[SharedVersion]:
        with self._session(profile_name) as (client, _):
            items = client.list_versions(app_id)
        return [SharedVersion.from_api(item) for item in items]

    def list_traffics(self, profile_name: str, app_id: str) -> list[Traffic]:
        with self._session(profile_name) as (client, _):
            items = client.list_traffics(app_id)
        return [Traffic.from_api(item) for item in items]

    def has_user(self, profile_name: str) -> bool:
        """Return True if the account has signed up for AppRun shared."""
        with self._session(profile_name) as (client, _):
            return client.has_user()
