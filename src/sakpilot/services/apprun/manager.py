"""AppRun dedicated manager.

Listings return a ``ListResult`` holding one bounded page: ``truncated`` is
set when the API reports a further page, and ``next_cursor`` resumes it.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from sakpilot.core.exceptions import InvalidIdentifierError
from sakpilot.core.models import ListResult, ViewModel
from sakpilot.integrations.apprun import AppRunClient
from sakpilot.integrations.apprun.client import Page
from sakpilot.integrations.apprun.models import (
    Application,
    ApplicationVersion,
    ApplicationVersionDetail,
    AutoScalingGroup,
    Cluster,
    LoadBalancer,
    LoadBalancerNode,
    WorkerNode,
)
from sakpilot.services.base import BaseResourceManager


def _to_list_result[T: ViewModel](
    page: Page, adapt: Callable[[dict[str, Any]], T]
) -> ListResult[T]:
    return ListResult[T](
        items=[adapt(item) for item in page.items],
        truncated=bool(page.next_cursor),
        next_cursor=page.next_cursor,
    )


class AppRunManager(BaseResourceManager[AppRunClient]):
    """Manager for AppRun dedicated clusters, applications and their nodes.

    All identifiers except version numbers are UUIDs and are validated before
    any request is made.
    """

    _family = "apprun"
    _entity_name = "apprun"

    def list_clusters(
        self, profile_name: str, max_items: int | None = None, cursor: str | None = None
    ) -> ListResult[Cluster]:
        with self._session(profile_name) as (client, _):
            page = client.list_clusters(max_items, cursor)
        return _to_list_result(page, Cluster.from_api)

    def list_applications(
        self,
        profile_name: str,
        cluster_id: str | None = None,
        max_items: int | None = None,
        cursor: str | None = None,
    ) -> ListResult[Application]:
        with self._session(profile_name) as (client, _):
            page = client.list_applications(cluster_id, max_items, cursor)
        return _to_list_result(page, Application.from_api)

    def list_versions(
        self,
        profile_name: str,
        application_id: str,
        max_items: int | None = None,
        cursor: str | None = None,
    ) -> ListResult[ApplicationVersion]:
        with self._session(profile_name) as (client, _):
            page = client.list_versions(application_id, max_items, cursor)
        return _to_list_result(page, ApplicationVersion.from_api)

    def get_version(
        self, profile_name: str, application_id: str, version: int
    ) -> ApplicationVersionDetail:
        """Get the full definition of one application version."""
        with self._session(profile_name) as (client, _):
            item = client.get_version(application_id, version)
        return ApplicationVersionDetail.from_api(item)

    def set_active_version(self, profile_name: str, application_id: str, version: int) -> None:
        """Route the application's traffic to ``version``.

        Raises:
            InvalidIdentifierError: If ``version`` is not a positive number.
        """
        if version < 1:
            raise InvalidIdentifierError("version", version, details="expected a positive number")
        with self._session(profile_name) as (client, _):
            client.update_active_version(application_id, version)
        self._log.info("active_version_set", application_id=application_id, version=version)

    def clear_active_version(self, profile_name: str, application_id: str) -> None:
        with self._session(profile_name) as (client, _):
            client.update_active_version(application_id, None)
        self._log.info("active_version_cleared", application_id=application_id)

    def list_auto_scaling_groups(
        self,
        profile_name: str,
        cluster_id: str,
        max_items: int | None = None,
        cursor: str | None = None,
    ) -> ListResult[AutoScalingGroup]:
        with self._session(profile_name) as (client, _):
            page = client.list_auto_scaling_groups(cluster_id, max_items, cursor)
        return _to_list_result(page, AutoScalingGroup.from_api)

    def list_load_balancers(
        self,
        profile_name: str,
        cluster_id: str,
        asg_id: str,
        max_items: int | None = None,
        cursor: str | None = None,
    ) -> ListResult[LoadBalancer]:
        with self._session(profile_name) as (client, _):
            page = client.list_load_balancers(cluster_id, asg_id, max_items, cursor)
        return _to_list_result(page, LoadBalancer.from_api)

    def list_worker_nodes(
        self,
        profile_name: str,
        cluster_id: str,
        asg_id: str,
        max_items: int | None = None,
        cursor: str | None = None,
    ) -> ListResult[WorkerNode]:
        with self._session(profile_name) as (client, _):
            page = client.list_worker_nodes(cluster_id, asg_id, max_items, cursor)
        return _to_list_result(page, WorkerNode.from_api)

    def list_load_balancer_nodes(
        self,
        profile_name: str,
        cluster_id: str,
        asg_id: str,
        lb_id: str,
        max_items: int | None = None,
        cursor: str | None = None,
    ) -> ListResult[LoadBalancerNode]:
        with self._session(profile_name) as (client, _):
            page = client.list_load_balancer_nodes(cluster_id, asg_id, lb_id, max_items, cursor)
        return _to_list_result(page, LoadBalancerNode.from_api)
