"""Time-series queries against a metrics storage.

A query runs as a fixed pipeline of steps threading one context:

1. ``resolve_endpoint`` - read the storage to learn its query endpoint.
2. ``resolve_token`` - take the storage's first access key as bearer token.
3. ``query`` - run the requested query through a Prometheus client.

Steps run strictly in sequence; a failing step stops the pipeline, so no
time-series request is made without an endpoint and a token.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, cast

import structlog

from sakpilot.core.exceptions import BackendError, NoAccessKeyError
from sakpilot.core.zones import BackendKind
from sakpilot.integrations.monitoring import parse_storage_id
from sakpilot.integrations.prometheus import PrometheusClient, normalize_endpoint
from sakpilot.integrations.prometheus.models import PrometheusLabel, QueryRangeResult

if TYPE_CHECKING:
    from sakpilot.core.dispatcher import ClientFactory
    from sakpilot.services.monitoring.storage_manager import MonitoringManager

logger = structlog.get_logger()

METRIC_NAME_LABEL = "__name__"


@dataclass
class MetricsQueryContext:
    """State accumulated while a query runs."""

    profile_name: str
    storage_id: str
    endpoint: str = ""
    token: str = field(default="", repr=False)


type QueryStep[R] = Callable[[PrometheusClient], R]


class MetricsQueryPipeline:
    """Runs time-series queries against Monitoring Suite metrics storages.

    Example:
        ```python
        pipeline = MetricsQueryPipeline(factory, MonitoringManager(factory))
        labels = pipeline.query_labels("default", "123")
        ```
    """

    def __init__(self, factory: ClientFactory, monitoring: MonitoringManager) -> None:
        self._factory = factory
        self._monitoring = monitoring
        self._log = logger.bind(entity="metrics_query")

    def resolve_endpoint(self, ctx: MetricsQueryContext) -> MetricsQueryContext:
        """Resolve the storage's normalized query endpoint.

        Raises:
            InvalidIdentifierError: If the storage ID is not an integer.
            BackendError: If the storage has no query endpoint.
        """
        ctx.storage_id = str(parse_storage_id(ctx.storage_id))
        storage = self._monitoring.get_metrics_storage(ctx.profile_name, ctx.storage_id)
        if not storage.endpoint.strip():
            raise BackendError(
                f"storage {ctx.storage_id} has no endpoint",
                BackendKind.MONITORING.value,
            )
        ctx.endpoint = normalize_endpoint(storage.endpoint)
        self._log.debug("endpoint_resolved", storage_id=ctx.storage_id, endpoint=ctx.endpoint)
        return ctx

    def resolve_token(self, ctx: MetricsQueryContext) -> MetricsQueryContext:
        """Select the storage's first access key.

        Raises:
            NoAccessKeyError: If the storage has no access key.
        """
        keys = self._monitoring.list_metrics_access_keys(ctx.profile_name, ctx.storage_id)
        if not keys:
            raise NoAccessKeyError(ctx.storage_id)
        ctx.token = keys[0].token
        self._log.debug("token_resolved", storage_id=ctx.storage_id, key_id=keys[0].id)
        return ctx

    def query[R](self, ctx: MetricsQueryContext, step: QueryStep[R]) -> R:
        """Run one query step against the resolved endpoint."""
        client = cast(
            PrometheusClient,
            self._factory.create_detached(
                BackendKind.PROMETHEUS, endpoint=ctx.endpoint, token=ctx.token
            ),
        )
        with client:
            return step(client)

    def _run[R](self, profile_name: str, storage_id: str, step: QueryStep[R]) -> R:
        ctx = MetricsQueryContext(profile_name=profile_name, storage_id=str(storage_id))
        ctx = self.resolve_endpoint(ctx)
        ctx = self.resolve_token(ctx)
        return self.query(ctx, step)

    def query_labels(self, profile_name: str, storage_id: str) -> list[PrometheusLabel]:
        """List the metric names stored in a storage."""
        names = self._run(profile_name, storage_id, lambda c: c.get_label_values(METRIC_NAME_LABEL))
        return [PrometheusLabel(name=name) for name in names]

    def query_range(
        self,
        profile_name: str,
        storage_id: str,
        query: str,
        start: datetime | float,
        end: datetime | float,
        step: str = "60s",
    ) -> QueryRangeResult:
        """Run a PromQL range query."""
        body = self._run(profile_name, storage_id, lambda c: c.query_range(query, start, end, step))
        return QueryRangeResult.from_api(body)

    def query_publishers(self, profile_name: str, storage_id: str) -> list[str]:
        """List the publishers that wrote metrics into a storage."""
        return self._run(profile_name, storage_id, lambda c: c.publishers())

    def query_metrics_by_publisher(
        self, profile_name: str, storage_id: str, publisher: str
    ) -> list[str]:
        """List the metric names one publisher wrote, sorted and de-duplicated."""
        return self._run(profile_name, storage_id, lambda c: c.metric_names_by_publisher(publisher))
