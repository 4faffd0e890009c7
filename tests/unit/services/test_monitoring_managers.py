"""Unit tests for Monitoring Suite storages and metrics queries."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from sakpilot.core.dispatcher import ClientFactory
from sakpilot.core.exceptions import BackendError, InvalidIdentifierError, NoAccessKeyError
from sakpilot.core.zones import BackendKind
from sakpilot.services.monitoring import MetricsQueryContext, MetricsQueryPipeline, MonitoringManager


@pytest.fixture
def monitoring(factory: ClientFactory) -> MonitoringManager:
    return MonitoringManager(factory)


@pytest.fixture
def prometheus_client(factory: ClientFactory, mocker: Any) -> MagicMock:
    """Make the factory hand out a mock Prometheus client."""
    client = MagicMock()
    mocker.patch.object(factory, "create_detached", return_value=client)
    return client


class TestMonitoringManager:
    """Tests for MonitoringManager."""

    @pytest.mark.unit
    def test_metrics_storages_with_routings(
        self, monitoring: MonitoringManager, mock_client: MagicMock, work_profile: str
    ) -> None:
        mock_client.list_metrics_storages.return_value = [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]
        mock_client.list_metrics_routings.return_value = [
            {"id": 10, "publisher_code": "apprun", "variant": "metrics", "metrics_storage": {"id": 2}},
            {"id": 11, "publisher_code": "dbaas", "variant": "v2", "metrics_storage": {"id": 2}},
        ]

        storages = monitoring.list_metrics(work_profile)

        assert storages[0].routings == []
        assert [r.name for r in storages[1].routings] == ["apprun (metrics)", "dbaas (v2)"]

    @pytest.mark.unit
    def test_routing_failure_degrades(
        self, monitoring: MonitoringManager, mock_client: MagicMock, work_profile: str
    ) -> None:
        """Storages should still be listed when routings cannot be read."""
        mock_client.list_log_storages.return_value = [{"id": 1, "name": "logs"}]
        mock_client.list_log_routings.side_effect = BackendError("forbidden", "monitoring", 403)

        storages = monitoring.list_logs(work_profile)

        assert [(s.id, s.routings) for s in storages] == [("1", [])]

    @pytest.mark.unit
    def test_storage_failure_propagates(
        self, monitoring: MonitoringManager, mock_client: MagicMock, work_profile: str
    ) -> None:
        mock_client.list_trace_storages.side_effect = BackendError("down", "monitoring", 503)

        with pytest.raises(BackendError):
            monitoring.list_traces(work_profile)


class TestMetricsQueryPipeline:
    """Tests for MetricsQueryPipeline."""

    @pytest.fixture
    def pipeline(
        self, factory: ClientFactory, monitoring: MonitoringManager
    ) -> MetricsQueryPipeline:
        return MetricsQueryPipeline(factory, monitoring)

    @pytest.mark.unit
    def test_labels(
        self,
        pipeline: MetricsQueryPipeline,
        factory: ClientFactory,
        mock_client: MagicMock,
        prometheus_client: MagicMock,
        work_profile: str,
    ) -> None:
        mock_client.get_metrics_storage.return_value = {"id": 42, "endpoints": {"address": "abc.metrics.example/"}}
        mock_client.list_metrics_access_keys.return_value = [{"id": 1, "token": "first"}, {"id": 2, "token": "second"}]
        prometheus_client.get_label_values.return_value = ["up"]

        labels = pipeline.query_labels(work_profile, "42")

        factory.create_detached.assert_called_once_with(
            BackendKind.PROMETHEUS, endpoint="https://abc.metrics.example", token="first"
        )
        prometheus_client.get_label_values.assert_called_once_with("__name__")
        assert [label.name for label in labels] == ["up"]

    @pytest.mark.unit
    def test_no_access_key_stops_before_query(
        self,
        pipeline: MetricsQueryPipeline,
        factory: ClientFactory,
        mock_client: MagicMock,
        prometheus_client: MagicMock,
        work_profile: str,
    ) -> None:
        """No time-series request should be made without an access key."""
        mock_client.get_metrics_storage.return_value = {"id": 42, "endpoints": {"address": "abc.metrics.example"}}
        mock_client.list_metrics_access_keys.return_value = []

        with pytest.raises(NoAccessKeyError, match="storage 42"):
            pipeline.query_labels(work_profile, "42")

        factory.create_detached.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.parametrize("endpoints", [{}, {"address": ""}, {"address": "  "}, None])
    def test_storage_without_endpoint(
        self,
        pipeline: MetricsQueryPipeline,
        factory: ClientFactory,
        mock_client: MagicMock,
        prometheus_client: MagicMock,
        work_profile: str,
        endpoints: dict[str, str] | None,
    ) -> None:
        mock_client.get_metrics_storage.return_value = {"id": 42, "endpoints": endpoints}

        with pytest.raises(BackendError, match="storage 42 has no endpoint"):
            pipeline.query_labels(work_profile, "42")

        mock_client.list_metrics_access_keys.assert_not_called()
        factory.create_detached.assert_not_called()

    @pytest.mark.unit
    def test_invalid_storage_id(
        self, pipeline: MetricsQueryPipeline, mock_client: MagicMock, work_profile: str
    ) -> None:
        with pytest.raises(InvalidIdentifierError):
            pipeline.query_labels(work_profile, "abc")

        mock_client.get_metrics_storage.assert_not_called()

    @pytest.mark.unit
    def test_range(
        self,
        pipeline: MetricsQueryPipeline,
        mock_client: MagicMock,
        prometheus_client: MagicMock,
        work_profile: str,
    ) -> None:
        mock_client.get_metrics_storage.return_value = {"id": 42, "endpoints": {"address": "abc.metrics.example"}}
        mock_client.list_metrics_access_keys.return_value = [{"id": 1, "token": "first"}]
        prometheus_client.query_range.return_value = {
            "status": "success",
            "data": {"resultType": "matrix", "result": [{"metric": {"__name__": "up"}, "values": [[0, "1"]]}]},
        }

        result = pipeline.query_range(work_profile, "42", "up", 0, 60)

        prometheus_client.query_range.assert_called_once_with("up", 0, 60, "60s")
        assert result.data.result_type == "matrix"
        assert result.data.result[0].metric == {"__name__": "up"}

    @pytest.mark.unit
    def test_context_repr_hides_token(self) -> None:
        ctx = MetricsQueryContext(profile_name="work", storage_id="42", token="bearer-secret")

        assert "bearer-secret" not in repr(ctx)
