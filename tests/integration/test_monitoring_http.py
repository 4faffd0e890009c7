"""Integration tests for the Monitoring Suite, Prometheus, KMS and object storage clients."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
import respx
from httpx import Response
from pydantic import SecretStr

from sakpilot.core.exceptions import BackendError, InvalidIdentifierError, PrometheusQueryError
from sakpilot.core.profiles import Profile
from sakpilot.integrations.kms import KMSClient
from sakpilot.integrations.monitoring import MonitoringClient
from sakpilot.integrations.object_storage import ObjectStorageClient, ObjectStorageCredentials
from sakpilot.integrations.prometheus import PrometheusClient

MONITORING_URL = "https://secure.sakura.ad.jp/cloud/api/monitoring/1.0"
PROMETHEUS_URL = "https://abc.metrics.example"
KMS_URL = "https://secure.sakura.ad.jp/cloud/zone/is1a/api/cloud/1.1/kms"
OBJECT_STORAGE_URL = "https://secure.sakura.ad.jp/cloud/zone/is1a/api/objectstorage/1.0"


@pytest.fixture
def monitoring() -> MonitoringClient:
    return MonitoringClient("tok", "sec", MONITORING_URL, timeout=5, retries=1)


@pytest.fixture
def prometheus() -> PrometheusClient:
    return PrometheusClient("abc.metrics.example", "bearer-token", timeout=5, retries=1)


class TestMonitoringClient:
    """Tests for MonitoringClient."""

    @pytest.mark.integration
    @respx.mock
    def test_follows_next_links(self, monitoring: MonitoringClient) -> None:
        route = respx.get(f"{MONITORING_URL}/logs/storages/").mock(
            side_effect=[
                Response(
                    200,
                    json={
                        "count": 3,
                        "next": f"{MONITORING_URL}/logs/storages/?page=2",
                        "results": [{"id": 1}, {"id": 2}],
                    },
                ),
                Response(200, json={"count": 3, "next": None, "results": [{"id": 3}]}),
            ]
        )

        with monitoring:
            storages = monitoring.list_log_storages()

        assert [s["id"] for s in storages] == [1, 2, 3]
        assert route.calls[1].request.url.params["page"] == "2"

    @pytest.mark.integration
    @respx.mock
    def test_access_keys_path(self, monitoring: MonitoringClient) -> None:
        route = respx.get(f"{MONITORING_URL}/metrics/storages/42/keys/").mock(
            return_value=Response(200, json={"next": None, "results": [{"id": 7, "token": "t"}]})
        )

        with monitoring:
            keys = monitoring.list_metrics_access_keys("42")

        assert route.called
        assert keys == [{"id": 7, "token": "t"}]

    @pytest.mark.integration
    def test_invalid_storage_id(self, monitoring: MonitoringClient) -> None:
        with pytest.raises(InvalidIdentifierError):
            monitoring.get_metrics_storage("storage-a")

    @pytest.mark.integration
    @respx.mock
    def test_endless_next_links_raise(self, monitoring: MonitoringClient) -> None:
        """A listing whose "next" link never ends should fail, not return a partial list."""
        route = respx.get(f"{MONITORING_URL}/logs/storages/").mock(
            return_value=Response(
                200,
                json={"next": f"{MONITORING_URL}/logs/storages/?page=2", "results": [{"id": 1}]},
            )
        )

        with monitoring, pytest.raises(BackendError, match="exceeds 100 pages") as exc_info:
            monitoring.list_log_storages()

        assert route.call_count == 100
        assert exc_info.value.backend_kind == "monitoring"


class TestPrometheusClient:
    """Tests for PrometheusClient."""

    @pytest.mark.integration
    @respx.mock
    def test_label_values_with_bearer(self, prometheus: PrometheusClient) -> None:
        route = respx.get(f"{PROMETHEUS_URL}/prometheus/api/v1/label/__name__/values").mock(
            return_value=Response(200, json={"status": "success", "data": ["up", "node_load1"]})
        )

        with prometheus:
            names = prometheus.get_label_values("__name__")

        assert names == ["up", "node_load1"]
        assert route.calls.last.request.headers["Authorization"] == "Bearer bearer-token"

    @pytest.mark.integration
    @respx.mock
    def test_query_range_params(self, prometheus: PrometheusClient) -> None:
        route = respx.get(f"{PROMETHEUS_URL}/prometheus/api/v1/query_range").mock(
            return_value=Response(200, json={"status": "success", "data": {"resultType": "matrix", "result": []}})
        )
        start = datetime(2024, 1, 1, tzinfo=UTC)

        with prometheus:
            body = prometheus.query_range("up", start, 1704070800, step="5m")

        params = route.calls.last.request.url.params
        assert params["query"] == "up"
        assert float(params["start"]) == start.timestamp()
        assert params["end"] == "1704070800"
        assert params["step"] == "5m"
        assert body["status"] == "success"

    @pytest.mark.integration
    @respx.mock
    def test_error_envelope(self, prometheus: PrometheusClient) -> None:
        respx.get(f"{PROMETHEUS_URL}/prometheus/api/v1/query_range").mock(
            return_value=Response(200, json={"status": "error", "errorType": "bad_data", "error": "parse error"})
        )

        with prometheus, pytest.raises(PrometheusQueryError, match="parse error"):
            prometheus.query_range("up{", 0, 60)

    @pytest.mark.integration
    @respx.mock
    def test_metric_names_by_publisher(self, prometheus: PrometheusClient) -> None:
        route = respx.get(f"{PROMETHEUS_URL}/prometheus/api/v1/series").mock(
            return_value=Response(
                200,
                json={
                    "status": "success",
                    "data": [
                        {"__name__": "b_metric", "sakuracloud_publisher": "apprun"},
                        {"__name__": "a_metric", "sakuracloud_publisher": "apprun"},
                        {"__name__": "b_metric", "sakuracloud_publisher": "apprun", "x": "1"},
                    ],
                },
            )
        )

        with prometheus:
            names = prometheus.metric_names_by_publisher('app"run')

        assert names == ["a_metric", "b_metric"]
        assert route.calls.last.request.url.params["match[]"] == '{sakuracloud_publisher="app\\"run"}'


class TestKMSClient:
    """Tests for KMSClient."""

    @pytest.mark.integration
    @respx.mock
    def test_list_keys(self) -> None:
        profile = Profile(name="p", access_token="tok", access_token_secret=SecretStr("sec"))
        respx.get(f"{KMS_URL}/keys").mock(
            return_value=Response(200, json={"keys": [{"id": "110000000001", "name": "key-a"}]})
        )

        with KMSClient(profile, KMS_URL, retries=1) as client:
            keys = client.list_keys()

        assert keys == [{"id": "110000000001", "name": "key-a"}]


class TestObjectStorageClient:
    """Tests for ObjectStorageClient."""

    @pytest.fixture
    def client(self) -> ObjectStorageClient:
        return ObjectStorageClient(ObjectStorageCredentials("tok", "sec"), OBJECT_STORAGE_URL, retries=1)

    @pytest.mark.integration
    @respx.mock
    def test_list_sites(self, client: ObjectStorageClient) -> None:
        respx.get(f"{OBJECT_STORAGE_URL}/fed/v1/clusters").mock(
            return_value=Response(200, json={"data": [{"id": "isk01", "s3_endpoint": "s3.isk01.example"}]})
        )

        with client:
            assert client.list_sites()[0]["id"] == "isk01"

    @pytest.mark.integration
    @respx.mock
    def test_list_access_keys_error(self, client: ObjectStorageClient) -> None:
        respx.get(f"{OBJECT_STORAGE_URL}/isk01/v2/account/keys").mock(
            return_value=Response(500, json={"message": "internal"})
        )

        with client, pytest.raises(BackendError, match="internal"):
            client.list_access_keys("isk01")

    @pytest.mark.integration
    def test_credentials_repr_hides_secret(self) -> None:
        assert "sec-value" not in repr(ObjectStorageCredentials("tok", "sec-value"))

    @pytest.mark.integration
    @pytest.mark.parametrize("site_id", ["isk01/../tky01", "isk01?x=1", "isk01#", ""])
    def test_unsafe_site_id_makes_no_request(
        self, client: ObjectStorageClient, site_id: str
    ) -> None:
        with respx.mock(assert_all_called=False) as router:
            route = router.get(url__startswith=OBJECT_STORAGE_URL)
            with client, pytest.raises(InvalidIdentifierError, match="site id"):
                client.list_access_keys(site_id)
        assert not route.called
