"""Unit tests for backend client construction."""

from __future__ import annotations

import pytest

from sakpilot.core.dispatcher import CLIENT_BUILDERS, DETACHED_KINDS, ClientFactory
from sakpilot.core.exceptions import ProfileNotFoundError
from sakpilot.core.zones import BackendKind
from sakpilot.integrations.apprun import AppRunClient
from sakpilot.integrations.apprun_shared import AppRunSharedClient
from sakpilot.integrations.iaas import IaaSClient
from sakpilot.integrations.kms import KMSClient
from sakpilot.integrations.monitoring import MonitoringClient
from sakpilot.integrations.object_storage import ObjectStorageClient
from sakpilot.integrations.prometheus import PrometheusClient
from sakpilot.integrations.registry import RegistryClient


class TestClientBuilders:
    """Tests for the backend registry."""

    @pytest.mark.unit
    def test_every_kind_has_a_builder(self) -> None:
        assert set(CLIENT_BUILDERS) == set(BackendKind)

    @pytest.mark.unit
    def test_detached_kinds(self) -> None:
        assert DETACHED_KINDS == {BackendKind.REGISTRY, BackendKind.PROMETHEUS}


class TestClientFactory:
    """Tests for ClientFactory."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("kind", "client_class"),
        [
            (BackendKind.IAAS, IaaSClient),
            (BackendKind.APPRUN_DEDICATED, AppRunClient),
            (BackendKind.APPRUN_SHARED, AppRunSharedClient),
            (BackendKind.KMS, KMSClient),
            (BackendKind.MONITORING, MonitoringClient),
            (BackendKind.OBJECT_STORAGE, ObjectStorageClient),
        ],
    )
    def test_create_for_profile(
        self, factory: ClientFactory, write_profile, kind: BackendKind, client_class: type
    ) -> None:
        write_profile("work")

        client = factory.create("work", kind)

        assert isinstance(client, client_class)
        assert client.backend_kind is kind
        assert client.timeout == 5

    @pytest.mark.unit
    def test_empty_name_uses_current_profile(self, factory: ClientFactory, write_profile) -> None:
        write_profile("alpha")
        write_profile("beta", current=True)

        assert factory.load_profile("").name == "beta"

    @pytest.mark.unit
    def test_missing_profile(self, factory: ClientFactory) -> None:
        with pytest.raises(ProfileNotFoundError):
            factory.create("ghost", BackendKind.IAAS)

    @pytest.mark.unit
    def test_create_unsaved(self, factory: ClientFactory) -> None:
        client = factory.create_unsaved(BackendKind.IAAS, "tok", "sec")

        assert isinstance(client, IaaSClient)
        assert client.base_url.endswith("/zone/is1a/api/cloud/1.1")

    @pytest.mark.unit
    def test_create_detached_registry(self, factory: ClientFactory) -> None:
        client = factory.create_detached(BackendKind.REGISTRY, fqdn="example.sakuracr.jp")

        assert isinstance(client, RegistryClient)
        assert client.base_url == "https://example.sakuracr.jp"

    @pytest.mark.unit
    def test_create_detached_prometheus(self, factory: ClientFactory) -> None:
        client = factory.create_detached(
            BackendKind.PROMETHEUS, endpoint="metrics.example.test/", token="tkn"
        )

        assert isinstance(client, PrometheusClient)
        assert client.base_url == "https://metrics.example.test"

    @pytest.mark.unit
    def test_create_detached_rejects_profile_backends(self, factory: ClientFactory) -> None:
        with pytest.raises(ValueError, match="requires a profile"):
            factory.create_detached(BackendKind.IAAS)
