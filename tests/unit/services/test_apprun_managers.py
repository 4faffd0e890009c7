"""Unit tests for AppRun dedicated, AppRun shared and KMS managers."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from sakpilot.core.dispatcher import ClientFactory
from sakpilot.core.exceptions import BackendError, InvalidIdentifierError
from sakpilot.core.zones import BackendKind
from sakpilot.integrations.apprun.client import Page
from sakpilot.services.apprun import AppRunManager
from sakpilot.services.apprun_shared import AppRunSharedManager
from sakpilot.services.kms import KMSKeyManager

APP_ID = "5e6f7a8b-9c0d-4e1f-8a2b-3c4d5e6f7a8b"


class TestAppRunManager:
    """Tests for AppRunManager."""

    @pytest.fixture
    def manager(self, factory: ClientFactory) -> AppRunManager:
        return AppRunManager(factory)

    @pytest.mark.unit
    def test_backend_kind(self, manager: AppRunManager) -> None:
        assert manager.backend_kind is BackendKind.APPRUN_DEDICATED

    @pytest.mark.unit
    def test_truncated_page(
        self, manager: AppRunManager, mock_client: MagicMock, work_profile: str
    ) -> None:
        mock_client.list_clusters.return_value = Page(
            [{"clusterId": "0b1c4f7e-8a3d-4f5e-9c2b-1d2e3f4a5b6c", "name": "main"}], "next-page"
        )

        result = manager.list_clusters(work_profile, max_items=5)

        mock_client.list_clusters.assert_called_once_with(5, None)
        assert result.truncated is True
        assert result.next_cursor == "next-page"
        assert result.items[0].name == "main"

    @pytest.mark.unit
    def test_last_page(
        self, manager: AppRunManager, mock_client: MagicMock, work_profile: str
    ) -> None:
        mock_client.list_applications.return_value = Page([], "")

        result = manager.list_applications(work_profile)

        assert result.to_json_dict() == {"items": [], "truncated": False, "nextCursor": ""}

    @pytest.mark.unit
    @pytest.mark.parametrize("version", [0, -1])
    def test_set_active_version_rejects_non_positive(
        self, manager: AppRunManager, mock_client: MagicMock, work_profile: str, version: int
    ) -> None:
        with pytest.raises(InvalidIdentifierError, match="positive"):
            manager.set_active_version(work_profile, APP_ID, version)

        mock_client.update_active_version.assert_not_called()

    @pytest.mark.unit
    def test_set_and_clear_active_version(
        self, manager: AppRunManager, mock_client: MagicMock, work_profile: str
    ) -> None:
        manager.set_active_version(work_profile, APP_ID, 3)
        manager.clear_active_version(work_profile, APP_ID)

        assert [c.args for c in mock_client.update_active_version.call_args_list] == [
            (APP_ID, 3),
            (APP_ID, None),
        ]


class TestAppRunSharedManager:
    """Tests for AppRunSharedManager."""

    @pytest.fixture
    def manager(self, factory: ClientFactory) -> AppRunSharedManager:
        return AppRunSharedManager(factory)

    @pytest.mark.unit
    def test_list_applications(
        self, manager: AppRunSharedManager, mock_client: MagicMock, work_profile: str
    ) -> None:
        mock_client.list_applications.return_value = [
            {"id": "app-1", "name": "web", "status": "Healthy", "public_url": "https://web.example"},
        ]

        apps = manager.list_applications(work_profile)

        assert apps[0].to_json_dict() == {
            "id": "app-1",
            "name": "web",
            "status": "Healthy",
            "publicUrl": "https://web.example",
            "createdAt": "",
        }

    @pytest.mark.unit
    def test_status(
        self, manager: AppRunSharedManager, mock_client: MagicMock, work_profile: str
    ) -> None:
        mock_client.get_application_status.return_value = "Healthy"

        assert manager.get_application_status(work_profile, "app-1") == "Healthy"

    @pytest.mark.unit
    def test_backend_error_propagates(
        self, manager: AppRunSharedManager, mock_client: MagicMock, work_profile: str
    ) -> None:
        mock_client.list_traffics.side_effect = BackendError("request failed: status=500", "apprun_shared", 500)

        with pytest.raises(BackendError, match="status=500"):
            manager.list_traffics(work_profile, "app-1")


class TestKMSKeyManager:
    """Tests for KMSKeyManager."""

    @pytest.mark.unit
    def test_list(self, factory: ClientFactory, mock_client: MagicMock, work_profile: str) -> None:
        mock_client.list_keys.return_value = [
            {"id": "110000000001", "name": "key-a", "status": "active", "latest_version": 2, "tags": ["prod"]},
        ]

        keys = KMSKeyManager(factory).list(work_profile)

        assert keys[0].id == "110000000001"
        assert keys[0].latest_version == 2
        assert keys[0].tags == ["prod"]
