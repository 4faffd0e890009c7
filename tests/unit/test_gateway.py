"""Unit tests for the gateway surface and its envelopes."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from sakpilot.core.exceptions import BackendAuthError
from sakpilot.core.models import ListResult
from sakpilot.core.vault import SecretNamespace
from sakpilot.gateway import Gateway, to_json
from sakpilot.integrations.kms.models import KMSKey


class TestCallEnvelope:
    """Tests for Gateway.call."""

    @pytest.mark.unit
    def test_success(self, gateway: Gateway) -> None:
        envelope = gateway.call("list_zones")

        assert envelope["ok"] is True
        assert envelope["data"][0] == {"id": "is1a", "name": "石狩第1ゾーン"}
        assert [z["id"] for z in envelope["data"]] == ["is1a", "is1b", "tk1a", "tk1b", "tk1v"]

    @pytest.mark.unit
    def test_error_is_wrapped(self, gateway: Gateway) -> None:
        """A failing operation should produce an error envelope, not raise."""
        envelope = gateway.call("list_servers", profile_name="ghost")

        assert envelope == {
            "ok": False,
            "error": {"type": "ProfileNotFound", "message": "profile 'ghost' not found", "profile": "ghost"},
        }

    @pytest.mark.unit
    @pytest.mark.parametrize("operation", ["no_such_operation", "_family_listers", "call", "__init__"])
    def test_unknown_operations_rejected(self, gateway: Gateway, operation: str) -> None:
        envelope = gateway.call(operation)

        assert envelope["ok"] is False
        assert envelope["error"]["type"] == "InvalidIdentifier"


class TestProfiles:
    """Tests for profile operations."""

    @pytest.mark.unit
    def test_list_profiles(self, gateway: Gateway, write_profile) -> None:
        write_profile("work", zone="tk1b", current=True)
        write_profile("home")

        assert gateway.list_profiles() == [
            {"name": "home", "isCurrent": False, "defaultZone": ""},
            {"name": "work", "isCurrent": True, "defaultZone": "tk1b"},
        ]

    @pytest.mark.unit
    def test_set_current_profile(self, gateway: Gateway, write_profile) -> None:
        write_profile("work", current=True)
        write_profile("home")

        gateway.set_current_profile("home")

        assert gateway.current_profile() == "home"
        assert gateway.default_profile() == "home"

    @pytest.mark.unit
    def test_default_zone(self, gateway: Gateway, write_profile) -> None:
        write_profile("work", current=True)
        write_profile("tokyo", zone="tk1a")

        assert gateway.get_default_zone() == "is1a"
        assert gateway.get_default_zone("tokyo") == "tk1a"


class TestValidateCredentials:
    """Tests for validate_credentials."""

    @pytest.fixture
    def unsaved_client(self, gateway: Gateway, mocker: Any) -> MagicMock:
        client = MagicMock()
        mocker.patch.object(gateway.factory, "create_unsaved", return_value=client)
        return client

    @pytest.mark.unit
    def test_accepted(self, gateway: Gateway, unsaved_client: MagicMock) -> None:
        unsaved_client.auth_status.return_value = {"AccountID": 1136, "AccountName": "acme"}

        result = gateway.validate_credentials("tok", "sec")

        assert result["accountId"] == "1136"
        unsaved_client.__exit__.assert_called_once()

    @pytest.mark.unit
    def test_empty_account_rejected(self, gateway: Gateway, unsaved_client: MagicMock) -> None:
        unsaved_client.auth_status.return_value = {}

        with pytest.raises(BackendAuthError):
            gateway.validate_credentials("tok", "sec")


class TestListResources:
    """Tests for family-name listing."""

    @pytest.mark.unit
    def test_unknown_family(self, gateway: Gateway) -> None:
        envelope = gateway.call("list_resources", family="mainframes")

        assert envelope["ok"] is False
        assert envelope["error"]["type"] == "InvalidIdentifier"

    @pytest.mark.unit
    def test_family_not_listable_by_name(self, gateway: Gateway) -> None:
        envelope = gateway.call("list_resources", family="registry_images")

        assert envelope["ok"] is False
        assert "not listable" in envelope["error"]["message"]

    @pytest.mark.unit
    def test_delegates_to_manager(self, gateway: Gateway, mocker: Any, write_profile) -> None:
        write_profile("work", current=True)
        mocker.patch.object(gateway.kms_keys, "list", return_value=[KMSKey(id="1", name="k")])

        result = gateway.list_resources("kms_keys", "work")

        gateway.kms_keys.list.assert_called_once_with("work")
        assert result[0]["name"] == "k"


class TestSecrets:
    """Tests for secret vault operations."""

    @pytest.mark.unit
    def test_save_has_delete(self, gateway: Gateway) -> None:
        args = (SecretNamespace.OBJECT_STORAGE.value, "isk01", "AKID")

        assert gateway.has_secret(*args) is False
        gateway.save_secret(*args, "s3-secret")
        assert gateway.has_secret(*args) is True
        assert gateway.get_secret(*args) == "s3-secret"
        gateway.delete_secret(*args)
        assert gateway.has_secret(*args) is False

    @pytest.mark.unit
    def test_missing_secret_envelope(self, gateway: Gateway) -> None:
        envelope = gateway.call(
            "get_secret", namespace="containerregistry", scope_id="113", principal="alice"
        )

        assert envelope["ok"] is False
        assert envelope["error"]["type"] == "SecretNotFound"


class TestToJson:
    """Tests for to_json."""

    @pytest.mark.unit
    def test_nested_models(self) -> None:
        result = ListResult[KMSKey](items=[KMSKey(id="1", latest_version=2)], next_cursor="c")

        assert to_json({"page": result, "plain": (1, "a")}) == {
            "page": {
                "items": [
                    {
                        "id": "1",
                        "name": "",
                        "description": "",
                        "status": "",
                        "keyOrigin": "",
                        "latestVersion": 2,
                        "tags": [],
                        "createdAt": "",
                    }
                ],
                "truncated": False,
                "nextCursor": "c",
            },
            "plain": [1, "a"],
        }
