"""Unit tests for the keychain-backed secret vault."""

from __future__ import annotations

from typing import Any

import keyring
import pytest
from keyring.errors import KeyringError

from sakpilot.core.exceptions import InvalidIdentifierError, SecretNotFoundError, VaultError
from sakpilot.core.vault import SecretNamespace, SecretVault


class TestAccount:
    """Tests for keychain account naming."""

    @pytest.mark.unit
    def test_account_format(self) -> None:
        account = SecretVault.account(SecretNamespace.OBJECT_STORAGE, "isk01", "AKID")

        assert account == "objectstorage/isk01/AKID"

    @pytest.mark.unit
    def test_namespace_by_value(self) -> None:
        assert SecretVault.account("containerregistry", "113", "alice") == "containerregistry/113/alice"

    @pytest.mark.unit
    def test_unknown_namespace(self) -> None:
        with pytest.raises(InvalidIdentifierError, match="secret namespace"):
            SecretVault.account("ssh", "1", "root")

    @pytest.mark.unit
    def test_empty_ids(self) -> None:
        with pytest.raises(InvalidIdentifierError):
            SecretVault.account(SecretNamespace.OBJECT_STORAGE, "", "AKID")
        with pytest.raises(InvalidIdentifierError):
            SecretVault.account(SecretNamespace.OBJECT_STORAGE, "isk01", "")


class TestSecretVault:
    """Tests for save/get/delete/has."""

    @pytest.mark.unit
    def test_round_trip(self, vault: SecretVault, memory_keyring: Any) -> None:
        vault.save(SecretNamespace.OBJECT_STORAGE, "isk01", "AKID", "s3cr3t")

        assert vault.get(SecretNamespace.OBJECT_STORAGE, "isk01", "AKID") == "s3cr3t"
        assert vault.has(SecretNamespace.OBJECT_STORAGE, "isk01", "AKID")
        assert memory_keyring.passwords[("sakpilot-test", "objectstorage/isk01/AKID")] == "s3cr3t"

    @pytest.mark.unit
    def test_overwrite(self, vault: SecretVault) -> None:
        vault.save(SecretNamespace.CONTAINER_REGISTRY, "113", "alice", "one")
        vault.save(SecretNamespace.CONTAINER_REGISTRY, "113", "alice", "two")

        assert vault.get(SecretNamespace.CONTAINER_REGISTRY, "113", "alice") == "two"

    @pytest.mark.unit
    def test_delete_then_has(self, vault: SecretVault) -> None:
        """After delete, has should report False and get should miss."""
        vault.save(SecretNamespace.OBJECT_STORAGE, "isk01", "AKID", "s3cr3t")

        vault.delete(SecretNamespace.OBJECT_STORAGE, "isk01", "AKID")

        assert vault.has(SecretNamespace.OBJECT_STORAGE, "isk01", "AKID") is False
        with pytest.raises(SecretNotFoundError):
            vault.get(SecretNamespace.OBJECT_STORAGE, "isk01", "AKID")

    @pytest.mark.unit
    def test_delete_missing(self, vault: SecretVault) -> None:
        with pytest.raises(SecretNotFoundError):
            vault.delete(SecretNamespace.OBJECT_STORAGE, "isk01", "nothing")

    @pytest.mark.unit
    def test_backend_failure(self, vault: SecretVault, mocker: Any) -> None:
        mocker.patch.object(keyring, "get_password", side_effect=KeyringError("locked"))

        with pytest.raises(VaultError, match="locked"):
            vault.get(SecretNamespace.OBJECT_STORAGE, "isk01", "AKID")
        assert vault.has(SecretNamespace.OBJECT_STORAGE, "isk01", "AKID") is False
