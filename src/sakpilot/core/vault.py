"""Secondary secrets kept in the OS keychain.

Object-storage access-key secrets and container-registry passwords are stored
under one keychain service, keyed by ``<namespace>/<scope_id>/<principal>``.
Secret values never reach the logger.
"""

from __future__ import annotations

import threading
from enum import Enum

import keyring
import structlog
from keyring.errors import KeyringError, PasswordDeleteError

from sakpilot.core.exceptions import InvalidIdentifierError, SecretNotFoundError, VaultError

logger = structlog.get_logger()

DEFAULT_SERVICE = "sakpilot"


class SecretNamespace(str, Enum):
    """Kinds of secondary secret."""

    OBJECT_STORAGE = "objectstorage"
    CONTAINER_REGISTRY = "containerregistry"


class SecretVault:
    """Keychain-backed secret store.

    Reads are lock-free. Writes and deletes of the same account are
    serialized; concurrent writers are last-writer-wins.
    """

    def __init__(self, service: str = DEFAULT_SERVICE) -> None:
        """Initialize the vault.

        Args:
            service: Keychain service name all secrets are stored under.
        """
        self.service = service
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._log = logger.bind(service=service)

    @staticmethod
    def account(namespace: SecretNamespace | str, scope_id: str, principal: str) -> str:
        """Build the keychain account string for a secret.

        Raises:
            InvalidIdentifierError: If the namespace is unknown or an id is empty.
        """
        try:
            ns = SecretNamespace(namespace)
        except ValueError:
            raise InvalidIdentifierError("secret namespace", namespace) from None
        if not scope_id:
            raise InvalidIdentifierError("secret scope id", scope_id)
        if not principal:
            raise InvalidIdentifierError("secret principal", principal)
        return f"{ns.value}/{scope_id}/{principal}"

    def _lock_for(self, account: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(account, threading.Lock())

    def save(
        self, namespace: SecretNamespace | str, scope_id: str, principal: str, secret: str
    ) -> None:
        """Store (or overwrite) a secret."""
        account = self.account(namespace, scope_id, principal)
        with self._lock_for(account):
            try:
                keyring.set_password(self.service, account, secret)
            except KeyringError as e:
                raise VaultError(f"failed to store secret for {account}: {e}") from e
        self._log.info("secret_saved", account=account)

    def get(self, namespace: SecretNamespace | str, scope_id: str, principal: str) -> str:
        """Return a stored secret.

        Raises:
            SecretNotFoundError: If nothing is stored for the key.
            VaultError: If the keychain backend fails.
        """
        account = self.account(namespace, scope_id, principal)
        try:
            secret = keyring.get_password(self.service, account)
        except KeyringError as e:
            raise VaultError(f"failed to read secret for {account}: {e}") from e
        if secret is None:
            raise SecretNotFoundError(account)
        return secret

    def delete(self, namespace: SecretNamespace | str, scope_id: str, principal: str) -> None:
        """Remove a stored secret.

        Raises:
            SecretNotFoundError: If nothing is stored for the key.
            VaultError: If the keychain backend fails.
        """
        account = self.account(namespace, scope_id, principal)
        with self._lock_for(account):
            try:
                keyring.delete_password(self.service, account)
            except PasswordDeleteError as e:
                raise SecretNotFoundError(account) from e
            except KeyringError as e:
                raise VaultError(f"failed to delete secret for {account}: {e}") from e
        self._log.info("secret_deleted", account=account)

    def has(self, namespace: SecretNamespace | str, scope_id: str, principal: str) -> bool:
        """Return True if ``get`` would succeed for the key."""
        try:
            self.get(namespace, scope_id, principal)
        except SecretNotFoundError:
            return False
        except VaultError as e:
            self._log.warning("secret_lookup_failed", error=str(e))
            return False
        return True
