"""Shared pytest fixtures for sakpilot tests."""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Generator
from pathlib import Path

import keyring
import pytest
from keyring.backend import KeyringBackend
from keyring.errors import PasswordDeleteError
from typer.testing import CliRunner

from sakpilot.core.config import GatewaySettings
from sakpilot.core.dispatcher import ClientFactory
from sakpilot.core.profiles import CredentialStore
from sakpilot.core.vault import SecretVault
from sakpilot.gateway import Gateway
from sakpilot.logging import configure_logging

TEST_TOKEN = "test-access-token-0001"
TEST_SECRET = "test-access-token-secret-0001"

type ProfileWriter = Callable[..., Path]


class InMemoryKeyring(KeyringBackend):
    """Keyring backend holding passwords in a dict."""

    priority = 1

    def __init__(self) -> None:
        super().__init__()
        self.passwords: dict[tuple[str, str], str] = {}

    def get_password(self, service: str, username: str) -> str | None:
        return self.passwords.get((service, username))

    def set_password(self, service: str, username: str, password: str) -> None:
        self.passwords[(service, username)] = password

    def delete_password(self, service: str, username: str) -> None:
        try:
            del self.passwords[(service, username)]
        except KeyError:
            raise PasswordDeleteError("password not found") from None


@pytest.fixture(scope="session", autouse=True)
def quiet_logging() -> None:
    """Route logs to stderr at WARNING so stdout stays clean for CLI output."""
    configure_logging(log_to_file=False)


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset environment variables for each test."""
    # Clear any SAKPILOT_ prefixed environment variables
    for key in list(os.environ.keys()):
        if key.startswith("SAKPILOT_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def memory_keyring() -> Generator[InMemoryKeyring]:
    """Install an in-memory keyring backend for the test."""
    previous = keyring.get_keyring()
    backend = InMemoryKeyring()
    keyring.set_keyring(backend)
    yield backend
    keyring.set_keyring(previous)


@pytest.fixture
def usacloud_dir(tmp_path: Path) -> Path:
    """Create an empty usacloud profile directory."""
    path = tmp_path / ".usacloud"
    path.mkdir()
    return path


@pytest.fixture
def write_profile(usacloud_dir: Path) -> ProfileWriter:
    """Return a helper writing ``<usacloud_dir>/<name>/config.json``."""

    def _write(
        name: str,
        token: str = TEST_TOKEN,
        secret: str = TEST_SECRET,
        zone: str = "",
        current: bool = False,
    ) -> Path:
        profile_dir = usacloud_dir / name
        profile_dir.mkdir(parents=True, exist_ok=True)
        config_path = profile_dir / "config.json"
        config_path.write_text(
            json.dumps({"AccessToken": token, "AccessTokenSecret": secret, "Zone": zone})
        )
        if current:
            (usacloud_dir / "current").write_text(name)
        return config_path

    return _write


@pytest.fixture
def settings(usacloud_dir: Path) -> GatewaySettings:
    """Settings pointing at the temporary profile directory, without retries."""
    return GatewaySettings(usacloud_dir=usacloud_dir, retries=1, timeout=5)


@pytest.fixture
def store(settings: GatewaySettings) -> CredentialStore:
    return CredentialStore(settings.usacloud_dir)


@pytest.fixture
def factory(settings: GatewaySettings, store: CredentialStore) -> ClientFactory:
    return ClientFactory(settings, store)


@pytest.fixture
def vault(memory_keyring: InMemoryKeyring) -> SecretVault:
    return SecretVault("sakpilot-test")


@pytest.fixture
def gateway(settings: GatewaySettings, vault: SecretVault) -> Gateway:
    """Create a gateway over the temporary profile directory."""
    return Gateway(settings=settings, vault=vault)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()
