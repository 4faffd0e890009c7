"""Credential profiles stored in the usacloud directory layout.

Layout::

    <usacloud_dir>/
        current                 # name of the current profile
        <profile>/config.json   # {"AccessToken", "AccessTokenSecret", "Zone"}

The pointer file is re-read on every call; nothing is cached in-process.
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, SecretStr

from sakpilot.core.exceptions import (
    ProfileCorruptError,
    ProfileExistsError,
    ProfileNotFoundError,
)
from sakpilot.core.models import ViewModel
from sakpilot.logging import token_prefix

logger = structlog.get_logger()

DEFAULT_PROFILE_NAME = "default"
CONFIG_FILENAME = "config.json"
CURRENT_FILENAME = "current"


class Profile(BaseModel):
    """A loaded credential profile.

    Attributes:
        name: Directory-derived profile name.
        access_token: API access token.
        access_token_secret: API access token secret.
        default_zone: Zone used when a zone-scoped call names none ("" if unset).
        is_current: Whether the pointer file names this profile.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    access_token: str
    access_token_secret: SecretStr
    default_zone: str = ""
    is_current: bool = False

    @property
    def credentials(self) -> tuple[str, str]:
        """Return the (token, secret) pair for basic auth."""
        return self.access_token, self.access_token_secret.get_secret_value()


class ProfileInfo(ViewModel):
    """Listing entry for a profile (no credentials)."""

    name: str
    is_current: bool = False
    default_zone: str = ""


class ProfileCredentials(ViewModel):
    """Stored credentials of a profile, as shown in the edit form."""

    access_token: str = ""
    access_token_secret: str = Field(default="", repr=False)
    zone: str = ""


def _validate_name(name: str) -> None:
    if not name or name.startswith(".") or "/" in name or os.sep in name:
        raise ProfileNotFoundError(name, f"invalid profile name '{name}'")


class CredentialStore:
    """Read access to the usacloud profile directory.

    Example:
        >>> store = CredentialStore(Path("~/.usacloud").expanduser())
        >>> profile = store.load_profile(store.default_profile_name())
    """

    def __init__(self, usacloud_dir: Path) -> None:
        """Initialize the store.

        Args:
            usacloud_dir: Root of the profile directory layout.
        """
        self.usacloud_dir = usacloud_dir
        self._log = logger.bind(usacloud_dir=str(usacloud_dir))

    def profile_dir(self, name: str) -> Path:
        _validate_name(name)
        return self.usacloud_dir / name

    def config_path(self, name: str) -> Path:
        return self.profile_dir(name) / CONFIG_FILENAME

    @property
    def current_path(self) -> Path:
        return self.usacloud_dir / CURRENT_FILENAME

    def read_config(self, name: str) -> dict[str, Any]:
        """Read and parse a profile's config.json.

        Raises:
            ProfileNotFoundError: If the profile or its config does not exist.
            ProfileCorruptError: If the config is not a JSON object.
        """
        config_path = self.config_path(name)
        if not config_path.is_file():
            raise ProfileNotFoundError(name)
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ProfileCorruptError(name, details=str(e)) from e
        if not isinstance(data, dict):
            raise ProfileCorruptError(name, details="config is not a JSON object")
        return data

    def current_profile_name(self) -> str:
        """Return the name in the pointer file, or "default"."""
        try:
            name = self.current_path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            self._log.debug("current_pointer_unreadable", error=str(e))
            return DEFAULT_PROFILE_NAME
        if not name:
            self._log.debug("current_pointer_empty")
            return DEFAULT_PROFILE_NAME
        return name

    def list_profiles(self) -> list[ProfileInfo]:
        """List profiles sorted by name.

        Hidden entries, plain files and directories without a config.json are
        skipped. A profile with an unparsable config is still listed, with an
        empty default zone.
        """
        if not self.usacloud_dir.is_dir():
            return []

        current = self.current_profile_name()
        profiles: list[ProfileInfo] = []
        for entry in sorted(self.usacloud_dir.iterdir(), key=lambda p: p.name):
            if entry.name.startswith(".") or not entry.is_dir():
                continue
            if not (entry / CONFIG_FILENAME).is_file():
                continue
            try:
                zone = str(self.read_config(entry.name).get("Zone") or "")
            except ProfileCorruptError:
                self._log.debug("profile_config_unparsable", profile=entry.name)
                zone = ""
            profiles.append(
                ProfileInfo(name=entry.name, is_current=entry.name == current, default_zone=zone)
            )
        return profiles

    def default_profile_name(self) -> str:
        """Return the current profile if listed, else the first listed, else "default"."""
        profiles = self.list_profiles()
        current = self.current_profile_name()
        if any(p.name == current for p in profiles):
            return current
        if profiles:
            return profiles[0].name
        return DEFAULT_PROFILE_NAME

    def load_profile(self, name: str) -> Profile:
        """Load a profile with its credentials.

        Args:
            name: Profile name.

        Returns:
            The loaded profile.

        Raises:
            ProfileNotFoundError: If the profile does not exist.
            ProfileCorruptError: If the config is malformed or lacks credentials.
        """
        data = self.read_config(name)
        token = data.get("AccessToken")
        secret = data.get("AccessTokenSecret")
        if not isinstance(token, str) or not token:
            raise ProfileCorruptError(name, details="missing AccessToken")
        if not isinstance(secret, str) or not secret:
            raise ProfileCorruptError(name, details="missing AccessTokenSecret")

        profile = Profile(
            name=name,
            access_token=token,
            access_token_secret=SecretStr(secret),
            default_zone=str(data.get("Zone") or ""),
            is_current=self.current_profile_name() == name,
        )
        self._log.debug(
            "loaded_profile",
            profile=name,
            token_prefix=token_prefix(token),
            zone=profile.default_zone,
        )
        return profile

    def set_current(self, name: str) -> None:
        """Point the current-profile file at ``name``.

        The pointer is replaced atomically.

        Raises:
            ProfileNotFoundError: If the profile does not exist.
        """
        if not self.config_path(name).is_file():
            raise ProfileNotFoundError(name)
        self.usacloud_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.usacloud_dir, prefix=".current.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(name)
            os.replace(tmp_path, self.current_path)
        except OSError:
            Path(tmp_path).unlink(missing_ok=True)
            raise
        self._log.info("current_profile_set", profile=name)


class ProfileManager:
    """Create, update and delete profiles in the usacloud layout."""

    def __init__(self, store: CredentialStore) -> None:
        self._store = store
        self._log = logger.bind(usacloud_dir=str(store.usacloud_dir))

    def _write_config(self, name: str, token: str, secret: str, zone: str) -> None:
        profile_dir = self._store.profile_dir(name)
        profile_dir.mkdir(parents=True, exist_ok=True, mode=0o700)
        config_path = profile_dir / CONFIG_FILENAME
        data = {"AccessToken": token, "AccessTokenSecret": secret, "Zone": zone}
        with config_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

        # Set restrictive permissions (owner read/write only)
        config_path.chmod(0o600)

    def create(self, name: str, token: str, secret: str, zone: str = "") -> None:
        """Create a new profile.

        Raises:
            ProfileExistsError: If a profile with that name already exists.
        """
        if self._store.config_path(name).exists():
            raise ProfileExistsError(name)
        self._write_config(name, token, secret, zone)
        self._log.info("profile_created", profile=name, token_prefix=token_prefix(token))

    def update(self, old_name: str, new_name: str, token: str, secret: str, zone: str = "") -> None:
        """Update a profile, renaming it when ``new_name`` differs.

        A rename creates the new profile, moves the current pointer if it named
        the old profile, then deletes the old profile.

        Raises:
            ProfileNotFoundError: If ``old_name`` does not exist.
            ProfileExistsError: If renaming onto an existing profile.
        """
        if not self._store.config_path(old_name).is_file():
            raise ProfileNotFoundError(old_name)

        if old_name == new_name:
            self._write_config(old_name, token, secret, zone)
            self._log.info("profile_updated", profile=old_name)
            return

        self.create(new_name, token, secret, zone)
        if self._store.current_profile_name() == old_name:
            self._store.set_current(new_name)
        self.delete(old_name)
        self._log.info("profile_renamed", old_profile=old_name, profile=new_name)

    def delete(self, name: str) -> None:
        """Delete a profile directory.

        Raises:
            ProfileNotFoundError: If the profile does not exist.
        """
        profile_dir = self._store.profile_dir(name)
        if not profile_dir.is_dir():
            raise ProfileNotFoundError(name)
        shutil.rmtree(profile_dir)
        self._log.info("profile_deleted", profile=name)

    def get_credentials(self, name: str) -> ProfileCredentials:
        """Return the stored credentials of a profile for editing."""
        data = self._store.read_config(name)
        return ProfileCredentials(
            access_token=str(data.get("AccessToken") or ""),
            access_token_secret=str(data.get("AccessTokenSecret") or ""),
            zone=str(data.get("Zone") or ""),
        )
