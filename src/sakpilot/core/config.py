"""Gateway settings with Pydantic validation."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, field_validator

from sakpilot.core.exceptions import InvalidIdentifierError
from sakpilot.core.zones import FALLBACK_ZONE, validate_zone

logger = structlog.get_logger()

CONFIG_DIR = Path.home() / ".config" / "sakpilot"
CONFIG_FILE = CONFIG_DIR / "config.yaml"


class EndpointsConfig(BaseModel):
    """Base URLs of the upstream APIs.

    These are fixed per backend. They are only overridden for staging or tests,
    never per call.
    """

    model_config = ConfigDict(extra="forbid")

    iaas: str = "https://secure.sakura.ad.jp/cloud/zone/{zone}/api/cloud/1.1"
    apprun_dedicated: str = "https://secure.sakura.ad.jp/cloud/api/apprun-dedicated/1.0"
    apprun_shared: str = "https://secure.sakura.ad.jp/cloud/api/apprun/1.0/apprun/api"
    kms: str = "https://secure.sakura.ad.jp/cloud/zone/is1a/api/cloud/1.1/kms"
    monitoring: str = "https://secure.sakura.ad.jp/cloud/api/monitoring/1.0"
    object_storage: str = "https://secure.sakura.ad.jp/cloud/zone/is1a/api/objectstorage/1.0"

    @field_validator(
        "iaas", "apprun_dedicated", "apprun_shared", "kms", "monitoring", "object_storage"
    )
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate base URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("endpoint must start with http:// or https://")
        return v.rstrip("/")


class GatewaySettings(BaseModel):
    """Settings shared by every gateway operation."""

    model_config = ConfigDict(extra="forbid")

    usacloud_dir: Path = Path.home() / ".usacloud"
    fallback_zone: str = FALLBACK_ZONE
    keyring_service: str = "sakpilot"
    timeout: int = 30
    retries: int = 3
    endpoints: EndpointsConfig = EndpointsConfig()

    @field_validator("usacloud_dir")
    @classmethod
    def expand_usacloud_dir(cls, v: Path) -> Path:
        """Expand ~ in the profile directory path."""
        return Path(v).expanduser()

    @field_validator("fallback_zone")
    @classmethod
    def validate_fallback_zone(cls, v: str) -> str:
        """Validate the fallback zone is a known zone."""
        try:
            return validate_zone(v)
        except InvalidIdentifierError as e:
            raise ValueError(str(e)) from e

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator("retries")
    @classmethod
    def validate_retries(cls, v: int) -> int:
        """Validate retries is at least one attempt."""
        if v < 1:
            raise ValueError("retries must be at least 1")
        return v

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> GatewaySettings:
        """Create settings with environment variable overrides.

        Environment variables take precedence over base_config values.

        Supported environment variables:
            SAKPILOT_USACLOUD_DIR: Profile directory (default ~/.usacloud)
            SAKPILOT_FALLBACK_ZONE: Zone used when a profile names none
            SAKPILOT_KEYRING_SERVICE: OS keychain service name
            SAKPILOT_TIMEOUT: HTTP timeout in seconds
        """
        config_dict = base_config.copy() if base_config else {}

        if usacloud_dir := os.environ.get("SAKPILOT_USACLOUD_DIR"):
            config_dict["usacloud_dir"] = usacloud_dir
        if fallback_zone := os.environ.get("SAKPILOT_FALLBACK_ZONE"):
            config_dict["fallback_zone"] = fallback_zone
        if keyring_service := os.environ.get("SAKPILOT_KEYRING_SERVICE"):
            config_dict["keyring_service"] = keyring_service
        if timeout := os.environ.get("SAKPILOT_TIMEOUT"):
            config_dict["timeout"] = timeout

        return cls.model_validate(config_dict)

    @classmethod
    def load(cls, path: Path | None = None) -> GatewaySettings:
        """Load settings from a YAML file with environment overrides.

        A missing file is not an error; defaults apply.

        Args:
            path: Settings file (default ~/.config/sakpilot/config.yaml).

        Raises:
            ValueError: If the file is not valid YAML or not a mapping.
        """
        config_path = path or CONFIG_FILE
        base: dict[str, Any] = {}
        if config_path.exists():
            try:
                with config_path.open() as f:
                    data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"invalid settings file {config_path}: {e}") from e
            if data is not None and not isinstance(data, dict):
                raise ValueError(f"settings file {config_path} must contain a mapping")
            base = data or {}
            logger.debug("Loaded gateway settings", path=str(config_path))
        return cls.from_env(base)
