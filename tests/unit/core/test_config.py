"""Unit tests for gateway settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from sakpilot.core.config import EndpointsConfig, GatewaySettings


class TestGatewaySettings:
    """Tests for GatewaySettings validation."""

    @pytest.mark.unit
    def test_defaults(self) -> None:
        """Defaults should target the public endpoints and is1a."""
        settings = GatewaySettings()

        assert settings.fallback_zone == "is1a"
        assert settings.keyring_service == "sakpilot"
        assert settings.timeout == 30
        assert settings.usacloud_dir == Path.home() / ".usacloud"
        assert "{zone}" in settings.endpoints.iaas

    @pytest.mark.unit
    def test_unknown_fallback_zone_rejected(self) -> None:
        """An unknown fallback zone should fail validation."""
        with pytest.raises(ValidationError, match="zone"):
            GatewaySettings(fallback_zone="xx1z")

    @pytest.mark.unit
    @pytest.mark.parametrize("timeout", [0, -5])
    def test_non_positive_timeout_rejected(self, timeout: int) -> None:
        with pytest.raises(ValidationError, match="timeout must be positive"):
            GatewaySettings(timeout=timeout)

    @pytest.mark.unit
    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GatewaySettings.model_validate({"verbose": True})

    @pytest.mark.unit
    def test_tilde_expanded(self) -> None:
        settings = GatewaySettings(usacloud_dir=Path("~/profiles"))

        assert settings.usacloud_dir == Path.home() / "profiles"


class TestEndpointsConfig:
    """Tests for EndpointsConfig."""

    @pytest.mark.unit
    def test_trailing_slash_stripped(self) -> None:
        endpoints = EndpointsConfig(monitoring="https://example.test/monitoring/")

        assert endpoints.monitoring == "https://example.test/monitoring"

    @pytest.mark.unit
    def test_scheme_required(self) -> None:
        with pytest.raises(ValidationError, match="http"):
            EndpointsConfig(kms="example.test/kms")


class TestSettingsLoading:
    """Tests for file and environment loading."""

    @pytest.mark.unit
    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        settings = GatewaySettings.load(tmp_path / "absent.yaml")

        assert settings.fallback_zone == "is1a"

    @pytest.mark.unit
    def test_file_values_loaded(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            """
fallback_zone: tk1b
timeout: 10
endpoints:
  monitoring: http://localhost:8080/monitoring
"""
        )

        settings = GatewaySettings.load(config_path)

        assert settings.fallback_zone == "tk1b"
        assert settings.timeout == 10
        assert settings.endpoints.monitoring == "http://localhost:8080/monitoring"

    @pytest.mark.unit
    def test_environment_overrides_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Environment variables should take precedence over the file."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("fallback_zone: tk1b\n")
        monkeypatch.setenv("SAKPILOT_FALLBACK_ZONE", "is1b")
        monkeypatch.setenv("SAKPILOT_USACLOUD_DIR", str(tmp_path / "profiles"))
        monkeypatch.setenv("SAKPILOT_TIMEOUT", "7")

        settings = GatewaySettings.load(config_path)

        assert settings.fallback_zone == "is1b"
        assert settings.usacloud_dir == tmp_path / "profiles"
        assert settings.timeout == 7

    @pytest.mark.unit
    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.yaml"
        config_path.write_text("fallback_zone: [unclosed\n")

        with pytest.raises(ValueError, match="invalid settings file"):
            GatewaySettings.load(config_path)

    @pytest.mark.unit
    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.yaml"
        config_path.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="must contain a mapping"):
            GatewaySettings.load(config_path)
