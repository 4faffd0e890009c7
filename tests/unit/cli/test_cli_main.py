"""Unit tests for the sakpilot CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from sakpilot.cli.main import app


@pytest.fixture(autouse=True)
def cli_environment(
    monkeypatch: pytest.MonkeyPatch, usacloud_dir: Path, tmp_path: Path, mocker: Any
) -> None:
    """Point the CLI at temporary settings and keep logging off disk."""
    monkeypatch.setenv("SAKPILOT_USACLOUD_DIR", str(usacloud_dir))
    monkeypatch.setattr("sakpilot.core.config.CONFIG_FILE", tmp_path / "missing.yaml")
    mocker.patch("sakpilot.cli.main.configure_logging")


class TestMainApp:
    """Tests for the top-level app."""

    @pytest.mark.unit
    def test_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "profiles" in result.stdout
        assert "resources" in result.stdout

    @pytest.mark.unit
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "sakpilot version 0.4.0" in result.stdout

    @pytest.mark.unit
    def test_zones(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["zones"])

        assert result.exit_code == 0
        envelope = json.loads(result.stdout)
        assert envelope["ok"] is True
        assert envelope["data"][0]["id"] == "is1a"


class TestProfileCommands:
    """Tests for the profiles sub-app."""

    @pytest.mark.unit
    def test_list(self, cli_runner: CliRunner, write_profile) -> None:
        write_profile("work", zone="tk1b", current=True)

        result = cli_runner.invoke(app, ["profiles", "list"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"] == [
            {"name": "work", "isCurrent": True, "defaultZone": "tk1b"},
        ]
        assert "AccessToken" not in result.stdout

    @pytest.mark.unit
    def test_use_then_current(self, cli_runner: CliRunner, write_profile) -> None:
        write_profile("work", current=True)
        write_profile("home")

        use = cli_runner.invoke(app, ["profiles", "use", "home"])
        current = cli_runner.invoke(app, ["profiles", "current"])

        assert use.exit_code == 0
        assert json.loads(current.stdout)["data"] == "home"

    @pytest.mark.unit
    def test_use_missing_profile(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["profiles", "use", "ghost"])

        assert result.exit_code == 1
        assert "ProfileNotFound" in result.output


class TestResourcesCommand:
    """Tests for the resources command."""

    @pytest.mark.unit
    def test_unknown_family(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["resources", "mainframes"])

        assert result.exit_code == 1
        assert "InvalidIdentifier" in result.output

    @pytest.mark.unit
    def test_invalid_settings(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SAKPILOT_TIMEOUT", "0")

        result = cli_runner.invoke(app, ["zones"])

        assert result.exit_code == 2
