"""Gateway construction for CLI commands."""

from __future__ import annotations

import typer

from sakpilot.cli.output import err_console
from sakpilot.gateway import Gateway


def get_gateway() -> Gateway:
    """Build a gateway from the settings file and environment.

    Exits with code 2 if the settings are invalid.
    """
    try:
        return Gateway()
    except ValueError as e:
        err_console.print(f"[red]Invalid settings:[/red] {e}")
        raise typer.Exit(code=2) from e
