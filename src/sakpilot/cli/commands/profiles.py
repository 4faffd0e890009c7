"""Profile commands."""

from __future__ import annotations

import typer

from sakpilot.cli.context import get_gateway
from sakpilot.cli.output import print_envelope

app = typer.Typer(help="List and switch credential profiles.")


@app.command("list")
def list_profiles() -> None:
    """List profiles (names and default zones, no credentials)."""
    print_envelope(get_gateway().call("list_profiles"))


@app.command()
def current() -> None:
    """Show the profile calls run under when none is named."""
    print_envelope(get_gateway().call("default_profile"))


@app.command()
def use(name: str = typer.Argument(..., help="Profile to make current.")) -> None:
    """Make a profile the current one."""
    print_envelope(get_gateway().call("set_current_profile", name=name))
