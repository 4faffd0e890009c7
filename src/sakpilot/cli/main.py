"""Main CLI entry point using Typer."""

from __future__ import annotations

import typer

from sakpilot import __version__
from sakpilot.cli.commands import metrics, profiles, resources
from sakpilot.cli.output import console
from sakpilot.logging import configure_logging

app = typer.Typer(
    name="sakpilot",
    help="Profile-scoped gateway over the Sakura Cloud APIs. Prints JSON envelopes.",
    add_completion=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"sakpilot version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode.",
    ),
) -> None:
    """sakpilot - list and inspect Sakura Cloud resources per profile."""
    configure_logging(verbose=verbose, debug=debug)


# Register subcommands
app.add_typer(profiles.app, name="profiles")
app.add_typer(metrics.app, name="metrics")
app.command()(resources.zones)
app.command()(resources.resources)


if __name__ == "__main__":
    app()
