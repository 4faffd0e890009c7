"""JSON envelope output for CLI commands.

Command results go to stdout as JSON; diagnostics and logs go to stderr.
"""

from __future__ import annotations

from typing import Any

import typer
from rich.console import Console

console = Console()
err_console = Console(stderr=True)


def print_envelope(envelope: dict[str, Any]) -> None:
    """Print a gateway envelope and exit non-zero if it carries an error."""
    console.print_json(data=envelope)
    if not envelope.get("ok"):
        error = envelope.get("error") or {}
        err_console.print(f"[red]{error.get('type', 'Error')}:[/red] {error.get('message', '')}")
        raise typer.Exit(code=1)
