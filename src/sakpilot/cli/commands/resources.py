"""Zone and resource listing commands."""

from __future__ import annotations

import typer

from sakpilot.cli.context import get_gateway
from sakpilot.cli.output import print_envelope
from sakpilot.core.zones import RESOURCE_FAMILIES


def zones() -> None:
    """List the known zones."""
    print_envelope(get_gateway().call("list_zones"))


def resources(
    family: str = typer.Argument(
        ...,
        help=f"Resource family: {', '.join(RESOURCE_FAMILIES)}.",
    ),
    profile: str = typer.Option(
        "",
        "--profile",
        "-p",
        help="Profile to use (default: the current profile).",
    ),
    zone: str | None = typer.Option(
        None,
        "--zone",
        "-z",
        help="Zone for zone-scoped families (default: the profile's zone).",
    ),
) -> None:
    """List the resources of one family."""
    print_envelope(
        get_gateway().call("list_resources", family=family, profile_name=profile, zone=zone)
    )
