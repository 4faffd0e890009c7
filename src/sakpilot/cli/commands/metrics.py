"""Monitoring Suite metrics query commands."""

from __future__ import annotations

import time

import typer

from sakpilot.cli.context import get_gateway
from sakpilot.cli.output import print_envelope

app = typer.Typer(help="Query metrics storages.")

DEFAULT_RANGE_SECONDS = 3600


@app.command()
def labels(
    storage_id: str = typer.Argument(..., help="Metrics storage ID."),
    profile: str = typer.Option("", "--profile", "-p", help="Profile to use."),
) -> None:
    """List the metric names in a storage."""
    print_envelope(
        get_gateway().call("query_metric_labels", profile_name=profile, storage_id=storage_id)
    )


@app.command("range")
def query_range(
    storage_id: str = typer.Argument(..., help="Metrics storage ID."),
    query: str = typer.Argument(..., help="PromQL expression."),
    profile: str = typer.Option("", "--profile", "-p", help="Profile to use."),
    start: float | None = typer.Option(
        None, "--start", help="Start (unix seconds, default: an hour ago)."
    ),
    end: float | None = typer.Option(None, "--end", help="End (unix seconds, default: now)."),
    step: str = typer.Option("60s", "--step", help="Resolution step, e.g. 15s, 1m."),
) -> None:
    """Run a range query against a storage."""
    end_ts = end if end is not None else time.time()
    start_ts = start if start is not None else end_ts - DEFAULT_RANGE_SECONDS
    print_envelope(
        get_gateway().call(
            "query_metric_range",
            profile_name=profile,
            storage_id=storage_id,
            query=query,
            start=start_ts,
            end=end_ts,
            step=step,
        )
    )
