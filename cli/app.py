from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_history, render_reading, render_stats


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the sensor telemetry service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Telemetry API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each API response.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("current")
def current_command(ctx: typer.Context) -> None:
    """Read the device through the service once."""
    state = _get_state(ctx)
    online, payload = state.client.get_current()
    render_reading(payload, online=online)
    if not online:
        raise typer.Exit(code=1)


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        "-i",
        help="Seconds between reads (defaults to CLI_POLL_INTERVAL env or 1.0).",
    ),
    count: Optional[int] = typer.Option(
        None,
        "--count",
        "-n",
        min=1,
        help="Stop after this many reads (runs until interrupted by default).",
    ),
) -> None:
    """Poll the service on a fixed cadence, printing each reading."""
    state = _get_state(ctx)
    delay = interval if interval is not None else state.config.poll_interval
    typer.echo(f"Polling {state.config.base_url} every {delay}s (Ctrl+C to stop) ...")
    reads = 0
    try:
        while count is None or reads < count:
            online, payload = state.client.get_current()
            render_reading(payload, online=online)
            reads += 1
            if count is not None and reads >= count:
                break
            time.sleep(delay)
    except KeyboardInterrupt:
        typer.echo()
    typer.echo(f"Stopped after {reads} reads.")


@app.command("history")
def history_command(
    ctx: typer.Context,
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-l",
        min=1,
        help="Number of most recent readings to show (service default is 100).",
    ),
) -> None:
    """Show recorded readings, oldest first."""
    state = _get_state(ctx)
    render_history(state.client.get_history(limit))


@app.command("stats")
def stats_command(ctx: typer.Context) -> None:
    """Show statistics over the recorded history."""
    state = _get_state(ctx)
    render_stats(state.client.get_stats())


@app.command("clear")
def clear_command(
    ctx: typer.Context,
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip the confirmation prompt.",
    ),
) -> None:
    """Discard every recorded reading on the service."""
    state = _get_state(ctx)
    if not yes:
        typer.confirm("Clear all recorded history?", abort=True)
    message = state.client.clear_history()
    typer.secho(message or "History cleared", fg=typer.colors.GREEN)


@app.command("export")
def export_command(
    ctx: typer.Context,
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        dir_okay=False,
        writable=True,
        help="Write the CSV to this file instead of stdout.",
    ),
) -> None:
    """Download the recorded history as CSV."""
    state = _get_state(ctx)
    body = state.client.export_csv()
    if body is None:
        typer.secho("No data to export.", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)
    if output is None:
        typer.echo(body)
        return
    output.write_text(body, encoding="utf-8")
    row_count = max(len(body.splitlines()) - 1, 0)
    typer.secho(f"Wrote {row_count} readings to {output}", fg=typer.colors.GREEN)
