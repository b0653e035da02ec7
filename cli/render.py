from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer

_STATUS_COLORS = {
    "SAFE": typer.colors.GREEN,
    "DANGER": typer.colors.RED,
    "OFFLINE": typer.colors.YELLOW,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _format_metric(value: Any) -> str:
    if value is None:
        return "n/a"
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def format_reading_line(payload: Dict[str, Any]) -> str:
    return (
        f"{payload.get('timestamp') or '-'}  "
        f"temp={payload.get('temp')}  "
        f"hum={payload.get('hum')}  "
        f"soil={payload.get('soil')}  "
        f"status={payload.get('status')}"
    )


def render_reading(payload: Dict[str, Any], online: bool = True) -> None:
    status = str(payload.get("status"))
    typer.secho(format_reading_line(payload), fg=_STATUS_COLORS.get(status))
    if not online:
        typer.secho(
            f"Device offline: {payload.get('message') or 'no detail provided.'}",
            fg=typer.colors.YELLOW,
            err=True,
        )


def render_history(readings: List[Dict[str, Any]]) -> None:
    echo_heading(f"History ({len(readings)} readings)")
    if not readings:
        typer.echo("No readings recorded.")
        return
    for reading in readings:
        typer.echo(format_reading_line(reading))


def render_stats(payload: Dict[str, Any]) -> None:
    echo_heading("Statistics")
    echo_key_values([("total_readings", payload.get("totalReadings"))])
    for label, prefix in (("Temperature", "Temp"), ("Humidity", "Hum"), ("Soil moisture", "Soil")):
        typer.echo(
            f"{label}: avg={_format_metric(payload.get(f'avg{prefix}'))} "
            f"min={_format_metric(payload.get(f'min{prefix}'))} "
            f"max={_format_metric(payload.get(f'max{prefix}'))}"
        )
    echo_key_values(
        [
            ("danger_count", payload.get("dangerCount")),
            ("safe_count", payload.get("safeCount")),
        ]
    )
