from __future__ import annotations

from typing import Any, Dict, Iterable, Sequence

import typer

COLUMNS = ("Date", "Time", "Glucose mg/dL")
_WIDTH = 14


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_row(values: Sequence[Any]) -> None:
    typer.echo("".join(str(value).ljust(_WIDTH) for value in values).rstrip())


def render_readings(payload: Dict[str, Any]) -> None:
    readings: Iterable[Dict[str, Any]] = payload.get("readings") or []
    echo_heading(f"Glucose Values ({payload.get('count', 0)})")
    if not payload.get("count"):
        typer.echo("No readings returned.")
        return
    echo_row(COLUMNS)
    for reading in readings:
        echo_row((reading.get("date"), reading.get("time"), reading.get("value")))
