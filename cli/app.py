from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_readings


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Fetch Tidepool glucose readings and reports from the report service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)

_EMAIL_OPTION = typer.Option(..., "--email", "-e", help="Tidepool login e-mail.")
_PASSWORD_OPTION = typer.Option(
    ...,
    "--password",
    "-p",
    envvar="TIDEPOOL_PASSWORD",
    prompt=True,
    hide_input=True,
    help="Tidepool password (prompted when omitted).",
)
_START_OPTION = typer.Option(None, "--start", formats=["%Y-%m-%d"], help="First day (YYYY-MM-DD).")
_END_OPTION = typer.Option(None, "--end", formats=["%Y-%m-%d"], help="Last day (YYYY-MM-DD).")


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


def _as_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Report service base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for the service to answer.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("readings")
def readings_command(
    ctx: typer.Context,
    email: str = _EMAIL_OPTION,
    password: str = _PASSWORD_OPTION,
    start: Optional[datetime] = _START_OPTION,
    end: Optional[datetime] = _END_OPTION,
) -> None:
    """Print the smbg readings as a table."""
    state = _get_state(ctx)
    payload = state.client.get_readings(email, password, _as_date(start), _as_date(end))
    render_readings(payload)


@app.command("report")
def report_command(
    ctx: typer.Context,
    email: str = _EMAIL_OPTION,
    password: str = _PASSWORD_OPTION,
    start: Optional[datetime] = _START_OPTION,
    end: Optional[datetime] = _END_OPTION,
    output: Path = typer.Option(
        Path("tidepool.pdf"),
        "--output",
        "-o",
        dir_okay=False,
        writable=True,
        help="Where to write the PDF.",
    ),
) -> None:
    """Download the PDF report."""
    state = _get_state(ctx)
    typer.echo(f"Requesting report from {state.config.base_url} ...")
    document = state.client.download_report(email, password, _as_date(start), _as_date(end))
    output.write_bytes(document)
    typer.secho(f"Report written to {output} ({len(document)} bytes).", fg=typer.colors.GREEN)
