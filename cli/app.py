from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import format_reading_line, render_probe, render_reading, render_submit


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for talking to the sensor relay server.",
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
        help="Relay base URL (defaults to RELAY_BASE_URL env or http://localhost:5000).",
    ),
    api_key: Optional[str] = typer.Option(
        None,
        "--api-key",
        help="Shared secret for submitting readings (defaults to API_KEY env).",
    ),
    device_id: Optional[str] = typer.Option(
        None,
        "--device-id",
        "-d",
        help="Device identifier sent with requests (defaults to DEVICE_ID env).",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, api_key=api_key, device_id=device_id)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("readings")
def readings_command(ctx: typer.Context) -> None:
    """Show the most recent reading held by the server."""
    state = _get_state(ctx)
    render_reading(state.client.get_readings())


@app.command("submit")
def submit_command(
    ctx: typer.Context,
    temperature: Optional[float] = typer.Option(None, "--temperature", "-t", help="Temperature in degrees."),
    humidity: Optional[float] = typer.Option(None, "--humidity", "-u", help="Relative humidity in percent."),
    sound: Optional[float] = typer.Option(None, "--sound", "-s", help="Sound level."),
    connection_status: Optional[str] = typer.Option(
        None,
        "--status",
        help="Connection status tag (server defaults to 'connected').",
    ),
) -> None:
    """Push a reading the way a field device would."""
    state = _get_state(ctx)
    values: Dict[str, Any] = {}
    if temperature is not None:
        values["temperature"] = temperature
    if humidity is not None:
        values["humidity"] = humidity
    if sound is not None:
        values["sound"] = sound
    if connection_status:
        values["connectionStatus"] = connection_status
    typer.echo(f"Submitting reading to {state.config.base_url} ...")
    render_submit(state.client.submit_readings(values))


@app.command("probe")
def probe_command(ctx: typer.Context) -> None:
    """Check that the server is reachable and show its configuration."""
    state = _get_state(ctx)
    render_probe(state.client.probe())


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        "-i",
        min=0,
        help="Seconds between polls (defaults to CLI_WATCH_INTERVAL env or 5).",
    ),
    count: int = typer.Option(
        0,
        "--count",
        "-n",
        min=0,
        help="Stop after this many polls; 0 polls until interrupted.",
    ),
) -> None:
    """Poll the server and print one line per reading."""
    state = _get_state(ctx)
    poll_interval = interval if interval is not None else state.config.watch_interval
    polls = 0
    try:
        while True:
            typer.echo(format_reading_line(state.client.get_readings()))
            polls += 1
            if count and polls >= count:
                break
            time.sleep(poll_interval)
    except KeyboardInterrupt:
        typer.echo()
