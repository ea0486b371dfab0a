from __future__ import annotations

from typing import Any, Dict, Iterable

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_reading(payload: Dict[str, Any]) -> None:
    echo_heading("Current Reading")
    echo_key_values(
        [
            ("temperature", payload.get("temperature")),
            ("humidity", payload.get("humidity")),
            ("sound", payload.get("sound")),
            ("lastSync", payload.get("lastSync")),
            ("connectionStatus", payload.get("connectionStatus")),
        ]
    )


def render_submit(payload: Dict[str, Any]) -> None:
    typer.secho(payload.get("message") or "Reading stored.", fg=typer.colors.GREEN)
    typer.echo()
    render_reading(payload.get("data") or {})


def render_probe(payload: Dict[str, Any]) -> None:
    echo_heading("Server")
    echo_key_values(
        [
            ("status", payload.get("status")),
            ("message", payload.get("message")),
            ("timestamp", payload.get("timestamp")),
        ]
    )
    info = payload.get("serverInfo") or {}
    typer.echo()
    echo_heading("Configuration")
    echo_key_values([("apiKey", info.get("apiKey")), ("deviceId", info.get("deviceId"))])


def format_reading_line(payload: Dict[str, Any]) -> str:
    return (
        f"{payload.get('lastSync')}  "
        f"temperature={payload.get('temperature')}  "
        f"humidity={payload.get('humidity')}  "
        f"sound={payload.get('sound')}  "
        f"status={payload.get('connectionStatus')}"
    )
