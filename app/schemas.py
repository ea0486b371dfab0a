"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

DEFAULT_CONNECTION_STATUS = "connected"


def isoformat_now() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return format_timestamp(datetime.now(timezone.utc))


def format_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Reading(BaseModel):
    """The single sensor snapshot held by the server."""

    temperature: float = Field(..., description="Degrees, one decimal place.")
    humidity: float = Field(..., description="Relative humidity percentage, one decimal place.")
    sound: float = Field(..., description="Sound level, one decimal place.")
    lastSync: str = Field(
        default_factory=isoformat_now,
        description="ISO 8601 time the reading was recorded.",
    )
    connectionStatus: str = DEFAULT_CONNECTION_STATUS


class SubmitResponse(BaseModel):
    """Acknowledgement returned after a reading is stored."""

    success: bool = True
    data: Reading
    message: str = "Data received and processed successfully"


class ServerInfo(BaseModel):
    apiKey: str = Field(..., description="Configured API key with its middle masked.")
    deviceId: str


class ProbeResponse(BaseModel):
    """Unauthenticated connectivity check payload for field devices."""

    status: str = "online"
    message: str
    timestamp: str
    serverInfo: ServerInfo


class ServiceStatus(BaseModel):
    status: str = "ok"
    service: str
    version: str
    timestamp: str


class ErrorResponse(BaseModel):
    error: str
