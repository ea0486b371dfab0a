"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from app.schemas import ErrorResponse, ProbeResponse, Reading, ServiceStatus, SubmitResponse, isoformat_now
from services.relay import RelayService, build_default_relay

SERVICE_NAME = "Baby Monitoring IoT Server"
SERVICE_VERSION = "1.0.0"

router = APIRouter()

_UNAUTHORIZED = {status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse}}


def get_relay() -> RelayService:
    return build_default_relay()


@router.get(
    "/",
    response_model=ServiceStatus,
    summary="Service status and version.",
    status_code=status.HTTP_200_OK,
)
async def root() -> ServiceStatus:
    return ServiceStatus(service=SERVICE_NAME, version=SERVICE_VERSION, timestamp=isoformat_now())


@router.get(
    "/readings",
    response_model=Reading,
    responses=_UNAUTHORIZED,
    summary="Fetch the most recent sensor reading.",
)
async def get_readings(
    device_id: Optional[str] = Query(
        None,
        alias="deviceId",
        description="When given, must match the configured device identifier.",
    ),
    relay: RelayService = Depends(get_relay),
) -> Reading:
    return relay.fetch_readings(device_id)


@router.post(
    "/update-readings",
    response_model=SubmitResponse,
    responses=_UNAUTHORIZED,
    summary="Submit new sensor values from the device.",
)
async def update_readings(
    payload: Any = Body(
        None,
        description="apiKey, optional deviceId and raw sensor fields.",
    ),
    relay: RelayService = Depends(get_relay),
) -> SubmitResponse:
    # Bodies that are not a JSON object (arrays, text/plain from device sketches)
    # carry no credentials and fall through to the API key check.
    return relay.submit_readings(payload if isinstance(payload, dict) else {})


@router.get(
    "/test",
    response_model=ProbeResponse,
    summary="Unauthenticated connectivity check for field devices.",
)
async def probe_connection(relay: RelayService = Depends(get_relay)) -> ProbeResponse:
    return relay.probe()
