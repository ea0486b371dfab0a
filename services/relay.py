"""Credential checks and the read/write/probe operations over the reading store."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Mapping, Optional

from app.schemas import ProbeResponse, Reading, ServerInfo, SubmitResponse, isoformat_now
from datastore.reading_store import ReadingStore, build_default_store
from services.normalizer import normalize_reading
from settings import get_settings, mask_secret

logger = logging.getLogger(__name__)

PROBE_MESSAGE = "Baby Monitor IoT server is running"


class Unauthorized(Exception):
    """Request carried credentials that do not match the configured ones."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidApiKey(Unauthorized):
    def __init__(self) -> None:
        super().__init__("Invalid API key")


class InvalidDeviceId(Unauthorized):
    def __init__(self) -> None:
        super().__init__("Invalid device ID")


class RelayService:
    """Serves and replaces the current reading on behalf of the HTTP layer."""

    def __init__(self, store: ReadingStore, api_key: str, device_id: str) -> None:
        self.store = store
        self.api_key = api_key
        self.device_id = device_id

    def fetch_readings(self, device_id: Optional[str] = None) -> Reading:
        self._check_device(device_id)
        reading = self.store.get()
        logger.info(
            "Serving current reading",
            extra={
                "device_id": self.device_id,
                "temperature": reading.temperature,
                "humidity": reading.humidity,
                "sound": reading.sound,
                "last_sync": reading.lastSync,
            },
        )
        return reading

    def submit_readings(self, payload: Mapping[str, Any]) -> SubmitResponse:
        logger.debug(
            "Received payload from device: %s",
            {key: value for key, value in payload.items() if key != "apiKey"},
        )
        if payload.get("apiKey") != self.api_key:
            logger.warning("Rejected submission", extra={"reason": "invalid_api_key"})
            raise InvalidApiKey()
        self._check_device(payload.get("deviceId"))

        reading = normalize_reading(payload)
        self.store.set(reading)
        logger.info(
            "Stored new reading",
            extra={
                "device_id": self.device_id,
                "temperature": reading.temperature,
                "humidity": reading.humidity,
                "sound": reading.sound,
                "connection_status": reading.connectionStatus,
                "last_sync": reading.lastSync,
            },
        )
        return SubmitResponse(data=reading)

    def probe(self) -> ProbeResponse:
        return ProbeResponse(
            message=PROBE_MESSAGE,
            timestamp=isoformat_now(),
            serverInfo=ServerInfo(apiKey=mask_secret(self.api_key), deviceId=self.device_id),
        )

    def _check_device(self, device_id: Any) -> None:
        # Absent or empty means the caller did not ask for a specific device.
        if device_id is None or device_id == "":
            return
        if device_id != self.device_id:
            logger.warning(
                "Rejected request for unknown device",
                extra={"device_id": device_id, "reason": "invalid_device_id"},
            )
            raise InvalidDeviceId()


@lru_cache
def build_default_relay() -> RelayService:
    settings = get_settings()
    return RelayService(
        store=build_default_store(),
        api_key=settings.api_key,
        device_id=settings.device_id,
    )
