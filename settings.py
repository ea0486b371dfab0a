from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

from dotenv import load_dotenv


_HOST_ENV = "HOST"
_PORT_ENV = "PORT"
_ENVIRONMENT_ENV = "APP_ENV"
_API_KEY_ENV = "API_KEY"
_DEVICE_ID_ENV = "DEVICE_ID"
_ALLOWED_ORIGINS_ENV = "CORS_ALLOWED_ORIGINS"
_LOG_LEVEL_ENV = "LOG_LEVEL"

PRODUCTION = "production"

_PRODUCTION_ORIGINS = (
    "https://baby-monitoring-app.onrender.com",
    "https://baby-monitoring-client.onrender.com",
)


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    environment: str
    api_key: str
    device_id: str
    allowed_origins: Tuple[str, ...]
    log_level: str

    @property
    def is_production(self) -> bool:
        return self.environment == PRODUCTION


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_port(default: int) -> int:
    value = os.getenv(_PORT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_allowed_origins(is_production: bool) -> Tuple[str, ...]:
    value = os.getenv(_ALLOWED_ORIGINS_ENV)
    if value is not None:
        origins = tuple(part.strip() for part in value.split(",") if part.strip())
        if origins:
            return origins
    return _PRODUCTION_ORIGINS if is_production else ("*",)


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    load_dotenv(override=False)
    environment = _read_str_env(_ENVIRONMENT_ENV, "development").lower()
    return Settings(
        host=_read_str_env(_HOST_ENV, "0.0.0.0"),
        port=_read_port(5000),
        environment=environment,
        api_key=_read_str_env(_API_KEY_ENV, "your-secret-api-key"),
        device_id=_read_str_env(_DEVICE_ID_ENV, "baby-monitor-01"),
        allowed_origins=_read_allowed_origins(environment == PRODUCTION),
        log_level=_read_log_level("INFO"),
    )


def mask_secret(secret: str) -> str:
    """Keep the first and last three characters of ``secret`` visible."""
    return f"{secret[:3]}...{secret[-3:]}"
