from __future__ import annotations

import logging
import time
from logging.config import dictConfig
from typing import Iterable, Iterator, Sequence

from settings import get_settings

_DEFAULT_EXTRA_KEYS = (
    "device_id",
    "reason",
    "temperature",
    "humidity",
    "sound",
    "connection_status",
    "last_sync",
    "environment",
    "port",
)

_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

_configured = False


class ContextualFormatter(logging.Formatter):
    """Render ``extra`` context after the message as ``key=value`` pairs.

    Timestamps are UTC. Values containing whitespace are quoted so a log
    line stays splittable on spaces.
    """

    converter = time.gmtime

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        extra_keys: Iterable[str] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self._extra_keys: Sequence[str] = tuple(extra_keys or _DEFAULT_EXTRA_KEYS)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = " ".join(
            f"{key}={_render_value(value)}" for key, value in self._context(record)
        )
        return f"{message} | {context}" if context else message

    def _context(self, record: logging.LogRecord) -> Iterator[tuple[str, object]]:
        for key in self._extra_keys:
            value = record.__dict__.get(key)
            if value is not None:
                yield key, value


def _render_value(value: object) -> str:
    text = str(value)
    if not text or any(char.isspace() for char in text):
        return '"' + text.replace('"', '\\"') + '"'
    return text


def configure_logging(level: str | int | None = None) -> None:
    """Configure application-wide logging with contextual formatting.

    Only the first call takes effect; ``create_app`` calls this on every
    construction so repeated app builds in tests keep a single handler.
    """
    global _configured
    if _configured:
        return

    settings = get_settings()
    log_level = level if level is not None else settings.log_level

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "contextual": {
                    "()": "logging_config.ContextualFormatter",
                    "fmt": "%(asctime)sZ | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                    "style": "%",
                    "extra_keys": list(_DEFAULT_EXTRA_KEYS),
                }
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": "contextual",
                }
            },
            "loggers": {
                # Route uvicorn through the same handler so server and relay lines share a format.
                name: {"handlers": ["default"], "level": log_level, "propagate": False}
                for name in _SERVER_LOGGERS
            },
            "root": {"handlers": ["default"], "level": log_level},
        }
    )

    _configured = True
