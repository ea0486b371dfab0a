"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class FieldAliases:
    """Reading field and the payload keys it may arrive under, in priority order."""

    name: str
    candidates: Tuple[str, ...]


TEMPERATURE = FieldAliases("temperature", ("temperature", "tempDHT", "temp"))
HUMIDITY = FieldAliases("humidity", ("humidity", "humid"))
SOUND = FieldAliases("sound", ("sound", "soundValue"))

NUMERIC_FIELDS: Tuple[FieldAliases, ...] = (TEMPERATURE, HUMIDITY, SOUND)
