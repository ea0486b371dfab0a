"""Turn the loosely typed payloads devices send into well-formed readings.

Firmware in the field reports the same measurement under different keys
(``tempDHT`` from DHT sketches, ``soundValue`` from analog microphones and
so on). Each numeric field of :class:`~app.schemas.Reading` therefore has an
ordered list of candidate keys in :mod:`models.records`; the first candidate
holding a value wins.

Values that cannot be read as a finite number become ``0.0`` instead of
raising. A misspelt key on the device side therefore shows up as a zero
reading, not as a rejected request.
"""

from __future__ import annotations

import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, Callable, Mapping, Optional, Sequence

from app.schemas import DEFAULT_CONNECTION_STATUS, Reading, format_timestamp, isoformat_now
from models.records import NUMERIC_FIELDS

_ONE_DECIMAL = Decimal("0.1")
# Wide enough to quantize any finite double without InvalidOperation.
_QUANTIZE_CONTEXT = Context(prec=400)


def _is_present(value: Any) -> bool:
    return value is not None and value != ""


def resolve_first(attributes: Mapping[str, Any], candidates: Sequence[str]) -> Any:
    """Return the value of the first candidate key present in ``attributes``."""
    for key in candidates:
        value = attributes.get(key)
        if _is_present(value):
            return value
    return None


def coerce_number(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def round_one_decimal(value: float) -> float:
    """Round half away from zero on the decimal form of ``value``.

    Works on ``repr(value)`` rather than the binary float, so ``23.45``
    becomes ``23.5`` even though its nearest double is slightly below.
    """
    rounded = Decimal(repr(value)).quantize(
        _ONE_DECIMAL, rounding=ROUND_HALF_UP, context=_QUANTIZE_CONTEXT
    )
    # Adding 0.0 turns -0.0 into 0.0.
    return float(rounded) + 0.0


def normalize_reading(
    attributes: Mapping[str, Any],
    now: Optional[Callable[[], datetime]] = None,
) -> Reading:
    numbers = {
        field.name: round_one_decimal(coerce_number(resolve_first(attributes, field.candidates)))
        for field in NUMERIC_FIELDS
    }

    last_sync = attributes.get("lastSync")
    if not _is_present(last_sync):
        last_sync = format_timestamp(now()) if now is not None else isoformat_now()

    status = attributes.get("connectionStatus")
    if not _is_present(status):
        status = DEFAULT_CONNECTION_STATUS

    return Reading(
        **numbers,
        lastSync=str(last_sync),
        connectionStatus=str(status),
    )
