from __future__ import annotations

from datetime import datetime, timezone

import pytest

from services.normalizer import coerce_number, normalize_reading, resolve_first, round_one_decimal


def _fixed_now() -> datetime:
    return datetime(2024, 5, 6, 7, 8, 9, 123000, tzinfo=timezone.utc)


def test_empty_payload_defaults_everything() -> None:
    reading = normalize_reading({}, now=_fixed_now)

    assert reading.temperature == 0.0
    assert reading.humidity == 0.0
    assert reading.sound == 0.0
    assert reading.lastSync == "2024-05-06T07:08:09.123Z"
    assert reading.connectionStatus == "connected"


def test_primary_key_wins_over_aliases() -> None:
    reading = normalize_reading({"temperature": 5, "tempDHT": 9, "temp": 11})

    assert reading.temperature == 5.0


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"tempDHT": 9, "temp": 11}, 9.0),
        ({"temp": 11}, 11.0),
        ({"temperature": None, "tempDHT": 7.25}, 7.3),
        ({"temperature": "", "temp": 3}, 3.0),
    ],
)
def test_temperature_falls_back_through_aliases(payload, expected) -> None:
    assert normalize_reading(payload).temperature == expected


def test_humidity_and_sound_aliases() -> None:
    reading = normalize_reading({"humid": 61.27, "soundValue": 12.96})

    assert reading.humidity == 61.3
    assert reading.sound == 13.0


def test_zero_is_a_present_value() -> None:
    reading = normalize_reading({"temperature": 0, "tempDHT": 18})

    assert reading.temperature == 0.0


def test_values_are_rounded_half_away_from_zero() -> None:
    reading = normalize_reading({"temperature": 23.45, "humidity": 60.12, "sound": 12.345})

    assert reading.temperature == 23.5
    assert reading.humidity == 60.1
    assert reading.sound == 12.3


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.05, 0.1),
        (-0.05, -0.1),
        (1.25, 1.3),
        (-2.35, -2.4),
        (19.94, 19.9),
        (100.0, 100.0),
        (1e20, 1e20),
    ],
)
def test_round_one_decimal(value, expected) -> None:
    assert round_one_decimal(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("21.7", 21.7),
        (" 4 ", 4.0),
        (3, 3.0),
        ("warm", 0.0),
        (True, 0.0),
        ([1, 2], 0.0),
        ({"value": 1}, 0.0),
        ("nan", 0.0),
        ("inf", 0.0),
        (10**400, 0.0),
        (None, 0.0),
    ],
)
def test_coerce_number(value, expected) -> None:
    assert coerce_number(value) == expected


def test_malformed_numbers_become_zero_without_raising() -> None:
    reading = normalize_reading({"temperature": "hot", "humidity": {"x": 1}, "sound": [3]})

    assert (reading.temperature, reading.humidity, reading.sound) == (0.0, 0.0, 0.0)


def test_writer_supplied_metadata_is_kept() -> None:
    reading = normalize_reading(
        {"lastSync": "2023-12-31T23:59:59.000Z", "connectionStatus": "disconnected"},
        now=_fixed_now,
    )

    assert reading.lastSync == "2023-12-31T23:59:59.000Z"
    assert reading.connectionStatus == "disconnected"


def test_last_sync_defaults_to_current_time() -> None:
    reading = normalize_reading({"temperature": 20})

    parsed = datetime.fromisoformat(reading.lastSync.replace("Z", "+00:00"))
    assert abs((datetime.now(timezone.utc) - parsed).total_seconds()) < 60


def test_resolve_first_returns_none_when_nothing_matches() -> None:
    assert resolve_first({"other": 1}, ("temperature", "temp")) is None


@pytest.mark.parametrize("value", [-0.04, -0.0, -0.049])
def test_small_negatives_round_to_positive_zero(value) -> None:
    rounded = round_one_decimal(value)

    assert rounded == 0.0
    assert str(rounded) == "0.0"
