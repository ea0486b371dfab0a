from __future__ import annotations

from functools import lru_cache
from threading import Lock
from typing import Optional

from app.schemas import Reading


def default_reading() -> Reading:
    return Reading(temperature=20.5, humidity=50.0, sound=35.0)


class ReadingStore:
    """In-memory cell holding the most recent reading.

    There is no history: every ``set`` replaces the previous value. Values
    are copied on the way in and out so callers never share the stored
    instance.
    """

    def __init__(self, initial: Optional[Reading] = None) -> None:
        self._reading = (initial or default_reading()).model_copy(deep=True)
        self._lock = Lock()

    def get(self) -> Reading:
        with self._lock:
            return self._reading.model_copy(deep=True)

    def set(self, reading: Reading) -> None:
        snapshot = reading.model_copy(deep=True)
        with self._lock:
            self._reading = snapshot


@lru_cache
def build_default_store() -> ReadingStore:
    return ReadingStore()
