"""Time-bounded memoization for option reads."""

from __future__ import annotations

import math
import threading
import time
from datetime import timedelta
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

INFINITE = math.inf


def to_seconds(duration: timedelta | float | int) -> float:
    """Normalise a cache duration to seconds; ``INFINITE`` is allowed."""

    seconds = duration.total_seconds() if isinstance(duration, timedelta) else float(duration)
    if seconds < 0 or math.isnan(seconds):
        raise ValueError(f"Cache duration must be non-negative, got {duration!r}")
    return seconds


class Cacheable(Generic[T]):
    """Holds one value for ``duration`` seconds after it was last populated.

    Reads are safe from several threads. The producer runs under a reentrant
    lock, so concurrent misses resolve the value once and a producer may call
    ``set`` on the same cache.
    """

    _MISSING = object()

    def __init__(self, duration: timedelta | float | int, clock: Callable[[], float] = time.monotonic):
        self.duration = to_seconds(duration)
        self._clock = clock
        self._lock = threading.RLock()
        self._value: object = self._MISSING
        self._stored_at = 0.0

    def _is_fresh(self) -> bool:
        if self._value is self._MISSING:
            return False
        return self._clock() - self._stored_at < self.duration

    @property
    def is_fresh(self) -> bool:
        with self._lock:
            return self._is_fresh()

    def get_or_compute(self, producer: Callable[[], T]) -> T:
        """Return the cached value, calling ``producer`` when it is missing or stale."""

        with self._lock:
            if self._is_fresh():
                return self._value  # type: ignore[return-value]
            value = producer()
            self._value = value
            self._stored_at = self._clock()
            return value

    def set(self, value: T) -> None:
        with self._lock:
            self._value = value
            self._stored_at = self._clock()

    def refresh(self) -> None:
        """Drop the cached value so the next read calls the producer."""

        with self._lock:
            self._value = self._MISSING


__all__ = ["Cacheable", "INFINITE", "to_seconds"]
