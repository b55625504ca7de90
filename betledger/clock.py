"""Clocks supplying nanosecond timestamps to the ledger."""

import threading
import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Source of the current instant, in nanoseconds, never decreasing."""

    @abstractmethod
    def now(self) -> int: ...


class SystemClock(Clock):
    """Wall-clock time, clamped so it never runs backwards for this instance."""

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            self._last = max(self._last, time.time_ns())
            return self._last


class ManualClock(Clock):
    """Externally driven clock for hosts that supply their own time, and for tests."""

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError(f"Clock start must be non-negative, got {start}")
        self._now = start

    def now(self) -> int:
        return self._now

    def set(self, ns: int) -> None:
        if ns < self._now:
            raise ValueError(f"Clock cannot move backwards ({ns} < {self._now})")
        self._now = ns

    def advance(self, ns: int) -> int:
        self.set(self._now + ns)
        return self._now
