"""
Injectable clock so services never call ``datetime.now()`` directly.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """Abstract clock interface."""

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time as a timezone-aware UTC datetime."""
        ...

    def timestamp_ms(self) -> int:
        """Milliseconds since the epoch, used to build upload paths."""
        return int(self.now().timestamp() * 1000)


class SystemClock(Clock):
    """Production clock that returns actual system time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """
    Test clock with controlled time.

    Every call to ``now()`` returns the current value and then moves it
    forward by ``step``; ``step`` defaults to zero (frozen time).
    """

    def __init__(self, start: datetime, step: timedelta = timedelta(0)):
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        self._current = start
        self._step = step

    def now(self) -> datetime:
        value = self._current
        self._current = self._current + self._step
        return value

    def advance(self, delta: timedelta) -> None:
        self._current = self._current + delta
