"""
Injectable clock.

Services that depend on "now" (exchange-rate cache expiry, the delivery
date window, the timestamp suffix used to disambiguate delivery note
numbers) receive a Clock instead of calling datetime.now() directly, so
tests can pin or advance time.
"""
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone
from typing import Optional


class Clock(ABC):
    """Abstract clock interface."""

    @abstractmethod
    def now(self) -> datetime:
        """Current timezone-aware UTC time."""
        ...

    def today(self) -> date:
        return self.now().date()

    def epoch_millis(self) -> int:
        return int(self.now().timestamp() * 1000)


class SystemClock(Clock):
    """Production clock returning the real system time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """
    Clock pinned to a fixed instant until moved explicitly.

    Example:
        clock = FixedClock(datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc))
        clock.advance(seconds=301)
    """

    def __init__(self, fixed_time: Optional[datetime] = None):
        self._fixed_time = fixed_time or datetime(2025, 1, 10, 12, 0, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._fixed_time

    def set_time(self, time: datetime) -> None:
        self._fixed_time = time

    def advance(self, seconds: float = 1) -> None:
        self._fixed_time = self._fixed_time + timedelta(seconds=seconds)


system_clock = SystemClock()
