"""
Injectable source of "today".

Urgency classification must never read the ambient system clock
directly; callers receive a Clock and pass its date down.
"""

from datetime import date, datetime
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    """Anything that can tell the current calendar date."""

    def today(self) -> date: ...


class SystemClock:
    """Clock backed by the system time, evaluated in a business timezone."""

    def __init__(self, timezone: str = "UTC") -> None:
        self.tz = ZoneInfo(timezone)

    def today(self) -> date:
        return datetime.now(self.tz).date()


class FixedClock:
    """Clock pinned to a single day. Used by tests and report replays."""

    def __init__(self, day: date) -> None:
        self.day = day

    def today(self) -> date:
        return self.day
