"""
Follow-up urgency classification.

Pure functions of ("today", follow-up date). Nothing here reads the
system clock, so results can be cached per (today, input) pair.
"""

import enum
from dataclasses import dataclass
from datetime import date, datetime

from bidflow.engine.dates import DateLike, business_days_between, calendar_days_between, to_calendar_date

DEFAULT_CRITICAL_WINDOW_DAYS = 3


class UrgencyLevel(str, enum.Enum):
    """Urgency of a follow-up date relative to today, most severe first."""

    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    CRITICAL = "critical"
    NORMAL = "normal"

    @property
    def severity(self) -> int:
        """Higher is more urgent."""
        return _SEVERITY[self]


_SEVERITY = {
    UrgencyLevel.NORMAL: 0,
    UrgencyLevel.CRITICAL: 1,
    UrgencyLevel.DUE_TODAY: 2,
    UrgencyLevel.OVERDUE: 3,
}


@dataclass(frozen=True)
class UrgencyResult:
    """Classification plus the day counts behind it."""

    level: UrgencyLevel
    days_remaining: int = 0
    days_overdue: int = 0

    @property
    def is_overdue(self) -> bool:
        return self.level is UrgencyLevel.OVERDUE


NORMAL = UrgencyResult(UrgencyLevel.NORMAL)


def assess(
    today: date | datetime,
    follow_up_date: DateLike | None,
    *,
    critical_window_days: int = DEFAULT_CRITICAL_WINDOW_DAYS,
    business_days: bool = True,
) -> UrgencyResult:
    """
    Classify a follow-up date against today.

    Args:
        today: Reference day; a datetime is reduced to its date
        follow_up_date: Date-ish value; missing or malformed means no deadline
        critical_window_days: Upper bound of the due-soon window
        business_days: Count the window in weekdays instead of calendar days

    Returns:
        UrgencyResult: Level plus remaining/overdue day counts. When
        ``business_days`` is set the counts are in weekdays.
    """
    due = to_calendar_date(follow_up_date)
    if due is None:
        return NORMAL
    reference = to_calendar_date(today)
    if reference is None:
        return NORMAL

    delta = calendar_days_between(reference, due)
    count = business_days_between if business_days else _calendar_count

    if delta < 0:
        return UrgencyResult(UrgencyLevel.OVERDUE, days_overdue=count(due, reference))
    if delta == 0:
        return UrgencyResult(UrgencyLevel.DUE_TODAY)

    remaining = count(reference, due)
    # A weekend due date seen from a Friday has zero weekdays left: still due soon
    if remaining <= critical_window_days:
        return UrgencyResult(UrgencyLevel.CRITICAL, days_remaining=remaining)
    return UrgencyResult(UrgencyLevel.NORMAL, days_remaining=remaining)


def classify(
    today: date | datetime,
    follow_up_date: DateLike | None,
    *,
    critical_window_days: int = DEFAULT_CRITICAL_WINDOW_DAYS,
    business_days: bool = True,
) -> UrgencyLevel:
    """Urgency level only. See :func:`assess`."""
    return assess(
        today,
        follow_up_date,
        critical_window_days=critical_window_days,
        business_days=business_days,
    ).level


def most_severe(levels) -> UrgencyLevel:
    """Worst level in an iterable; NORMAL when empty."""
    return max(levels, key=lambda level: level.severity, default=UrgencyLevel.NORMAL)


def _calendar_count(start: date, end: date) -> int:
    return max(calendar_days_between(start, end), 0)
