"""
Calendar-date normalization for follow-up fields.

Follow-up dates reach the engine as ``date`` objects from the ORM, as
``datetime`` values, or as raw strings in either ``YYYY-MM-DD`` or
``YYYY-MM-DDTHH:MM:SS...`` form. Everything is reduced to a plain
``date`` built from the year/month/day components, so a trailing time
or UTC offset can never move the value to a neighbouring day.
"""

from datetime import date, datetime, timedelta
from typing import Union

DateLike = Union[date, datetime, str]


def to_calendar_date(value: DateLike | None) -> date | None:
    """
    Normalize a date-ish value to a calendar date.

    Returns None for missing or unparsable input instead of raising.

    Example:
        >>> to_calendar_date("2024-06-12T23:30:00-05:00")
        datetime.date(2024, 6, 12)
    """
    if value is None:
        return None
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    date_part = text.split("T", 1)[0].split(" ", 1)[0]
    pieces = date_part.split("-")
    if len(pieces) != 3:
        return None
    try:
        year, month, day = (int(p) for p in pieces)
        return date(year, month, day)
    except ValueError:
        return None


def business_days_between(start: date, end: date) -> int:
    """
    Count weekdays in the half-open interval ``(start, end]``.

    Returns 0 when ``end`` is not after ``start``.
    """
    if end <= start:
        return 0

    total_days = (end - start).days
    full_weeks, remainder = divmod(total_days, 7)
    count = full_weeks * 5
    current = start + timedelta(days=full_weeks * 7)
    for _ in range(remainder):
        current += timedelta(days=1)
        if current.weekday() < 5:
            count += 1
    return count


def calendar_days_between(start: date, end: date) -> int:
    """Signed number of calendar days from ``start`` to ``end``."""
    return (end - start).days
