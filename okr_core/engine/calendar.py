"""Date arithmetic shared by the progress engine and the mindmap transformer."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

from okr_core.models.enums import QuarterStatus

_SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class TimeWindow:
    """Inclusive [start, end] window of aware datetimes."""

    start: datetime
    end: datetime


def as_utc(value: datetime | date) -> datetime:
    """Normalize a date or datetime to an aware UTC datetime.

    Naive datetimes are taken to already be in UTC; plain dates map to
    midnight.
    """
    if not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def days_between(start: datetime | date, end: datetime | date) -> int:
    """Whole days from start to end, rounded half-up (can be negative)."""
    seconds = (as_utc(end) - as_utc(start)).total_seconds()
    return math.floor(seconds / _SECONDS_PER_DAY + 0.5)


def start_of_day(value: datetime | date) -> datetime:
    dt = as_utc(value)
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(value: datetime | date) -> datetime:
    """Sunday-started week containing value."""
    dt = start_of_day(value)
    # weekday(): Monday=0 .. Sunday=6
    return dt - timedelta(days=(dt.weekday() + 1) % 7)


def get_year_dates(year: int) -> TimeWindow:
    """Jan 1 to Dec 31 of the given year."""
    return TimeWindow(
        start=datetime(year, 1, 1, tzinfo=timezone.utc),
        end=datetime(year, 12, 31, tzinfo=timezone.utc),
    )


def get_quarter_dates(year: int, quarter: int) -> TimeWindow:
    """First day to last day of a calendar quarter."""
    if quarter not in (1, 2, 3, 4):
        raise ValueError(f"quarter must be 1-4, got {quarter}")
    start_month = (quarter - 1) * 3 + 1
    start = datetime(year, start_month, 1, tzinfo=timezone.utc)
    if quarter == 4:
        return TimeWindow(start=start, end=datetime(year, 12, 31, tzinfo=timezone.utc))
    next_start = datetime(year, start_month + 3, 1, tzinfo=timezone.utc)
    return TimeWindow(start=start, end=next_start - timedelta(days=1))


def get_current_quarter(as_of: datetime | date) -> int:
    return (as_utc(as_of).month - 1) // 3 + 1


def quarter_status(quarter: int, year: int, as_of: datetime | date) -> QuarterStatus:
    """Whether a plan quarter is in the past, present or future relative to as_of."""
    now = as_utc(as_of)
    if year > now.year:
        return QuarterStatus.UPCOMING
    if year < now.year:
        return QuarterStatus.COMPLETED

    current = get_current_quarter(now)
    if quarter < current:
        return QuarterStatus.COMPLETED
    if quarter > current:
        return QuarterStatus.UPCOMING
    return QuarterStatus.ACTIVE
