"""Daily and weekly progress series for burn-up style charts."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from datetime import date, datetime, timedelta
from typing import Optional

from okr_core.engine.calendar import as_utc, get_year_dates, start_of_day, start_of_week
from okr_core.engine.pace import (
    classify_pace_status,
    compute_expected_progress,
    compute_pace_ratio,
)
from okr_core.engine.progress import compute_current_value, compute_progress
from okr_core.engine.result import DailyDataPoint
from okr_core.models.records import CheckIn, KeyResult, Task


def build_daily_series(
    kr: KeyResult,
    check_ins: Sequence[CheckIn],
    year: int,
    start: Optional[datetime | date] = None,
    end: Optional[datetime | date] = None,
    *,
    tasks: Sequence[Task] = (),
) -> list[DailyDataPoint]:
    """One point per calendar day, valued as of the end of that day.

    Defaults to the whole plan year. Returns an empty list when end < start.
    Count KRs without check-ins are valued from ``tasks``.
    """
    year_window = get_year_dates(year)
    day = start_of_day(start if start is not None else year_window.start)
    last_day = start_of_day(end if end is not None else year_window.end)

    per_day: dict[datetime, int] = defaultdict(int)
    for ci in check_ins:
        per_day[start_of_day(ci.recorded_at)] += 1

    series: list[DailyDataPoint] = []
    while day <= last_day:
        end_of_day = day + timedelta(days=1) - timedelta(microseconds=1)
        current_value = compute_current_value(kr, check_ins, tasks, end_of_day)
        progress = compute_progress(kr.kr_type, current_value, kr.start_value, kr.target_value)
        expected = compute_expected_progress(year, day)
        pace_ratio = compute_pace_ratio(progress, expected)
        series.append(
            DailyDataPoint(
                date=day,
                current_value=current_value,
                progress=progress,
                expected_progress=expected,
                pace_ratio=pace_ratio,
                pace_status=classify_pace_status(pace_ratio),
                check_in_count=per_day.get(day, 0),
            )
        )
        day += timedelta(days=1)
    return series


def build_weekly_series(daily: Sequence[DailyDataPoint]) -> list[DailyDataPoint]:
    """Collapse a daily series into Sunday-started weeks.

    Each week carries its last day's values and the week's total check-ins.
    """
    weeks: dict[datetime, list[DailyDataPoint]] = {}
    for point in daily:
        weeks.setdefault(start_of_week(point.date), []).append(point)

    weekly: list[DailyDataPoint] = []
    for week_start in sorted(weeks):
        points = weeks[week_start]
        last = points[-1]
        weekly.append(
            DailyDataPoint(
                date=as_utc(week_start),
                current_value=last.current_value,
                progress=last.progress,
                expected_progress=last.expected_progress,
                pace_ratio=last.pace_ratio,
                pace_status=last.pace_status,
                check_in_count=sum(p.check_in_count for p in points),
            )
        )
    return weekly
