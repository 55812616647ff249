"""Core progress engine.

Takes a key result definition plus its check-ins and linked tasks and
produces a ProgressResult: current value, normalized progress, expected
value to date and pace status. All functions are pure; inputs are never
mutated and malformed-but-typed data degrades to a defined result instead
of raising.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from okr_core.engine.calendar import (
    TimeWindow,
    as_utc,
    days_between,
    get_quarter_dates,
    get_year_dates,
)
from okr_core.engine.pace import (
    classify_pace_status,
    clamp01,
    compute_delta,
    compute_expected_value,
    compute_pace_ratio,
    expected_progress_in_window,
)
from okr_core.engine.result import ProgressResult
from okr_core.models.enums import KrAggregation, KrType, TaskStatus
from okr_core.models.records import CheckIn, KeyResult, QuarterTarget, Task

logger = logging.getLogger(__name__)


def latest_check_in(
    check_ins: Iterable[CheckIn],
    as_of: datetime | date,
    since: Optional[datetime | date] = None,
) -> Optional[CheckIn]:
    """Most recent check-in recorded on or before as_of (and on/after since)."""
    cutoff = as_utc(as_of)
    floor = as_utc(since) if since is not None else None
    eligible = [
        ci
        for ci in check_ins
        if as_utc(ci.recorded_at) <= cutoff
        and (floor is None or as_utc(ci.recorded_at) >= floor)
    ]
    if not eligible:
        return None
    # Ties on timestamp resolve by id so the result is independent of input order.
    return max(eligible, key=lambda ci: (as_utc(ci.recorded_at), ci.id))


def count_completed_tasks(
    tasks: Iterable[Task],
    as_of: datetime | date,
    since: Optional[datetime | date] = None,
) -> int:
    """Tasks completed on or before as_of; completed tasks without a date are ignored."""
    cutoff = as_utc(as_of)
    floor = as_utc(since) if since is not None else None
    count = 0
    for task in tasks:
        if task.status != TaskStatus.COMPLETED or task.completed_at is None:
            continue
        completed = as_utc(task.completed_at)
        if completed > cutoff:
            continue
        if floor is not None and completed < floor:
            continue
        count += 1
    return count


def compute_current_value(
    kr: KeyResult,
    check_ins: Sequence[CheckIn],
    tasks: Sequence[Task],
    as_of: datetime | date,
    *,
    since: Optional[datetime | date] = None,
    fallback: Optional[float] = None,
) -> float:
    """Value of the KR as of a reference date.

    Check-ins win when any exist; count KRs without check-ins fall back to
    completed tasks; everything else reads the start value.
    """
    default = kr.start_value if fallback is None else fallback
    if check_ins:
        latest = latest_check_in(check_ins, as_of, since)
        return latest.value if latest is not None else default
    if kr.kr_type == KrType.COUNT and tasks:
        return float(count_completed_tasks(tasks, as_of, since))
    return default


def compute_raw_progress(
    kr_type: KrType,
    current_value: float,
    baseline: float,
    target: float,
) -> float:
    """Unclamped progress; may exceed 1 (over-delivery) or drop below 0."""
    if kr_type in (KrType.MILESTONE, KrType.BOOLEAN):
        return 1.0 if current_value >= 1 else 0.0

    span = target - baseline
    if span == 0:
        # Start equals target: treated as already met.
        logger.debug("Degenerate KR range (start == target == %s); progress = 1", target)
        return 1.0
    return (current_value - baseline) / span


def compute_progress(
    kr_type: KrType,
    current_value: float,
    baseline: float,
    target: float,
) -> float:
    """Progress fraction clamped to [0, 1]."""
    return clamp01(compute_raw_progress(kr_type, current_value, baseline, target))


def compute_forecast(
    kr_type: KrType,
    baseline: float,
    current_value: float,
    window: TimeWindow,
    as_of: datetime | date,
) -> Optional[float]:
    """Projected end-of-window value from the average daily rate so far."""
    if kr_type in (KrType.MILESTONE, KrType.BOOLEAN):
        return None
    elapsed = max(1, days_between(window.start, as_of))
    remaining = max(0, days_between(as_of, window.end))
    rate_per_day = (current_value - baseline) / elapsed
    return current_value + rate_per_day * remaining


def compute_milestone_forecast_date(
    completed_tasks: int,
    total_tasks: int,
    window: TimeWindow,
    as_of: datetime | date,
) -> Optional[datetime]:
    """Projected completion date from the task completion rate so far.

    Returns as_of when every task is done, and None when nothing has been
    completed yet.
    """
    now = as_utc(as_of)
    if completed_tasks >= total_tasks:
        return now
    if completed_tasks <= 0:
        return None
    elapsed = max(1, days_between(window.start, now))
    # remaining / (completed / elapsed), kept in integers until the division.
    days_needed = math.ceil((total_tasks - completed_tasks) * elapsed / completed_tasks)
    return now + timedelta(days=days_needed)


def _milestone_forecast_date(
    kr: KeyResult,
    tasks: Sequence[Task],
    window: TimeWindow,
    as_of: datetime,
) -> Optional[datetime]:
    if kr.kr_type != KrType.MILESTONE or not tasks:
        return None
    completed = count_completed_tasks(tasks, as_of, since=window.start)
    return compute_milestone_forecast_date(completed, len(tasks), window, as_of)


def _build_result(
    kr: KeyResult,
    last: Optional[CheckIn],
    current_value: float,
    baseline: float,
    target: float,
    window: TimeWindow,
    as_of: datetime,
    forecast_date: Optional[datetime] = None,
) -> ProgressResult:
    raw_progress = compute_raw_progress(kr.kr_type, current_value, baseline, target)
    progress = clamp01(raw_progress)

    expected_progress = expected_progress_in_window(window, as_of)
    expected_value = compute_expected_value(expected_progress, baseline, target)
    pace_ratio = compute_pace_ratio(progress, expected_progress)

    return ProgressResult(
        current_value=current_value,
        progress=progress,
        expected_value=expected_value,
        pace_status=classify_pace_status(pace_ratio),
        raw_progress=raw_progress,
        expected_progress=expected_progress,
        pace_ratio=pace_ratio,
        baseline=baseline,
        target=target,
        delta=compute_delta(current_value, target, kr.direction),
        forecast_value=compute_forecast(kr.kr_type, baseline, current_value, window, as_of),
        forecast_date=forecast_date,
        days_elapsed=max(0, days_between(window.start, as_of)),
        days_remaining=max(0, days_between(as_of, window.end)),
        last_check_in_date=as_utc(last.recorded_at) if last is not None else None,
    )


def compute_kr_progress(
    kr: KeyResult,
    check_ins: Sequence[CheckIn],
    tasks: Sequence[Task],
    year: int,
    as_of: Optional[datetime | date] = None,
) -> ProgressResult:
    """Compute the full progress snapshot for an annual key result.

    Args:
        kr: Key result definition.
        check_ins: All check-ins for this KR, any order.
        tasks: All tasks linked to this KR, any order.
        year: Plan year; the pace baseline runs Jan 1 to Dec 31.
        as_of: Reference "now". Defaults to the current UTC time.
    """
    now = as_utc(as_of) if as_of is not None else datetime.now(tz=timezone.utc)
    current_value = compute_current_value(kr, check_ins, tasks, now)
    window = get_year_dates(year)
    return _build_result(
        kr,
        latest_check_in(check_ins, now),
        current_value=current_value,
        baseline=kr.start_value,
        target=kr.target_value,
        window=window,
        as_of=now,
        forecast_date=_milestone_forecast_date(kr, tasks, window, now),
    )


def compute_quarter_target_progress(
    quarter_target: QuarterTarget,
    kr: KeyResult,
    check_ins: Sequence[CheckIn],
    tasks: Sequence[Task],
    year: int,
    as_of: Optional[datetime | date] = None,
) -> ProgressResult:
    """Progress of a KR against one of its quarter targets.

    Only check-ins and tasks linked to the quarter target count. Cumulative
    KRs measure from Jan 1 and the KR start value; quarterly-reset KRs
    measure from the first day of the quarter and zero.
    """
    now = as_utc(as_of) if as_of is not None else datetime.now(tz=timezone.utc)
    quarter_window = get_quarter_dates(year, quarter_target.quarter)
    cumulative = kr.aggregation == KrAggregation.CUMULATIVE
    window = TimeWindow(
        start=get_year_dates(year).start if cumulative else quarter_window.start,
        end=quarter_window.end,
    )
    baseline = kr.start_value if cumulative else 0.0

    qt_check_ins = [ci for ci in check_ins if ci.quarter_target_id == quarter_target.id]
    qt_tasks = [t for t in tasks if t.quarter_target_id == quarter_target.id]

    cutoff = min(now, window.end + timedelta(days=1) - timedelta(microseconds=1))
    current_value = compute_current_value(
        kr,
        qt_check_ins,
        qt_tasks,
        cutoff,
        since=window.start,
        fallback=baseline,
    )
    return _build_result(
        kr,
        latest_check_in(qt_check_ins, cutoff, since=window.start),
        current_value=current_value,
        baseline=baseline,
        target=quarter_target.target_value,
        window=window,
        as_of=now,
        forecast_date=_milestone_forecast_date(kr, qt_tasks, window, now),
    )
