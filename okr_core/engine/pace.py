"""Pace classification shared by every progress consumer.

The threshold table below is the single source of truth for badges,
charts, rollups and mindmap nodes.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from okr_core.engine.calendar import TimeWindow, days_between, get_year_dates
from okr_core.models.enums import KrDirection, KrType, PaceStatus

# (minimum pace ratio, status), checked top to bottom.
PACE_THRESHOLDS: tuple[tuple[float, PaceStatus], ...] = (
    (1.10, PaceStatus.AHEAD),
    (0.90, PaceStatus.ON_TRACK),
    (0.70, PaceStatus.AT_RISK),
)

COMPLETE_STATUS = "complete"
NO_FORECAST = "—"

_PACE_LABELS = {
    PaceStatus.AHEAD: "Ahead",
    PaceStatus.ON_TRACK: "On Track",
    PaceStatus.AT_RISK: "At Risk",
    PaceStatus.OFF_TRACK: "Off Track",
}

_PACE_VARIANTS = {
    PaceStatus.AHEAD: "success",
    PaceStatus.ON_TRACK: "info",
    PaceStatus.AT_RISK: "warning",
    PaceStatus.OFF_TRACK: "danger",
}


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def clamp01(value: float) -> float:
    return clamp(value, 0.0, 1.0)


def expected_progress_in_window(window: TimeWindow, as_of: datetime | date) -> float:
    """Linear share of the window elapsed at as_of, clamped to [0, 1]."""
    total_days = days_between(window.start, window.end)
    if total_days <= 0:
        return 1.0
    elapsed = clamp(days_between(window.start, as_of), 0, total_days)
    return elapsed / total_days


def compute_expected_progress(year: int, as_of: datetime | date) -> float:
    """Fraction of the plan year elapsed, 0 before Jan 1 and 1 after Dec 31."""
    return expected_progress_in_window(get_year_dates(year), as_of)


def compute_expected_value(
    expected_progress: float,
    baseline: float,
    target: float,
) -> float:
    return baseline + (target - baseline) * expected_progress


def compute_pace_ratio(progress: float, expected_progress: float) -> float:
    """Actual over expected progress.

    Progress is clamped to [0, 1] before the comparison so over-delivery
    never inflates the ratio past what a completed KR would show.
    """
    if expected_progress <= 0:
        return 1.0
    return clamp01(progress) / expected_progress


def classify_pace_status(pace_ratio: float) -> PaceStatus:
    for minimum, status in PACE_THRESHOLDS:
        if pace_ratio >= minimum:
            return status
    return PaceStatus.OFF_TRACK


def pace_status_for(progress: float, year: int, as_of: datetime | date) -> PaceStatus:
    """Classify an aggregate progress value against the plan-year pace."""
    expected = compute_expected_progress(year, as_of)
    return classify_pace_status(compute_pace_ratio(progress, expected))


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def display_status(progress: float, pace_status: PaceStatus) -> str:
    """Status shown on dashboards: finished KRs read as "complete"."""
    if progress >= 1:
        return COMPLETE_STATUS
    return pace_status.value


def format_progress(progress: float) -> str:
    return f"{int(progress * 100 + 0.5)}%"


def format_pace_status(status: PaceStatus) -> str:
    return _PACE_LABELS[status]


def pace_status_variant(status: PaceStatus) -> str:
    """Badge variant for a pace status."""
    return _PACE_VARIANTS[status]


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:.1f}"


def format_value_with_unit(value: float, unit: Optional[str], kr_type: KrType) -> str:
    if kr_type == KrType.RATE:
        return f"{value:.1f}{unit or '%'}"
    formatted = _format_number(value)
    return f"{formatted} {unit}" if unit else formatted


def format_delta(delta: float, unit: Optional[str]) -> str:
    prefix = "+" if delta > 0 else ""
    suffix = f" {unit}" if unit else ""
    return f"{prefix}{_format_number(delta)}{suffix}"


def format_forecast(
    forecast_value: Optional[float],
    target: float,
    unit: Optional[str],
    kr_type: KrType,
) -> str:
    """Forecast next to the target, e.g. "120 users (≥ 100 users)"."""
    if forecast_value is None:
        return NO_FORECAST
    comparison = "≥" if forecast_value >= target else "<"
    formatted = format_value_with_unit(forecast_value, unit, kr_type)
    return f"{formatted} ({comparison} {format_value_with_unit(target, unit, kr_type)})"


def compute_delta(current_value: float, target: float, direction: KrDirection) -> float:
    """Distance from target; positive means better than target."""
    if direction == KrDirection.DECREASE:
        return target - current_value
    return current_value - target
