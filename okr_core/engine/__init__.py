from .pace import (
    classify_pace_status,
    compute_expected_progress,
    compute_pace_ratio,
    pace_status_for,
)
from .progress import compute_kr_progress, compute_quarter_target_progress
from .result import KrProgressEntry, ObjectiveProgress, PlanProgress, ProgressResult
from .rollup import compute_objective_progress, compute_plan_progress, compute_plan_rollup
from .series import build_daily_series, build_weekly_series

__all__ = [
    "KrProgressEntry",
    "ObjectiveProgress",
    "PlanProgress",
    "ProgressResult",
    "build_daily_series",
    "build_weekly_series",
    "classify_pace_status",
    "compute_expected_progress",
    "compute_kr_progress",
    "compute_objective_progress",
    "compute_pace_ratio",
    "compute_plan_progress",
    "compute_plan_rollup",
    "compute_quarter_target_progress",
    "pace_status_for",
]
