"""Immutable result structures produced by the progress engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from okr_core.models.enums import PaceStatus


@dataclass(frozen=True)
class ProgressResult:
    """Progress snapshot for a single key result (or quarter target)."""

    current_value: float
    progress: float
    expected_value: float
    pace_status: PaceStatus
    raw_progress: float
    expected_progress: float
    pace_ratio: float
    baseline: float
    target: float
    delta: float
    forecast_value: Optional[float] = None
    # Milestones with linked tasks only.
    forecast_date: Optional[datetime] = None
    days_elapsed: int = 0
    days_remaining: int = 0
    last_check_in_date: Optional[datetime] = None

    @property
    def is_complete(self) -> bool:
        return self.progress >= 1


@dataclass(frozen=True)
class KrProgressEntry:
    """A KR id paired with its computed progress, as used by rollups."""

    kr_id: str
    result: ProgressResult


@dataclass(frozen=True)
class ObjectiveProgress:
    """Unweighted rollup of an objective's key results."""

    objective_id: str
    progress: float
    expected_progress: float
    pace_status: PaceStatus
    kr_count: int
    completed_count: int
    kr_progresses: list[KrProgressEntry] = field(default_factory=list)


@dataclass(frozen=True)
class PlanProgress:
    """Rollup over every key result in a plan, flattened across objectives."""

    plan_id: str
    progress: float
    expected_progress: float
    pace_status: PaceStatus
    objective_count: int
    kr_count: int
    completed_count: int
    objective_progresses: list[ObjectiveProgress] = field(default_factory=list)


@dataclass(frozen=True)
class DailyDataPoint:
    """One day (or week) of a KR's progress series."""

    date: datetime
    current_value: float
    progress: float
    expected_progress: float
    pace_ratio: float
    pace_status: PaceStatus
    check_in_count: int
