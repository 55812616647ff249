"""Objective and plan rollups over per-KR progress results."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime, timezone
from typing import Optional

from okr_core.engine.calendar import as_utc
from okr_core.engine.pace import compute_expected_progress, pace_status_for
from okr_core.engine.progress import compute_kr_progress
from okr_core.engine.result import KrProgressEntry, ObjectiveProgress, PlanProgress
from okr_core.models.records import CheckIn, Objective, Plan, Task


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def group_check_ins_by_kr(check_ins: Iterable[CheckIn]) -> dict[str, list[CheckIn]]:
    grouped: dict[str, list[CheckIn]] = {}
    for ci in check_ins:
        grouped.setdefault(ci.kr_id, []).append(ci)
    return grouped


def group_tasks_by_kr(tasks: Iterable[Task]) -> dict[str, list[Task]]:
    """Tasks keyed by linked KR; unlinked tasks are dropped."""
    grouped: dict[str, list[Task]] = {}
    for task in tasks:
        if task.kr_id:
            grouped.setdefault(task.kr_id, []).append(task)
    return grouped


def compute_objective_progress(
    objective: Objective,
    kr_progresses: Sequence[KrProgressEntry],
    year: int,
    as_of: datetime | date,
) -> ObjectiveProgress:
    """Unweighted mean of the objective's KR progress.

    Pace is re-derived from the aggregate progress rather than taken as
    the worst child status.
    """
    progress = _mean([entry.result.progress for entry in kr_progresses])
    expected = compute_expected_progress(year, as_of)
    return ObjectiveProgress(
        objective_id=objective.id,
        progress=progress,
        expected_progress=expected,
        pace_status=pace_status_for(progress, year, as_of),
        kr_count=len(kr_progresses),
        completed_count=sum(1 for entry in kr_progresses if entry.result.progress >= 1),
        kr_progresses=list(kr_progresses),
    )


def compute_plan_progress(
    plan: Plan,
    objective_progresses: Sequence[ObjectiveProgress],
    as_of: datetime | date,
) -> PlanProgress:
    """Mean over every KR in the plan, flattened across objectives."""
    entries = [entry for op in objective_progresses for entry in op.kr_progresses]
    progress = _mean([entry.result.progress for entry in entries])
    expected = compute_expected_progress(plan.year, as_of)
    return PlanProgress(
        plan_id=plan.id,
        progress=progress,
        expected_progress=expected,
        pace_status=pace_status_for(progress, plan.year, as_of),
        objective_count=len(objective_progresses),
        kr_count=len(entries),
        completed_count=sum(1 for entry in entries if entry.result.progress >= 1),
        objective_progresses=list(objective_progresses),
    )


def compute_plan_rollup(
    plan: Plan,
    check_ins: Iterable[CheckIn],
    tasks: Iterable[Task],
    as_of: Optional[datetime | date] = None,
) -> PlanProgress:
    """Compute every KR, objective and plan result for a plan in one pass."""
    now = as_utc(as_of) if as_of is not None else datetime.now(tz=timezone.utc)
    check_ins_by_kr = group_check_ins_by_kr(check_ins)
    tasks_by_kr = group_tasks_by_kr(tasks)

    objective_progresses: list[ObjectiveProgress] = []
    for objective in plan.objectives:
        entries = [
            KrProgressEntry(
                kr_id=kr.id,
                result=compute_kr_progress(
                    kr,
                    check_ins_by_kr.get(kr.id, []),
                    tasks_by_kr.get(kr.id, []),
                    plan.year,
                    now,
                ),
            )
            for kr in objective.key_results
        ]
        objective_progresses.append(
            compute_objective_progress(objective, entries, plan.year, now)
        )

    return compute_plan_progress(plan, objective_progresses, now)
