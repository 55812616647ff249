"""Pydantic models for the plan, objective, KR, check-in and task records
consumed by the progress engine and the mindmap transformer.

Records are supplied by the caller's data layer and are never mutated.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import KrAggregation, KrDirection, KrType, TaskPriority, TaskStatus


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)


class QuarterTarget(_Record):
    """A per-quarter target for an annual key result."""

    id: str
    kr_id: str
    quarter: int = Field(ge=1, le=4)
    target_value: float


class KeyResult(_Record):
    """Immutable key result definition."""

    id: str
    name: str = ""
    description: Optional[str] = None
    kr_type: KrType = KrType.METRIC
    start_value: float = 0.0
    target_value: float
    unit: Optional[str] = None
    direction: KrDirection = KrDirection.INCREASE
    aggregation: KrAggregation = KrAggregation.CUMULATIVE
    year: Optional[int] = None
    quarter_targets: list[QuarterTarget] = Field(default_factory=list)

    @property
    def is_binary(self) -> bool:
        """Milestone and boolean KRs are either done or not."""
        return self.kr_type in (KrType.MILESTONE, KrType.BOOLEAN)


class CheckIn(_Record):
    """Append-only recorded reading for a key result."""

    id: str
    kr_id: str
    value: float
    previous_value: Optional[float] = None
    recorded_at: datetime
    quarter_target_id: Optional[str] = None


class Task(_Record):
    """Work item that may contribute to a count-type key result."""

    id: str
    title: str = ""
    kr_id: Optional[str] = None
    quarter_target_id: Optional[str] = None
    status: TaskStatus = TaskStatus.NOT_STARTED
    completed_at: Optional[datetime] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[str] = None


class Objective(_Record):
    """Groups key results under a coded objective."""

    id: str
    code: str = ""
    name: str
    description: Optional[str] = None
    key_results: list[KeyResult] = Field(default_factory=list)


class Plan(_Record):
    """Top-level annual container."""

    id: str
    year: int = Field(ge=1, le=9999)
    name: str = ""
    description: Optional[str] = None
    objectives: list[Objective] = Field(default_factory=list)

    @field_validator("objectives")
    @classmethod
    def objective_ids_unique(cls, v: list[Objective]) -> list[Objective]:
        seen: set[str] = set()
        for obj in v:
            if obj.id in seen:
                raise ValueError(f"Duplicate objective id '{obj.id}' in plan")
            seen.add(obj.id)
        return v

    def all_key_results(self) -> list[KeyResult]:
        """Return every KR across all objectives, in plan order."""
        return [kr for obj in self.objectives for kr in obj.key_results]
