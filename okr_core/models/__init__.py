from .enums import (
    KrAggregation,
    KrDirection,
    KrType,
    LayoutDirection,
    NodeType,
    PaceStatus,
    QuarterStatus,
    TaskPriority,
    TaskStatus,
    ViewMode,
)
from .records import CheckIn, KeyResult, Objective, Plan, QuarterTarget, Task

__all__ = [
    "CheckIn",
    "KeyResult",
    "KrAggregation",
    "KrDirection",
    "KrType",
    "LayoutDirection",
    "NodeType",
    "Objective",
    "PaceStatus",
    "Plan",
    "QuarterStatus",
    "QuarterTarget",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "ViewMode",
]
