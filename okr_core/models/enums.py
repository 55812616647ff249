from enum import Enum


class KrType(str, Enum):
    METRIC = "metric"
    COUNT = "count"
    MILESTONE = "milestone"
    RATE = "rate"
    AVERAGE = "average"
    BOOLEAN = "boolean"


class KrDirection(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"
    MAINTAIN = "maintain"


class KrAggregation(str, Enum):
    CUMULATIVE = "cumulative"
    RESET_QUARTERLY = "reset_quarterly"


class PaceStatus(str, Enum):
    AHEAD = "ahead"
    ON_TRACK = "on_track"
    AT_RISK = "at_risk"
    OFF_TRACK = "off_track"


class TaskStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class QuarterStatus(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"


class NodeType(str, Enum):
    PLAN = "plan"
    OBJECTIVE = "objective"
    KR = "kr"
    QUARTER = "quarter"
    TASK = "task"


class ViewMode(str, Enum):
    TREE = "tree"
    RADIAL = "radial"
    FOCUS = "focus"


class LayoutDirection(str, Enum):
    TOP_BOTTOM = "TB"
    LEFT_RIGHT = "LR"
