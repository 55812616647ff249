"""Typed node and edge structures for the plan hierarchy graph."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from okr_core.models.enums import (
    KrDirection,
    KrType,
    NodeType,
    PaceStatus,
    QuarterStatus,
    TaskPriority,
    TaskStatus,
)


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class NodeDimensions:
    width: float
    height: float


# Design constants, not computed from content.
NODE_DIMENSIONS: dict[NodeType, NodeDimensions] = {
    NodeType.PLAN: NodeDimensions(width=280, height=100),
    NodeType.OBJECTIVE: NodeDimensions(width=240, height=90),
    NodeType.KR: NodeDimensions(width=220, height=80),
    NodeType.QUARTER: NodeDimensions(width=120, height=50),
    NodeType.TASK: NodeDimensions(width=160, height=40),
}
DEFAULT_DIMENSIONS = NodeDimensions(width=200, height=80)


def get_node_dimensions(node_type: Optional[NodeType | str]) -> NodeDimensions:
    """Dimensions for a node type; unknown types get the default box."""
    try:
        return NODE_DIMENSIONS[NodeType(node_type)]
    except ValueError:
        return DEFAULT_DIMENSIONS


@dataclass(frozen=True)
class PlanNodeData:
    entity_id: str
    label: str
    progress: float
    pace_status: PaceStatus
    year: int
    objectives_count: int
    krs_count: int
    description: Optional[str] = None
    is_collapsed: bool = False
    child_count: int = 0
    type: NodeType = NodeType.PLAN


@dataclass(frozen=True)
class ObjectiveNodeData:
    entity_id: str
    label: str
    progress: float
    pace_status: PaceStatus
    code: str
    krs_count: int
    krs_completed: int
    description: Optional[str] = None
    is_collapsed: bool = False
    child_count: int = 0
    type: NodeType = NodeType.OBJECTIVE


@dataclass(frozen=True)
class KrNodeData:
    entity_id: str
    label: str
    progress: float
    pace_status: PaceStatus
    kr_type: KrType
    current_value: float
    target_value: float
    direction: KrDirection
    quarter_targets_count: int
    unit: Optional[str] = None
    description: Optional[str] = None
    is_collapsed: bool = False
    child_count: int = 0
    type: NodeType = NodeType.KR


@dataclass(frozen=True)
class QuarterNodeData:
    entity_id: str
    label: str
    progress: float
    pace_status: PaceStatus
    quarter: int
    target_value: float
    current_value: float
    status: QuarterStatus
    description: Optional[str] = None
    is_collapsed: bool = False
    child_count: int = 0
    type: NodeType = NodeType.QUARTER


@dataclass(frozen=True)
class TaskNodeData:
    entity_id: str
    label: str
    progress: float
    pace_status: PaceStatus
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[str] = None
    description: Optional[str] = None
    is_collapsed: bool = False
    child_count: int = 0
    type: NodeType = NodeType.TASK


MindmapNodeData = Union[
    PlanNodeData,
    ObjectiveNodeData,
    KrNodeData,
    QuarterNodeData,
    TaskNodeData,
]


@dataclass(frozen=True)
class MindmapNode:
    """A positioned graph node. Layout functions return new instances."""

    id: str
    type: NodeType
    data: MindmapNodeData
    position: Position = Position()


@dataclass(frozen=True)
class MindmapEdge:
    """Directed parent -> child link."""

    id: str
    source: str
    target: str

    @classmethod
    def link(cls, source: str, target: str) -> MindmapEdge:
        return cls(id=f"{source}-{target}", source=source, target=target)
