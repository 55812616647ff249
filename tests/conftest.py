"""Shared fixtures: record factories and small hand-built graphs."""

from datetime import datetime, timezone

import pytest

from okr_core.mindmap.schema import LayoutConfig
from okr_core.mindmap.types import (
    KrNodeData,
    MindmapEdge,
    MindmapNode,
    ObjectiveNodeData,
    PlanNodeData,
    QuarterNodeData,
    TaskNodeData,
)
from okr_core.models.enums import (
    KrDirection,
    KrType,
    NodeType,
    PaceStatus,
    QuarterStatus,
    TaskPriority,
    TaskStatus,
)
from okr_core.models.records import CheckIn, KeyResult, Objective, Plan, QuarterTarget, Task


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


# 2026-07-02 12:00 UTC: 183 of 364 days into the plan year.
MIDYEAR_2026 = utc(2026, 7, 2, 12)


@pytest.fixture
def midyear():
    return MIDYEAR_2026


@pytest.fixture
def make_kr():
    def _make(kr_id="kr-1", **overrides) -> KeyResult:
        fields = {"id": kr_id, "name": f"KR {kr_id}", "start_value": 0.0, "target_value": 100.0}
        fields.update(overrides)
        return KeyResult(**fields)

    return _make


@pytest.fixture
def make_check_in():
    counter = iter(range(1, 10_000))

    def _make(kr_id, value, recorded_at, **overrides) -> CheckIn:
        fields = {
            "id": f"ci-{next(counter):04d}",
            "kr_id": kr_id,
            "value": value,
            "recorded_at": recorded_at,
        }
        fields.update(overrides)
        return CheckIn(**fields)

    return _make


@pytest.fixture
def make_task():
    counter = iter(range(1, 10_000))

    def _make(kr_id="kr-1", status=TaskStatus.COMPLETED, completed_at=None, **overrides) -> Task:
        task_id = f"task-{next(counter):04d}"
        fields = {
            "id": task_id,
            "title": f"Task {task_id}",
            "kr_id": kr_id,
            "status": status,
            "completed_at": completed_at,
        }
        fields.update(overrides)
        return Task(**fields)

    return _make


@pytest.fixture
def sample_plan() -> Plan:
    """2026 plan: one objective with a revenue KR (two quarter targets) and a launch milestone."""
    revenue = KeyResult(
        id="rev",
        name="Grow revenue",
        start_value=0,
        target_value=100,
        unit="k",
        quarter_targets=[
            QuarterTarget(id="rev-q1", kr_id="rev", quarter=1, target_value=25),
            QuarterTarget(id="rev-q3", kr_id="rev", quarter=3, target_value=75),
        ],
    )
    launch = KeyResult(id="launch", name="Ship v2", kr_type=KrType.MILESTONE, target_value=1)
    return Plan(
        id="p2026",
        year=2026,
        name="2026 plan",
        objectives=[Objective(id="o1", code="O1", name="Grow", key_results=[revenue, launch])],
    )


@pytest.fixture
def config() -> LayoutConfig:
    return LayoutConfig(node_spacing=40, level_spacing=120)


def _data_for(node_type: NodeType, entity_id: str, progress: float, pace: PaceStatus):
    common = {"entity_id": entity_id, "label": entity_id, "progress": progress, "pace_status": pace}
    if node_type == NodeType.PLAN:
        return PlanNodeData(year=2026, objectives_count=0, krs_count=0, **common)
    if node_type == NodeType.OBJECTIVE:
        return ObjectiveNodeData(code="O", krs_count=0, krs_completed=0, **common)
    if node_type == NodeType.KR:
        return KrNodeData(
            kr_type=KrType.METRIC,
            current_value=0,
            target_value=100,
            direction=KrDirection.INCREASE,
            quarter_targets_count=0,
            **common,
        )
    if node_type == NodeType.QUARTER:
        return QuarterNodeData(
            quarter=1, target_value=10, current_value=0, status=QuarterStatus.ACTIVE, **common
        )
    return TaskNodeData(status=TaskStatus.NOT_STARTED, priority=TaskPriority.LOW, **common)


@pytest.fixture
def make_node():
    def _make(node_id, node_type=None, progress=0.5, pace=PaceStatus.ON_TRACK) -> MindmapNode:
        # "kr-a" -> NodeType.KR, entity "a"
        prefix, _, entity_id = node_id.partition("-")
        node_type = NodeType(node_type or prefix)
        return MindmapNode(
            id=node_id,
            type=node_type,
            data=_data_for(node_type, entity_id or node_id, progress, pace),
        )

    return _make


@pytest.fixture
def small_tree(make_node):
    """plan-p -> objective-a (kr-a1, kr-a2), objective-b (kr-b1); quarter-q under kr-a1."""
    nodes = [
        make_node("plan-p"),
        make_node("objective-a"),
        make_node("objective-b"),
        make_node("kr-a1"),
        make_node("kr-a2"),
        make_node("kr-b1"),
        make_node("quarter-q"),
    ]
    edges = [
        MindmapEdge.link("plan-p", "objective-a"),
        MindmapEdge.link("plan-p", "objective-b"),
        MindmapEdge.link("objective-a", "kr-a1"),
        MindmapEdge.link("objective-a", "kr-a2"),
        MindmapEdge.link("objective-b", "kr-b1"),
        MindmapEdge.link("kr-a1", "quarter-q"),
    ]
    return nodes, edges
