"""Turn plan records into the typed node/edge graph drawn by the mindmap."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from okr_core.config.settings import get_settings
from okr_core.engine.calendar import as_utc, quarter_status
from okr_core.engine.progress import compute_kr_progress
from okr_core.engine.rollup import (
    compute_objective_progress,
    compute_plan_progress,
    group_check_ins_by_kr,
    group_tasks_by_kr,
)
from okr_core.engine.result import KrProgressEntry, ObjectiveProgress
from okr_core.mindmap.layout import apply_layout, calculate_tree_layout
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
from okr_core.models.enums import NodeType, PaceStatus, QuarterStatus, TaskStatus
from okr_core.models.records import CheckIn, Plan, Task

logger = logging.getLogger(__name__)


@dataclass
class MindmapGraph:
    nodes: list[MindmapNode] = field(default_factory=list)
    edges: list[MindmapEdge] = field(default_factory=list)


def node_id_for(node_type: NodeType, entity_id: str) -> str:
    """Graph id for an entity, e.g. ``kr-<uuid>``."""
    return f"{NodeType(node_type).value}-{entity_id}"


def transform_okr_data_to_mindmap(
    plan: Plan,
    tasks: Sequence[Task],
    check_ins: Sequence[CheckIn],
    config: LayoutConfig,
    as_of: Optional[datetime | date] = None,
    max_tasks_per_kr: Optional[int] = None,
) -> MindmapGraph:
    """Build plan -> objective -> KR -> quarter/task nodes with tree positions.

    Quarter nodes are included when ``config.show_quarters`` is set and task
    nodes when ``config.show_tasks`` is set (capped per KR).
    """
    now = as_utc(as_of) if as_of is not None else datetime.now(tz=timezone.utc)
    task_limit = get_settings().max_tasks_per_kr if max_tasks_per_kr is None else max_tasks_per_kr
    year = plan.year

    check_ins_by_kr = group_check_ins_by_kr(check_ins)
    tasks_by_kr = group_tasks_by_kr(tasks)

    graph = MindmapGraph()
    plan_node_id = node_id_for(NodeType.PLAN, plan.id)
    # Plan node is filled in after the objectives so it can carry the rollup.
    kr_subgraph: list[MindmapNode] = []
    objective_progresses: list[ObjectiveProgress] = []

    for objective in plan.objectives:
        objective_node_id = node_id_for(NodeType.OBJECTIVE, objective.id)
        entries: list[KrProgressEntry] = []
        objective_children: list[MindmapNode] = []
        objective_edges: list[MindmapEdge] = [MindmapEdge.link(plan_node_id, objective_node_id)]

        for kr in objective.key_results:
            kr_node_id = node_id_for(NodeType.KR, kr.id)
            kr_tasks = tasks_by_kr.get(kr.id, [])
            progress = compute_kr_progress(
                kr, check_ins_by_kr.get(kr.id, []), kr_tasks, year, now
            )
            entries.append(KrProgressEntry(kr_id=kr.id, result=progress))

            objective_children.append(
                MindmapNode(
                    id=kr_node_id,
                    type=NodeType.KR,
                    data=KrNodeData(
                        entity_id=kr.id,
                        label=kr.name,
                        description=kr.description,
                        progress=progress.progress,
                        pace_status=progress.pace_status,
                        kr_type=kr.kr_type,
                        current_value=progress.current_value,
                        target_value=kr.target_value,
                        unit=kr.unit,
                        direction=kr.direction,
                        quarter_targets_count=len(kr.quarter_targets),
                    ),
                )
            )
            objective_edges.append(MindmapEdge.link(objective_node_id, kr_node_id))

            if config.show_quarters:
                for qt in kr.quarter_targets:
                    qt_node_id = node_id_for(NodeType.QUARTER, qt.id)
                    status = quarter_status(qt.quarter, year, now)
                    qt_progress = (
                        min(progress.current_value / qt.target_value, 1.0)
                        if qt.target_value > 0
                        else 0.0
                    )
                    objective_children.append(
                        MindmapNode(
                            id=qt_node_id,
                            type=NodeType.QUARTER,
                            data=QuarterNodeData(
                                entity_id=qt.id,
                                label=f"Q{qt.quarter}",
                                progress=qt_progress,
                                pace_status=(
                                    progress.pace_status
                                    if status == QuarterStatus.ACTIVE
                                    else PaceStatus.ON_TRACK
                                ),
                                quarter=qt.quarter,
                                target_value=qt.target_value,
                                current_value=progress.current_value,
                                status=status,
                            ),
                        )
                    )
                    objective_edges.append(MindmapEdge.link(kr_node_id, qt_node_id))

            if config.show_tasks:
                for task in kr_tasks[:task_limit]:
                    task_node_id = node_id_for(NodeType.TASK, task.id)
                    objective_children.append(
                        MindmapNode(
                            id=task_node_id,
                            type=NodeType.TASK,
                            data=TaskNodeData(
                                entity_id=task.id,
                                label=task.title,
                                progress=1.0 if task.status == TaskStatus.COMPLETED else 0.0,
                                pace_status=PaceStatus.ON_TRACK,
                                status=task.status,
                                priority=task.priority,
                                due_date=task.due_date,
                            ),
                        )
                    )
                    objective_edges.append(MindmapEdge.link(kr_node_id, task_node_id))

        objective_progress = compute_objective_progress(objective, entries, year, now)
        objective_progresses.append(objective_progress)

        kr_subgraph.append(
            MindmapNode(
                id=objective_node_id,
                type=NodeType.OBJECTIVE,
                data=ObjectiveNodeData(
                    entity_id=objective.id,
                    label=objective.name,
                    description=objective.description,
                    code=objective.code,
                    progress=objective_progress.progress,
                    pace_status=objective_progress.pace_status,
                    krs_count=objective_progress.kr_count,
                    krs_completed=objective_progress.completed_count,
                ),
            )
        )
        kr_subgraph.extend(objective_children)
        graph.edges.extend(objective_edges)

    plan_progress = compute_plan_progress(plan, objective_progresses, now)
    graph.nodes.append(
        MindmapNode(
            id=plan_node_id,
            type=NodeType.PLAN,
            data=PlanNodeData(
                entity_id=plan.id,
                label=plan.name,
                description=plan.description,
                progress=plan_progress.progress,
                pace_status=plan_progress.pace_status,
                year=plan.year,
                objectives_count=plan_progress.objective_count,
                krs_count=plan_progress.kr_count,
            ),
        )
    )
    graph.nodes.extend(kr_subgraph)

    logger.debug(
        "Transformed plan %s into %d nodes and %d edges",
        plan.id,
        len(graph.nodes),
        len(graph.edges),
    )

    positions = calculate_tree_layout(graph.nodes, graph.edges, config)
    graph.nodes = apply_layout(graph.nodes, positions)
    return graph
