"""Progress and pace filters for the mindmap display."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from okr_core.mindmap.types import MindmapEdge, MindmapNode
from okr_core.models.enums import NodeType, PaceStatus


@dataclass(frozen=True)
class MindmapFilters:
    pace_statuses: frozenset[PaceStatus] = field(default_factory=lambda: frozenset(PaceStatus))
    # Percent bounds, inclusive.
    min_progress: float = 0.0
    max_progress: float = 100.0
    show_completed: bool = True

    @property
    def is_active(self) -> bool:
        return self != DEFAULT_FILTERS


DEFAULT_FILTERS = MindmapFilters()


def node_passes_filters(progress: float, pace_status: PaceStatus, filters: MindmapFilters) -> bool:
    if PaceStatus(pace_status) not in filters.pace_statuses:
        return False

    percent = progress * 100
    if percent < filters.min_progress or percent > filters.max_progress:
        return False

    if not filters.show_completed and progress >= 1:
        return False

    return True


def filter_graph(
    nodes: Sequence[MindmapNode],
    edges: Sequence[MindmapEdge],
    filters: MindmapFilters,
) -> tuple[list[MindmapNode], list[MindmapEdge]]:
    """Drop nodes failing the filters and any edge touching a dropped node.

    The plan node is always kept so the map keeps its anchor.
    """
    kept = [
        node
        for node in nodes
        if node.type == NodeType.PLAN
        or node_passes_filters(node.data.progress, node.data.pace_status, filters)
    ]
    kept_ids = {node.id for node in kept}
    kept_edges = [e for e in edges if e.source in kept_ids and e.target in kept_ids]
    return kept, kept_edges
