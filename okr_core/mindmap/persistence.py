"""Merge user-saved node positions back into a freshly laid out graph.

Saved entries are keyed by ``"<node type>-<entity id>"`` so they survive
re-transformation of the same plan.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace

from pydantic import BaseModel, ConfigDict

from okr_core.mindmap.types import MindmapNode, Position

logger = logging.getLogger(__name__)


class SavedPosition(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    x: float
    y: float
    is_collapsed: bool = False


def saved_position_key(node: MindmapNode) -> str:
    return f"{node.data.type.value}-{node.data.entity_id}"


def apply_saved_positions(
    nodes: Sequence[MindmapNode],
    saved: Mapping[str, SavedPosition],
) -> list[MindmapNode]:
    """Override position and collapsed flag for nodes with a saved entry."""
    if not saved:
        return list(nodes)

    merged: list[MindmapNode] = []
    applied = 0
    for node in nodes:
        entry = saved.get(saved_position_key(node))
        if entry is None:
            merged.append(node)
            continue
        applied += 1
        merged.append(
            replace(
                node,
                position=Position(x=entry.x, y=entry.y),
                data=replace(node.data, is_collapsed=entry.is_collapsed),
            )
        )
    logger.debug("Applied %d of %d saved positions", applied, len(saved))
    return merged


def get_saved_collapsed_ids(saved: Mapping[str, SavedPosition]) -> set[str]:
    return {key for key, entry in saved.items() if entry.is_collapsed}
