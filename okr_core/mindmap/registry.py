from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable, Optional

from okr_core.mindmap.layout import (
    Positions,
    calculate_focus_layout,
    calculate_radial_layout,
    calculate_tree_layout,
)
from okr_core.mindmap.schema import LayoutConfig
from okr_core.mindmap.types import MindmapEdge, MindmapNode
from okr_core.models.enums import ViewMode

logger = logging.getLogger(__name__)

# Global registry -- maps view mode -> LayoutDefinition
_REGISTRY: dict[ViewMode, LayoutDefinition] = {}


@dataclass(frozen=True)
class LayoutDefinition:
    """A selectable layout algorithm for the mindmap view switcher."""

    view_mode: ViewMode
    label: str
    description: str
    layout_fn: Callable[..., Positions]
    requires_focus: bool = False


def register_layout(
    view_mode: ViewMode,
    label: str,
    description: str,
    requires_focus: bool = False,
) -> Callable:
    """Decorator to register a layout function under a view mode."""

    def decorator(fn: Callable[..., Positions]) -> Callable[..., Positions]:
        _REGISTRY[view_mode] = LayoutDefinition(
            view_mode=view_mode,
            label=label,
            description=description,
            layout_fn=fn,
            requires_focus=requires_focus,
        )
        return fn

    return decorator


def get_layout(view_mode: ViewMode) -> Optional[LayoutDefinition]:
    """Look up a layout definition by view mode."""
    return _REGISTRY.get(view_mode)


def get_all_layouts() -> dict[ViewMode, LayoutDefinition]:
    """Return the full registry (read-only copy)."""
    return dict(_REGISTRY)


@register_layout(
    ViewMode.TREE,
    label="Tree",
    description="Top-down hierarchy with each parent centred over its subtree.",
)
def _tree(nodes, edges, config, focus_node_id=None) -> Positions:
    return calculate_tree_layout(nodes, edges, config)


@register_layout(
    ViewMode.RADIAL,
    label="Radial",
    description="Plan at the centre, branches sized by the number of leaves below them.",
)
def _radial(nodes, edges, config, focus_node_id=None) -> Positions:
    return calculate_radial_layout(nodes, edges, config)


@register_layout(
    ViewMode.FOCUS,
    label="Focus",
    description="One node at the centre with its ancestors above and descendants below.",
    requires_focus=True,
)
def _focus(nodes, edges, config, focus_node_id=None) -> Positions:
    return calculate_focus_layout(nodes, edges, focus_node_id, config)


def calculate_layout(
    view_mode: ViewMode,
    nodes: Sequence[MindmapNode],
    edges: Sequence[MindmapEdge],
    config: LayoutConfig,
    focus_node_id: Optional[str] = None,
) -> Positions:
    """Run the layout registered for a view mode.

    Focus mode without a focus node id runs the tree layout instead.
    """
    definition = get_layout(ViewMode(view_mode))
    if definition is None or (definition.requires_focus and not focus_node_id):
        logger.info("No usable %s layout request; using tree layout", view_mode)
        definition = _REGISTRY[ViewMode.TREE]
    return definition.layout_fn(nodes, edges, config, focus_node_id=focus_node_id)
