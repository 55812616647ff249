"""Layout algorithms for the plan hierarchy mindmap.

Every algorithm takes the node list, the parent -> child edges and a
LayoutConfig and returns a fresh ``{node_id: Position}`` map. They are pure
and deterministic, and they degrade to an explicit fallback layout rather
than raising when the graph is not a single-rooted tree.

Positions are the top-left corner of each node box, matching what the
rendering layer expects.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Optional

from okr_core.mindmap.schema import LayoutConfig
from okr_core.mindmap.types import (
    MindmapEdge,
    MindmapNode,
    NodeDimensions,
    Position,
    get_node_dimensions,
)
from okr_core.models.enums import LayoutDirection, NodeType

logger = logging.getLogger(__name__)

Positions = dict[str, Position]

# Band order used by the grid fallback.
_GRID_TYPE_ORDER = (
    NodeType.PLAN,
    NodeType.OBJECTIVE,
    NodeType.KR,
    NodeType.QUARTER,
    NodeType.TASK,
)


@dataclass
class Hierarchy:
    """Adjacency derived from edges, restricted to known node ids."""

    children: dict[str, list[str]]
    parents: dict[str, str]
    root: Optional[str]
    # Root-first traversal order; empty when the graph is not a tree.
    order: list[str]


def build_hierarchy(nodes: Sequence[MindmapNode], edges: Sequence[MindmapEdge]) -> Hierarchy:
    """Build children/parent maps and locate the single root.

    ``root`` is None unless exactly one node has no parent and a walk from it
    reaches every node exactly once.
    """
    ids = {node.id for node in nodes}
    children: dict[str, list[str]] = {}
    parents: dict[str, str] = {}
    for edge in edges:
        if edge.source not in ids or edge.target not in ids:
            continue
        children.setdefault(edge.source, []).append(edge.target)
        parents[edge.target] = edge.source

    roots = [node.id for node in nodes if node.id not in parents]
    if len(set(roots)) != 1:
        return Hierarchy(children=children, parents=parents, root=None, order=[])

    root = roots[0]
    order: list[str] = []
    seen: set[str] = set()
    stack = [root]
    while stack:
        node_id = stack.pop()
        if node_id in seen:
            # Reached twice: multiple parents or a cycle.
            return Hierarchy(children=children, parents=parents, root=None, order=[])
        seen.add(node_id)
        order.append(node_id)
        stack.extend(reversed(children.get(node_id, [])))

    if seen != ids:
        return Hierarchy(children=children, parents=parents, root=None, order=[])
    return Hierarchy(children=children, parents=parents, root=root, order=order)


def _dimensions_by_id(nodes: Sequence[MindmapNode]) -> dict[str, NodeDimensions]:
    return {node.id: get_node_dimensions(node.type) for node in nodes}


# ---------------------------------------------------------------------------
# Grid fallback
# ---------------------------------------------------------------------------


def calculate_grid_layout(nodes: Sequence[MindmapNode], config: LayoutConfig) -> Positions:
    """Horizontal bands grouped by node type, each band centred on x = 0.

    Used whenever the edges do not describe a single-rooted tree.
    """
    bands: dict[object, list[MindmapNode]] = {}
    for node in nodes:
        try:
            key: object = NodeType(node.type)
        except ValueError:
            key = node.type
        bands.setdefault(key, []).append(node)

    ordered_keys = [t for t in _GRID_TYPE_ORDER if t in bands]
    ordered_keys += [k for k in bands if k not in _GRID_TYPE_ORDER]

    positions: Positions = {}
    current_y = 0.0
    for key in ordered_keys:
        band = bands[key]
        dims = get_node_dimensions(band[0].type)
        total_width = len(band) * dims.width + (len(band) - 1) * config.node_spacing
        current_x = -total_width / 2
        for node in band:
            positions[node.id] = Position(x=current_x, y=current_y)
            current_x += dims.width + config.node_spacing
        current_y += dims.height + config.level_spacing
    return positions


# ---------------------------------------------------------------------------
# Tree layout
# ---------------------------------------------------------------------------


def calculate_tree_layout(
    nodes: Sequence[MindmapNode],
    edges: Sequence[MindmapEdge],
    config: LayoutConfig,
) -> Positions:
    """Reingold-Tilford style layered tree.

    Each node is centred over the span reserved for its subtree; children are
    packed left to right from the start of that span. The root is centred on
    x = 0 at y = 0. With ``direction="LR"`` the axes are swapped and the tree
    grows to the right.
    """
    if not nodes:
        return {}

    hierarchy = build_hierarchy(nodes, edges)
    if hierarchy.root is None:
        logger.warning(
            "No single root among %d nodes; using grid layout", len(nodes)
        )
        return calculate_grid_layout(nodes, config)

    horizontal = config.direction == LayoutDirection.LEFT_RIGHT
    dims = _dimensions_by_id(nodes)

    def breadth(node_id: str) -> float:
        d = dims[node_id]
        return d.height if horizontal else d.width

    def depth_extent(node_id: str) -> float:
        d = dims[node_id]
        return d.width if horizontal else d.height

    # Bottom-up: children always follow their parent in the traversal order.
    subtree: dict[str, float] = {}
    for node_id in reversed(hierarchy.order):
        kids = hierarchy.children.get(node_id, [])
        if not kids:
            subtree[node_id] = breadth(node_id)
            continue
        packed = sum(subtree[k] for k in kids) + (len(kids) - 1) * config.node_spacing
        subtree[node_id] = max(breadth(node_id), packed)

    # Top-down: each node receives the start of its span and its depth offset.
    root = hierarchy.root
    span_start: dict[str, float] = {root: -subtree[root] / 2}
    depth: dict[str, float] = {root: 0.0}
    positions: Positions = {}
    for node_id in hierarchy.order:
        along = span_start[node_id] + (subtree[node_id] - breadth(node_id)) / 2
        across = depth[node_id]
        positions[node_id] = (
            Position(x=across, y=along) if horizontal else Position(x=along, y=across)
        )

        cursor = span_start[node_id]
        child_depth = across + depth_extent(node_id) + config.level_spacing
        for child in hierarchy.children.get(node_id, []):
            span_start[child] = cursor
            depth[child] = child_depth
            cursor += subtree[child] + config.node_spacing

    return positions


# ---------------------------------------------------------------------------
# Radial layout
# ---------------------------------------------------------------------------


def calculate_radial_layout(
    nodes: Sequence[MindmapNode],
    edges: Sequence[MindmapEdge],
    config: LayoutConfig,
) -> Positions:
    """Concentric rings around the root at the origin.

    Angular wedges are proportional to subtree leaf counts, so busier
    branches get more of the circle. The root's children sit on a ring of
    radius 1.5 * level_spacing; each deeper ring adds level_spacing.
    """
    if not nodes:
        return {}

    hierarchy = build_hierarchy(nodes, edges)
    if hierarchy.root is None:
        logger.warning(
            "No single root among %d nodes; using grid layout", len(nodes)
        )
        return calculate_grid_layout(nodes, config)

    sizes: dict[str, int] = {}
    for node_id in reversed(hierarchy.order):
        kids = hierarchy.children.get(node_id, [])
        sizes[node_id] = sum(sizes[k] for k in kids) if kids else 1

    root = hierarchy.root
    positions: Positions = {root: Position(x=0.0, y=0.0)}
    # node -> (wedge start, wedge end, radius for its children)
    wedges: dict[str, tuple[float, float, float]] = {
        root: (-math.pi, math.pi, config.level_spacing * 1.5)
    }

    for node_id in hierarchy.order:
        kids = hierarchy.children.get(node_id, [])
        if not kids:
            continue
        start, end, radius = wedges[node_id]
        total = sum(sizes[k] for k in kids)
        current = start
        for child in kids:
            span = (end - start) * sizes[child] / total
            angle = current + span / 2
            positions[child] = Position(x=radius * math.cos(angle), y=radius * math.sin(angle))
            wedges[child] = (current, current + span, radius + config.level_spacing)
            current += span

    return positions


# ---------------------------------------------------------------------------
# Focus layout
# ---------------------------------------------------------------------------


def calculate_focus_layout(
    nodes: Sequence[MindmapNode],
    edges: Sequence[MindmapEdge],
    focus_node_id: str,
    config: LayoutConfig,
) -> Positions:
    """Ego-centric view around one node.

    The focus node sits at the origin, its ancestor chain stacks upwards
    (direct parent nearest) and its descendants fan out below one
    generation per row. Nodes outside that branch are parked on the focus
    row to the right so nothing is dropped. An unknown focus id falls back
    to the tree layout.
    """
    if not nodes:
        return {}

    node_by_id = {node.id: node for node in nodes}
    if focus_node_id not in node_by_id:
        logger.info("Focus node %s not found; using tree layout", focus_node_id)
        return calculate_tree_layout(nodes, edges, config)

    hierarchy = build_hierarchy(nodes, edges)
    dims = _dimensions_by_id(nodes)
    focus_width = dims[focus_node_id].width

    def centred_under_focus(node_id: str) -> float:
        return (focus_width - dims[node_id].width) / 2

    positions: Positions = {focus_node_id: Position(x=0.0, y=0.0)}

    # Ancestors, nearest first; guard against cycles in the parent chain.
    ancestors: list[str] = []
    current = focus_node_id
    while current in hierarchy.parents:
        parent = hierarchy.parents[current]
        if parent == focus_node_id or parent in ancestors:
            break
        ancestors.append(parent)
        current = parent
    for distance, ancestor_id in enumerate(ancestors, start=1):
        positions[ancestor_id] = Position(
            x=centred_under_focus(ancestor_id),
            y=-distance * config.level_spacing,
        )

    # Descendants, one breadth-first generation per row.
    placed = set(positions)
    generation = [focus_node_id]
    row = 0
    while generation:
        next_generation = [
            child
            for parent in generation
            for child in hierarchy.children.get(parent, [])
            if child not in placed
        ]
        # A node listed under two parents is placed once.
        next_generation = list(dict.fromkeys(next_generation))
        if not next_generation:
            break
        row += 1
        total_width = sum(dims[c].width for c in next_generation)
        total_width += (len(next_generation) - 1) * config.node_spacing
        cursor = focus_width / 2 - total_width / 2
        for child in next_generation:
            positions[child] = Position(x=cursor, y=row * config.level_spacing)
            cursor += dims[child].width + config.node_spacing
            placed.add(child)
        generation = next_generation

    # Everything else: same row as the focus node, to its right.
    cursor = focus_width + config.node_spacing
    for node in nodes:
        if node.id in placed:
            continue
        positions[node.id] = Position(x=cursor, y=0.0)
        cursor += dims[node.id].width + config.node_spacing
        placed.add(node.id)

    return positions


# ---------------------------------------------------------------------------
# Apply
# ---------------------------------------------------------------------------


def apply_layout(nodes: Sequence[MindmapNode], positions: Positions) -> list[MindmapNode]:
    """Return nodes with positions from the map; absent ids keep their own."""
    return [
        replace(node, position=positions[node.id]) if node.id in positions else node
        for node in nodes
    ]
