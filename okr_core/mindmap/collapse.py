"""Collapse/expand handling: hide everything below a collapsed node."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import replace

from okr_core.mindmap.types import MindmapEdge, MindmapNode
from okr_core.models.enums import NodeType


def _children_map(edges: Iterable[MindmapEdge]) -> dict[str, list[str]]:
    children: dict[str, list[str]] = {}
    for edge in edges:
        children.setdefault(edge.source, []).append(edge.target)
    return children


def get_descendants(node_id: str, edges: Sequence[MindmapEdge]) -> set[str]:
    """Every node reachable below ``node_id`` (the node itself excluded)."""
    children = _children_map(edges)
    descendants: set[str] = set()
    queue = deque(children.get(node_id, []))
    while queue:
        current = queue.popleft()
        if current in descendants or current == node_id:
            continue
        descendants.add(current)
        queue.extend(children.get(current, []))
    return descendants


def hidden_node_ids(edges: Sequence[MindmapEdge], collapsed: Iterable[str]) -> set[str]:
    hidden: set[str] = set()
    for node_id in collapsed:
        hidden |= get_descendants(node_id, edges)
    return hidden


def collapse_all_ids(nodes: Sequence[MindmapNode], edges: Sequence[MindmapEdge]) -> set[str]:
    """Objectives that have children; collapsing them leaves plan + objectives."""
    parents = {edge.source for edge in edges}
    return {n.id for n in nodes if n.type == NodeType.OBJECTIVE and n.id in parents}


def visible_graph(
    nodes: Sequence[MindmapNode],
    edges: Sequence[MindmapEdge],
    collapsed: Iterable[str],
) -> tuple[list[MindmapNode], list[MindmapEdge]]:
    """Remove nodes hidden by collapsed ancestors and annotate the rest.

    Visible nodes get ``is_collapsed`` and ``child_count`` (direct children in
    the full graph) set on their data.
    """
    collapsed = set(collapsed)
    hidden = hidden_node_ids(edges, collapsed)
    children = _children_map(edges)

    visible_nodes = [
        replace(
            node,
            data=replace(
                node.data,
                is_collapsed=node.id in collapsed,
                child_count=len(children.get(node.id, [])),
            ),
        )
        for node in nodes
        if node.id not in hidden
    ]
    visible_edges = [e for e in edges if e.source not in hidden and e.target not in hidden]
    return visible_nodes, visible_edges
