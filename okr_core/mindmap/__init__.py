from .collapse import collapse_all_ids, get_descendants, hidden_node_ids, visible_graph
from .filters import DEFAULT_FILTERS, MindmapFilters, filter_graph, node_passes_filters
from .layout import (
    apply_layout,
    calculate_focus_layout,
    calculate_grid_layout,
    calculate_radial_layout,
    calculate_tree_layout,
)
from .persistence import SavedPosition, apply_saved_positions, get_saved_collapsed_ids
from .registry import calculate_layout, get_all_layouts, get_layout, register_layout
from .schema import LayoutConfig
from .transformer import MindmapGraph, transform_okr_data_to_mindmap
from .types import MindmapEdge, MindmapNode, Position, get_node_dimensions

__all__ = [
    "DEFAULT_FILTERS",
    "LayoutConfig",
    "MindmapEdge",
    "MindmapFilters",
    "MindmapGraph",
    "MindmapNode",
    "Position",
    "SavedPosition",
    "apply_layout",
    "apply_saved_positions",
    "calculate_focus_layout",
    "calculate_grid_layout",
    "calculate_layout",
    "calculate_radial_layout",
    "calculate_tree_layout",
    "collapse_all_ids",
    "filter_graph",
    "get_all_layouts",
    "get_descendants",
    "get_layout",
    "get_node_dimensions",
    "get_saved_collapsed_ids",
    "hidden_node_ids",
    "node_passes_filters",
    "register_layout",
    "transform_okr_data_to_mindmap",
    "visible_graph",
]
