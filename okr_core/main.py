"""FastAPI application for OKR Core: progress and mindmap endpoints."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from okr_core.config.settings import get_settings
from okr_core.engine.progress import compute_kr_progress
from okr_core.engine.rollup import compute_plan_rollup
from okr_core.mindmap.collapse import visible_graph
from okr_core.mindmap.filters import MindmapFilters, filter_graph
from okr_core.mindmap.layout import apply_layout
from okr_core.mindmap.persistence import (
    SavedPosition,
    apply_saved_positions,
    get_saved_collapsed_ids,
)
from okr_core.mindmap.registry import calculate_layout, get_all_layouts
from okr_core.mindmap.schema import LayoutConfig
from okr_core.mindmap.transformer import transform_okr_data_to_mindmap
from okr_core.models.enums import PaceStatus, ViewMode
from okr_core.models.records import CheckIn, KeyResult, Plan, Task

settings = get_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="OKR Core API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class KrProgressRequest(BaseModel):
    key_result: KeyResult
    year: int = Field(ge=1, le=9999)
    check_ins: list[CheckIn] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)
    as_of: Optional[datetime] = None


class PlanProgressRequest(BaseModel):
    plan: Plan
    check_ins: list[CheckIn] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)
    as_of: Optional[datetime] = None


class FilterRequest(BaseModel):
    pace_statuses: list[PaceStatus] = Field(default_factory=lambda: list(PaceStatus))
    min_progress: float = Field(default=0.0, ge=0, le=100)
    max_progress: float = Field(default=100.0, ge=0, le=100)
    show_completed: bool = True

    def to_filters(self) -> MindmapFilters:
        return MindmapFilters(
            pace_statuses=frozenset(self.pace_statuses),
            min_progress=self.min_progress,
            max_progress=self.max_progress,
            show_completed=self.show_completed,
        )


class MindmapRequest(BaseModel):
    plan: Plan
    check_ins: list[CheckIn] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)
    as_of: Optional[datetime] = None
    config: LayoutConfig = Field(default_factory=LayoutConfig)
    view_mode: ViewMode = ViewMode.TREE
    focus_node_id: Optional[str] = None
    saved_positions: dict[str, SavedPosition] = Field(default_factory=dict)
    collapsed_node_ids: list[str] = Field(default_factory=list)
    filters: Optional[FilterRequest] = None


@app.post("/api/progress/kr")
async def kr_progress(body: KrProgressRequest):
    """Progress, pace and forecast for a single key result."""
    result = compute_kr_progress(
        body.key_result, body.check_ins, body.tasks, body.year, body.as_of
    )
    return asdict(result)


@app.post("/api/progress/plan")
async def plan_progress(body: PlanProgressRequest):
    """Plan rollup with nested objective and KR progress."""
    result = compute_plan_rollup(body.plan, body.check_ins, body.tasks, body.as_of)
    return asdict(result)


@app.post("/api/mindmap")
async def mindmap(body: MindmapRequest):
    """Positioned nodes and edges for a plan in the requested view mode."""
    graph = transform_okr_data_to_mindmap(
        body.plan, body.tasks, body.check_ins, body.config, body.as_of
    )
    nodes, edges = graph.nodes, graph.edges

    if body.view_mode != ViewMode.TREE:
        positions = calculate_layout(
            body.view_mode, nodes, edges, body.config, focus_node_id=body.focus_node_id
        )
        nodes = apply_layout(nodes, positions)
    elif body.saved_positions:
        # Saved positions only apply to the default tree view.
        nodes = apply_saved_positions(nodes, body.saved_positions)

    collapsed = set(body.collapsed_node_ids) | get_saved_collapsed_ids(body.saved_positions)
    nodes, edges = visible_graph(nodes, edges, collapsed)

    if body.filters is not None:
        nodes, edges = filter_graph(nodes, edges, body.filters.to_filters())

    logger.info(
        "Mindmap for plan %s (%s): %d nodes, %d edges",
        body.plan.id,
        body.view_mode.value,
        len(nodes),
        len(edges),
    )
    return {
        "view_mode": body.view_mode,
        "nodes": [asdict(n) for n in nodes],
        "edges": [asdict(e) for e in edges],
    }


@app.get("/api/layouts")
async def list_layouts():
    """Available mindmap view modes."""
    return [
        {
            "view_mode": d.view_mode,
            "label": d.label,
            "description": d.description,
            "requires_focus": d.requires_focus,
        }
        for d in get_all_layouts().values()
    ]


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    import uvicorn

    uvicorn.run("okr_core.main:app", host="0.0.0.0", port=8000)
