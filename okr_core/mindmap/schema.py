"""Pydantic models for mindmap layout configuration validation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from okr_core.config.settings import get_settings
from okr_core.models.enums import LayoutDirection


def _default(name: str):
    return lambda: getattr(get_settings(), name)


class LayoutConfig(BaseModel):
    """Spacing and visibility options shared by all layout algorithms."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False, validate_default=True)

    node_spacing: float = Field(
        default_factory=_default("node_spacing"),
        ge=0,
        description="Horizontal gap between sibling nodes (px)",
    )
    level_spacing: float = Field(
        default_factory=_default("level_spacing"),
        gt=0,
        description="Vertical gap between hierarchy levels (px)",
    )
    direction: LayoutDirection = LayoutDirection.TOP_BOTTOM
    show_tasks: bool = Field(
        default_factory=_default("show_tasks"),
        description="Include task nodes when transforming plan data",
    )
    show_quarters: bool = Field(
        default_factory=_default("show_quarters"),
        description="Include quarter-target nodes when transforming plan data",
    )
