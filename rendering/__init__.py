"""Scales, chart/starplot renderers and the interaction registry."""

from .scales import ColorState, LinearScale, Scales, SqrtScale, build_scales
from .chart_renderer import ChartLayout, ChartRenderer, legend_html
from .interactions import (
    ChartState,
    InteractionRegistry,
    Transition,
    get_default_registry,
)
from .starplot import StarplotRenderer, project_starplot
from .detail_panel import DetailPanel, sanitize_id, slot_id

__all__ = [
    "ColorState",
    "LinearScale",
    "Scales",
    "SqrtScale",
    "build_scales",
    "ChartLayout",
    "ChartRenderer",
    "legend_html",
    "ChartState",
    "InteractionRegistry",
    "Transition",
    "get_default_registry",
    "StarplotRenderer",
    "project_starplot",
    "DetailPanel",
    "sanitize_id",
    "slot_id",
]
