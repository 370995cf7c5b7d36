"""
Radar (starplot) view of one selected record.

project_starplot() does the geometry: it normalizes each attribute against
its load-time Domain and places one vertex per attribute on an axis spaced
360/N degrees apart, starting at the top. build_starplot_figure() turns the
geometry into a Plotly figure drawn in pixel space (y grows downwards).
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

import plotly.graph_objects as go

from data_ops.dataset import Domain, Record

_DEFAULT_WIDTH = 320
_DEFAULT_HEIGHT = 280

RADIUS_FRACTION = 0.29
CENTER_Y_OFFSET = 10
LABEL_OFFSET = 18
RING_COUNT = 3
VERTEX_RADIUS = 3
PLACEHOLDER_TEXT = "Select a point"

AXIS_COLOR = "#e0e6ea"
RING_COLOR = "#f0f4f7"
LABEL_COLOR = "#234"
LABEL_FONT_SIZE = 8
POLYGON_FILL = "rgba(255,153,51,0.55)"
POLYGON_STROKE = "rgba(200,100,20,0.9)"
VERTEX_FILL = "#f59c2a"
VERTEX_STROKE = "#824e05"

_UNIT_SUFFIX = re.compile(r"\s*\(.*\)")


def axis_label(attr: str) -> str:
    """Attribute name without its parenthetical unit, e.g. 'Engine Size (l)' -> 'Engine Size'."""
    return _UNIT_SUFFIX.sub("", attr, count=1)


def normalize(raw: float, domain: Optional[Domain]) -> float:
    """(raw - min) / (max - min); 0 for NaN input or an unusable domain."""
    if domain is None:
        return 0.0
    return domain.normalize(raw)


@dataclass(frozen=True)
class StarAxis:
    attr: str
    label: str
    raw: float
    norm: float
    angle: float
    end: tuple[float, float]
    label_pos: tuple[float, float]
    anchor: str  # "left", "right" or "center"


@dataclass(frozen=True)
class StarplotGeometry:
    width: float
    height: float
    center: tuple[float, float]
    radius: float
    axes: tuple[StarAxis, ...]
    rings: tuple[float, ...]
    vertices: tuple[tuple[float, float], ...]


def _anchor(angle: float) -> str:
    c = math.cos(angle)
    if abs(c) < 0.1:
        return "center"
    return "left" if c > 0 else "right"


def project_starplot(
    record: Record,
    attrs: Sequence[str],
    domains: Mapping[str, Domain],
    width: float = _DEFAULT_WIDTH,
    height: float = _DEFAULT_HEIGHT,
) -> StarplotGeometry:
    """Compute axes, rings and polygon vertices for *record*.

    Negative normalized values (a value below the load-time minimum)
    clamp to the center.
    """
    cx = width / 2
    cy = height / 2 + CENTER_Y_OFFSET
    radius = min(width, height) * RADIUS_FRACTION
    n = len(attrs)
    step = 2 * math.pi / n if n else 0.0

    axes: list[StarAxis] = []
    vertices: list[tuple[float, float]] = []
    for i, attr in enumerate(attrs):
        raw = record.number(attr)
        norm = normalize(raw, domains.get(attr))
        angle = -math.pi / 2 + i * step
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        r = max(0.0, norm) * radius
        vertices.append((cx + cos_a * r, cy + sin_a * r))
        axes.append(StarAxis(
            attr=attr,
            label=axis_label(attr),
            raw=raw,
            norm=norm,
            angle=angle,
            end=(cx + cos_a * radius, cy + sin_a * radius),
            label_pos=(cx + cos_a * (radius + LABEL_OFFSET),
                       cy + sin_a * (radius + LABEL_OFFSET)),
            anchor=_anchor(angle),
        ))

    rings = tuple(radius * k / RING_COUNT for k in range(1, RING_COUNT + 1))
    return StarplotGeometry(
        width=width,
        height=height,
        center=(cx, cy),
        radius=radius,
        axes=tuple(axes),
        rings=rings,
        vertices=tuple(vertices),
    )


def _empty_figure(width: float, height: float) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        width=width,
        height=height,
        autosize=False,
        showlegend=False,
        paper_bgcolor="white",
        plot_bgcolor="white",
        margin=dict(l=0, r=0, t=0, b=0, pad=0),
        xaxis=dict(range=[0, width], visible=False, fixedrange=True),
        yaxis=dict(range=[height, 0], visible=False, fixedrange=True),
        hovermode=False,
    )
    return fig


def build_placeholder_figure(
    width: float = _DEFAULT_WIDTH,
    height: float = _DEFAULT_HEIGHT,
) -> go.Figure:
    fig = _empty_figure(width, height)
    fig.add_annotation(
        x=width / 2, y=height / 2 + CENTER_Y_OFFSET,
        xref="x", yref="y",
        text=PLACEHOLDER_TEXT,
        showarrow=False,
        font=dict(color="#888"),
        xanchor="center",
    )
    return fig


def build_starplot_figure(geometry: StarplotGeometry) -> go.Figure:
    """Draw axes, labels, rings, the filled polygon and its vertex markers."""
    fig = _empty_figure(geometry.width, geometry.height)
    cx, cy = geometry.center

    shapes = []
    annotations = []
    for axis in geometry.axes:
        shapes.append(dict(
            type="line", xref="x", yref="y", layer="below",
            x0=cx, y0=cy, x1=axis.end[0], y1=axis.end[1],
            line=dict(color=AXIS_COLOR, width=1),
        ))
        annotations.append(dict(
            x=axis.label_pos[0], y=axis.label_pos[1],
            xref="x", yref="y",
            text=axis.label,
            showarrow=False,
            xanchor=axis.anchor,
            yanchor="middle",
            font=dict(color=LABEL_COLOR, size=LABEL_FONT_SIZE),
        ))
    for r in geometry.rings:
        shapes.append(dict(
            type="circle", xref="x", yref="y", layer="below",
            x0=cx - r, y0=cy - r, x1=cx + r, y1=cy + r,
            fillcolor="rgba(0,0,0,0)",
            line=dict(color=RING_COLOR, width=1),
        ))
    fig.update_layout(shapes=shapes, annotations=annotations)

    if geometry.vertices:
        xs = [v[0] for v in geometry.vertices]
        ys = [v[1] for v in geometry.vertices]
        fig.add_trace(go.Scatter(
            x=xs + xs[:1], y=ys + ys[:1],
            mode="lines",
            fill="toself",
            fillcolor=POLYGON_FILL,
            line=dict(color=POLYGON_STROKE, width=1.5),
            hoverinfo="skip",
            name="polygon",
        ))
        fig.add_trace(go.Scatter(
            x=xs, y=ys,
            mode="markers",
            marker=dict(
                size=2 * VERTEX_RADIUS,
                color=VERTEX_FILL,
                line=dict(color=VERTEX_STROKE, width=0.8),
            ),
            text=[f"{a.attr}: {a.raw:g}" if not math.isnan(a.raw) else f"{a.attr}: N/A"
                  for a in geometry.axes],
            hoverinfo="text",
            name="vertices",
        ))
    return fig


class StarplotRenderer:
    """Redraws the starplot surface from scratch for each selection.

    Domains are the read-only map computed when the dataset was loaded.
    """

    def __init__(
        self,
        attrs: Sequence[str],
        domains: Mapping[str, Domain],
        width: float = _DEFAULT_WIDTH,
        height: float = _DEFAULT_HEIGHT,
    ):
        self.attrs = tuple(attrs)
        self.domains = domains
        self.width = width
        self.height = height
        self.figure: go.Figure = build_placeholder_figure(width, height)
        self.geometry: Optional[StarplotGeometry] = None

    def render(self, record: Optional[Record]) -> go.Figure:
        if record is None:
            self.geometry = None
            self.figure = build_placeholder_figure(self.width, self.height)
            return self.figure
        self.geometry = project_starplot(
            record, self.attrs, self.domains, self.width, self.height,
        )
        self.figure = build_starplot_figure(self.geometry)
        return self.figure
