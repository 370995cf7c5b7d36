"""
Plotly-based scatter chart for the car dataset.

The figure is drawn in pixel space: every marker is positioned through the
x/y scales, and the axes carry the scale ticks as labels. Interaction state
(hover, selection, entrance animation) only changes marker styling, so
apply_state() restyles the existing trace instead of redrawing the figure.

Public entry points:
- ChartRenderer.draw()        : full figure for a ChartState
- ChartRenderer.apply_state() : restyle an existing figure in place
- legend_items() / legend_html() : legend for the detail panel
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field, replace

import plotly.graph_objects as go

from data_ops.dataset import Dataset, Record, format_value
from .interactions import ENTRANCE_DURATION_MS, ChartState
from .scales import Scales, build_scales

# Canvas and margins, in px
_DEFAULT_WIDTH = 800
_DEFAULT_HEIGHT = 500
_DEFAULT_MARGIN = {"top": 40, "right": 150, "bottom": 60, "left": 80}

TICK_COUNT = 6
HOVER_SCALE = 1.6

REST_STROKE = "rgba(0,0,0,0.18)"
HOVER_STROKE = "#111"
SELECTED_STROKE = "#111"
REST_STROKE_WIDTH = 1
SELECTED_STROKE_WIDTH = 2.5

GRID_COLOR = "#e6ebef"

# White background regardless of the host theme
_DEFAULT_LAYOUT = dict(
    paper_bgcolor="white",
    plot_bgcolor="white",
    font_color="#2a3f5f",
    autosize=False,
    showlegend=False,
    hovermode="closest",
)


@dataclass(frozen=True)
class ChartLayout:
    """Canvas size and margins; the plot area is what the scales map onto."""

    width: int = _DEFAULT_WIDTH
    height: int = _DEFAULT_HEIGHT
    margin: dict = field(default_factory=lambda: dict(_DEFAULT_MARGIN))

    @property
    def plot_width(self) -> int:
        return self.width - self.margin["left"] - self.margin["right"]

    @property
    def plot_height(self) -> int:
        return self.height - self.margin["top"] - self.margin["bottom"]


@dataclass
class MarkerStyle:
    """Per-marker trace arrays, in draw order."""

    order: list[int]
    x: list[float]
    y: list[float]
    color: list[str]
    size: list[float]
    line_color: list[str]
    line_width: list[float]
    text: list[str]


def tooltip_html(record: Record, name_attr: str, x_attr: str, y_attr: str) -> str:
    """Tooltip body: record name plus the two plotted values."""
    name = html.escape(format_value(record.get(name_attr)))
    x_val = html.escape(format_value(record.get(x_attr)))
    y_val = html.escape(format_value(record.get(y_attr)))
    return (
        f"<b>{name}</b><br>"
        f"{html.escape(x_attr)}: {x_val}<br>"
        f"{html.escape(y_attr)}: {y_val}"
    )


def legend_items(scales: Scales, categories) -> list[tuple[str, str]]:
    """(category, color) pairs in first-seen order."""
    return [(c, scales.color(c)) for c in categories]


def legend_html(items: list[tuple[str, str]]) -> str:
    """Render the legend as HTML swatches for the detail panel."""
    rows = []
    for label, color in items:
        rows.append(
            '<div class="legend-item-html" style="display:flex; align-items:center; '
            'gap:8px; margin:4px 0;">'
            f'<span style="width:12px; height:12px; display:inline-block; '
            f'border-radius:6px; background:{color};"></span>'
            f'<span style="color:#234; font-size:12px;">{html.escape(label)}</span>'
            "</div>"
        )
    return (
        '<div class="legend-html" style="margin:6px 0 12px 0;">'
        + "".join(rows)
        + "</div>"
    )


class ChartRenderer:
    """Builds and restyles the scatter figure for one loaded dataset."""

    def __init__(
        self,
        dataset: Dataset,
        x_attr: str,
        y_attr: str,
        color_attr: str,
        size_attr: str,
        name_attr: str = "Name",
        title: str = "",
        layout: ChartLayout | None = None,
        scales: Scales | None = None,
    ):
        self.dataset = dataset
        self.x_attr = x_attr
        self.y_attr = y_attr
        self.color_attr = color_attr
        self.size_attr = size_attr
        self.name_attr = name_attr
        self.title = title
        self.layout = layout or ChartLayout()
        self.scales = scales or build_scales(
            dataset.domains,
            dataset.categories,
            x_attr, y_attr, size_attr,
            self.layout.plot_width, self.layout.plot_height,
        )

        # Positions, colors and resting radii never change after load
        records = dataset.records
        self._px = [self.scales.x(r.number(x_attr)) for r in records]
        self._py = [self.scales.y(r.number(y_attr)) for r in records]
        self._radius = [self.scales.size(r.number(size_attr)) for r in records]
        self._fill = [self.scales.color(r.text(color_attr)) for r in records]
        self._tooltip = [tooltip_html(r, name_attr, x_attr, y_attr) for r in records]

    # ------------------------------------------------------------------
    # Per-marker geometry
    # ------------------------------------------------------------------

    def position(self, index: int) -> tuple[float, float]:
        return (self._px[index], self._py[index])

    def resting_radius(self, index: int) -> float:
        return self._radius[index]

    def radius(self, index: int, state: ChartState) -> float:
        """Current radius of marker *index* under *state*."""
        if not state.entered:
            return 0.0
        r = self._radius[index]
        if index == state.hovered:
            r *= HOVER_SCALE
        return r

    def marker_style(self, state: ChartState) -> MarkerStyle:
        """Trace arrays for *state*, ordered so raised markers paint last."""
        order = list(state.draw_order) or list(range(len(self.dataset)))
        line_color: list[str] = []
        line_width: list[float] = []
        for i in order:
            if i == state.selection:
                line_color.append(SELECTED_STROKE)
                line_width.append(SELECTED_STROKE_WIDTH)
            elif i == state.hovered:
                line_color.append(HOVER_STROKE)
                line_width.append(REST_STROKE_WIDTH)
            else:
                line_color.append(REST_STROKE)
                line_width.append(REST_STROKE_WIDTH)
        return MarkerStyle(
            order=order,
            x=[self._px[i] for i in order],
            y=[self._py[i] for i in order],
            color=[self._fill[i] for i in order],
            # Plotly sizes are diameters
            size=[2 * self.radius(i, state) for i in order],
            line_color=line_color,
            line_width=line_width,
            text=[self._tooltip[i] for i in order],
        )

    # ------------------------------------------------------------------
    # Figure
    # ------------------------------------------------------------------

    def _trace(self, style: MarkerStyle) -> go.Scatter:
        return go.Scatter(
            x=style.x,
            y=style.y,
            mode="markers",
            name="records",
            customdata=style.order,
            text=style.text,
            hovertemplate="%{text}<extra></extra>",
            cliponaxis=False,
            marker=dict(
                color=style.color,
                size=style.size,
                sizemode="diameter",
                opacity=1,
                line=dict(color=style.line_color, width=style.line_width),
            ),
        )

    def _axes(self) -> tuple[dict, dict]:
        pw = self.layout.plot_width
        ph = self.layout.plot_height
        x_ticks = self.scales.x.ticks(TICK_COUNT)
        y_ticks = self.scales.y.ticks(TICK_COUNT)
        x_fmt = self.scales.x.tick_format(TICK_COUNT)
        y_fmt = self.scales.y.tick_format(TICK_COUNT)
        common = dict(
            tickmode="array",
            ticks="outside",
            showline=True,
            linecolor="#000",
            zeroline=False,
            fixedrange=True,
            automargin=False,
        )
        xaxis = dict(
            common,
            range=[0, pw],
            tickvals=[self.scales.x(t) for t in x_ticks],
            ticktext=[x_fmt(t) for t in x_ticks],
            showgrid=True,
            gridcolor=GRID_COLOR,
            title=dict(text=self.x_attr),
        )
        # Pixel y grows downwards, as in the scale range [height, 0]
        yaxis = dict(
            common,
            range=[ph, 0],
            tickvals=[self.scales.y(t) for t in y_ticks],
            ticktext=[y_fmt(t) for t in y_ticks],
            showgrid=False,
            title=dict(text=self.y_attr),
        )
        return xaxis, yaxis

    def draw(self, state: ChartState | None = None) -> go.Figure:
        """Build the full chart figure.

        Before the entrance has played (``state.entered`` is False) markers
        start at radius 0 and a ``rest`` frame holds the resting sizes.
        """
        if state is None:
            state = ChartState.initial(len(self.dataset))
        style = self.marker_style(state)
        xaxis, yaxis = self._axes()
        m = self.layout.margin

        fig = go.Figure(data=[self._trace(style)])
        fig.update_layout(
            **_DEFAULT_LAYOUT,
            width=self.layout.width,
            height=self.layout.height,
            margin=dict(l=m["left"], r=m["right"], t=m["top"], b=m["bottom"], pad=0),
            xaxis=xaxis,
            yaxis=yaxis,
            title=dict(
                text=self.title,
                x=0.5,
                xanchor="center",
                xref="paper",
                y=1,
                yanchor="bottom",
                yref="paper",
                pad=dict(b=10),
                font=dict(size=16),
            ),
        )
        if not state.entered:
            rest = self.marker_style(replace(state, entered=True))
            fig.frames = [go.Frame(name="rest", data=[self._trace(rest)])]
            fig.update_layout(transition=dict(duration=ENTRANCE_DURATION_MS, easing="cubic-in-out"))
        return fig

    def apply_state(self, fig: go.Figure, state: ChartState, duration_ms: int = 0) -> go.Figure:
        """Restyle the marker trace of *fig* for *state* (in place)."""
        style = self.marker_style(state)
        fig.data[0].update(
            x=style.x,
            y=style.y,
            customdata=style.order,
            text=style.text,
            marker=dict(
                color=style.color,
                size=style.size,
                line=dict(color=style.line_color, width=style.line_width),
            ),
        )
        fig.update_layout(transition=dict(duration=duration_ms, easing="cubic-in-out"))
        if state.entered:
            fig.frames = []
        return fig

    def legend(self) -> list[tuple[str, str]]:
        return legend_items(self.scales, self.dataset.categories)

    def legend_html(self) -> str:
        return legend_html(self.legend())
