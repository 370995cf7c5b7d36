"""
Car explorer: ties the loader, scales and renderers together.

CarExplorer owns everything that lives for one loaded dataset: the Dataset
(with its immutable domain map), the chart and starplot renderers, the
detail panel, and the current ChartState (which holds the single
Selection). UI layers feed it named interaction events through dispatch()
and read back figures; they never touch the state directly.
"""

from __future__ import annotations

from concurrent.futures import Executor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import plotly.graph_objects as go

import config
from data_ops.dataset import Dataset, Record
from data_ops.loader import LoadError, load_dataset, load_dataset_async
from rendering.chart_renderer import ChartLayout, ChartRenderer
from rendering.detail_panel import DetailPanel
from rendering.interactions import (
    RENDER_CHART,
    RENDER_DETAILS,
    ChartState,
    InteractionRegistry,
    Transition,
    get_default_registry,
)
from rendering.starplot import StarplotRenderer

from .logging import get_logger, log_error, tagged

logger = get_logger()


@dataclass
class ExplorerConfig:
    """Attribute names and chart settings for one explorer instance."""

    csv_file: str = "cars.csv"
    x_attr: str = "Retail Price"
    y_attr: str = "Horsepower(HP)"
    color_attr: str = "Type"
    size_attr: str = "City Miles Per Gallon"
    name_attr: str = "Name"
    engine_size_attr: str = "Engine Size (l)"
    detail_attrs: list[str] = field(default_factory=lambda: list(config.DETAIL_ATTRS))
    star_attrs: list[str] = field(default_factory=lambda: list(config.STAR_ATTRS))
    title: str = "Car models: Horsepower vs. Price"
    layout: ChartLayout = field(default_factory=ChartLayout)
    starplot_width: int = 320
    starplot_height: int = 280

    @classmethod
    def from_config(cls, **overrides) -> ExplorerConfig:
        """Build from the values in config.py (config.json / env), then *overrides*."""
        values = dict(
            csv_file=config.CSV_FILE,
            x_attr=config.X_ATTR,
            y_attr=config.Y_ATTR,
            color_attr=config.COLOR_ATTR,
            size_attr=config.SIZE_ATTR,
            name_attr=config.NAME_ATTR,
            engine_size_attr=config.ENGINE_SIZE_ATTR,
            detail_attrs=list(config.DETAIL_ATTRS),
            star_attrs=list(config.STAR_ATTRS),
            title=config.CHART_TITLE,
            starplot_width=config.get("starplot.width", 320),
            starplot_height=config.get("starplot.height", 280),
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def numeric_attrs(self) -> tuple[str, ...]:
        """Columns coerced to float at load time (duplicates removed, order kept)."""
        attrs = [self.x_attr, self.y_attr, self.size_attr, self.engine_size_attr]
        attrs.extend(self.star_attrs)
        return tuple(dict.fromkeys(attrs))


class CarExplorer:
    """Interactive scatter explorer for one car dataset."""

    def __init__(
        self,
        explorer_config: ExplorerConfig | None = None,
        slots: Mapping[str, Any] | None = None,
        registry: InteractionRegistry | None = None,
    ):
        self.config = explorer_config or ExplorerConfig()
        self.slots: Mapping[str, Any] = slots if slots is not None else {}
        self.registry = registry or get_default_registry()

        self.dataset: Optional[Dataset] = None
        self.chart: Optional[ChartRenderer] = None
        self.state: ChartState = ChartState()
        self.load_error: Optional[LoadError] = None
        self._figure: Optional[go.Figure] = None

        self.starplot = StarplotRenderer(
            self.config.star_attrs, {},
            width=self.config.starplot_width,
            height=self.config.starplot_height,
        )
        self.details = DetailPanel(self.config.detail_attrs, self.slots, self.starplot)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, source: str | Path | None = None) -> bool:
        """Load the CSV and build scales, chart and legend in one pass.

        Returns False (and reports the failure once) if the file cannot be
        read; the chart stays empty in that case.
        """
        source = source or self.config.csv_file
        try:
            dataset = load_dataset(source, self.config.numeric_attrs, self.config.color_attr)
        except LoadError as e:
            self._fail(source, e)
            return False
        self._install(dataset)
        return True

    async def load_async(
        self,
        source: str | Path | None = None,
        executor: Executor | None = None,
    ) -> bool:
        """Same as load(), but reads the file in an executor."""
        source = source or self.config.csv_file
        try:
            dataset = await load_dataset_async(
                source, self.config.numeric_attrs, self.config.color_attr, executor,
            )
        except LoadError as e:
            self._fail(source, e)
            return False
        self._install(dataset)
        return True

    def _fail(self, source, exc: LoadError) -> None:
        self.reset()
        self.load_error = exc
        log_error(
            f"Error loading CSV: {exc}",
            exc=exc,
            context={"source": str(source), "cwd": str(Path.cwd())},
        )

    def _install(self, dataset: Dataset) -> None:
        self.load_error = None
        self.dataset = dataset
        self.chart = ChartRenderer(
            dataset,
            x_attr=self.config.x_attr,
            y_attr=self.config.y_attr,
            color_attr=self.config.color_attr,
            size_attr=self.config.size_attr,
            name_attr=self.config.name_attr,
            title=self.config.title,
            layout=self.config.layout,
        )
        self.state = ChartState.initial(len(dataset))
        self.starplot = StarplotRenderer(
            self.config.star_attrs, dataset.domains,
            width=self.config.starplot_width,
            height=self.config.starplot_height,
        )
        self.details = DetailPanel(self.config.detail_attrs, self.slots, self.starplot)
        self.details.update(None)
        self._figure = self.chart.draw(self.state)

        summary = dataset.summary()
        logger.info(f"csv columns: {summary['columns']}", extra=tagged("load"))
        logger.info(f"first row: {summary['sample']}", extra=tagged("load"))
        logger.debug(
            f"[Explorer] {summary['num_records']} records, "
            f"categories={summary['categories']}"
        )

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    def dispatch(self, event: str, index: Optional[int] = None) -> Transition:
        """Apply a named interaction and run the render calls it asks for."""
        if self.dataset is None:
            return Transition(self.state)
        if index is not None and not 0 <= index < len(self.dataset):
            logger.debug(f"[Explorer] Ignoring {event} for out-of-range index {index}")
            return Transition(self.state)

        transition = self.registry.dispatch(event, self.state, index)
        self.state = transition.state
        for call in transition.renders:
            self._render_handlers[call](self, transition)
        return transition

    def _render_chart(self, transition: Transition) -> None:
        if self.chart is None or self._figure is None:
            return
        self.chart.apply_state(self._figure, transition.state, transition.duration_ms)

    def _render_details(self, transition: Transition) -> None:
        record = self.selection
        if record is not None:
            logger.debug(f"Clicked data: {record.values}", extra=tagged("selection"))
        else:
            logger.debug("Selection cleared", extra=tagged("selection"))
        self.details.update(record)

    _render_handlers = {
        RENDER_CHART: _render_chart,
        RENDER_DETAILS: _render_details,
    }

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def selection(self) -> Optional[Record]:
        if self.dataset is None or self.state.selection is None:
            return None
        return self.dataset.records[self.state.selection]

    def get_figure(self) -> Optional[go.Figure]:
        """Return the current chart figure (or None if nothing is loaded)."""
        return self._figure

    def get_starplot_figure(self) -> go.Figure:
        return self.starplot.figure

    def legend_html(self) -> str:
        return self.chart.legend_html() if self.chart is not None else ""

    def find_record(self, name: str) -> Optional[Record]:
        """First record whose name attribute equals *name*."""
        if self.dataset is None:
            return None
        for record in self.dataset.records:
            if record.text(self.config.name_attr) == name:
                return record
        return None

    # ------------------------------------------------------------------
    # Export / state
    # ------------------------------------------------------------------

    def export(self, filepath: str, which: str = "chart") -> dict:
        """Write the chart (or starplot) figure to a standalone HTML file.

        Returns:
            Result dict with status, filepath, and size_bytes.
        """
        if not filepath.endswith(".html"):
            filepath += ".html"
        path = Path(filepath).resolve()
        path.parent.mkdir(parents=True, exist_ok=True)

        if which == "starplot":
            fig = self.starplot.figure
        else:
            fig = self._figure
        if fig is None:
            return {"status": "error",
                    "message": "No chart to export. Load a dataset first."}

        try:
            fig.write_html(
                str(path),
                include_plotlyjs="cdn",
                auto_play=bool(fig.frames),
                animation_opts=dict(
                    frame=dict(duration=500, redraw=False),
                    transition=dict(duration=700, easing="cubic-in-out"),
                ),
            )
        except OSError as e:
            return {"status": "error", "message": f"HTML export failed: {e}"}

        logger.info(f"Exported {which} to {path}", extra=tagged("export"))
        return {
            "status": "success",
            "filepath": str(path),
            "size_bytes": path.stat().st_size,
        }

    def reset(self) -> dict:
        self.dataset = None
        self.chart = None
        self._figure = None
        self.state = ChartState()
        self.starplot = StarplotRenderer(
            self.config.star_attrs, {},
            width=self.config.starplot_width,
            height=self.config.starplot_height,
        )
        self.details = DetailPanel(self.config.detail_attrs, self.slots, self.starplot)
        return {"status": "success", "message": "Explorer reset."}

    def get_current_state(self) -> dict:
        selection = self.selection
        return {
            "has_plot": self._figure is not None,
            "num_records": len(self.dataset) if self.dataset is not None else 0,
            "categories": list(self.dataset.categories) if self.dataset is not None else [],
            "selection": selection.text(self.config.name_attr) if selection is not None else None,
            "hovered": self.state.hovered,
            "load_error": str(self.load_error) if self.load_error else None,
        }
