#!/usr/bin/env python3
"""
Panel Web UI for the Car Explorer.

Single page:
  /  : scatter chart (left) + details column (legend, detail fields, starplot)

Plotly click/hover events from the chart pane are translated into named
interactions and dispatched to the CarExplorer; the panes are then synced
from the explorer's figures.

Usage:
    python panel_app.py                    # Launch on localhost:5006
    python panel_app.py --port 8080        # Custom port
    python panel_app.py --csv data/cars.csv
    python panel_app.py --verbose          # Debug output on the console
"""

import argparse
import logging
from concurrent.futures import ThreadPoolExecutor

import panel as pn
import param

from explorer.core import CarExplorer, ExplorerConfig
from explorer.logging import setup_logging
from rendering.detail_panel import slot_id
from rendering.interactions import RENDER_CHART, RENDER_DETAILS, point_index

logger = logging.getLogger("car-explorer")

# ---------------------------------------------------------------------------
# Globals (initialized in main())
# ---------------------------------------------------------------------------
_config: ExplorerConfig | None = None
_executor = ThreadPoolExecutor(max_workers=1)

# Delay before growing the markers to resting size, in ms
_ENTRANCE_DELAY_MS = 50

CUSTOM_CSS = """
.details-content { font-size: 13px; color: #234; }
.detail-row { display: flex; gap: 6px; margin: 2px 0; }
.detail-label { font-weight: 600; min-width: 150px; }
"""


class ExplorerPage(param.Parameterized):
    """Chart + details page backed by one CarExplorer."""

    def __init__(self, explorer_config: ExplorerConfig | None = None, **params):
        super().__init__(**params)
        self.explorer_config = explorer_config or ExplorerConfig.from_config()

        # --- Chart ---
        self.chart_pane = pn.pane.Plotly(
            None,
            sizing_mode="stretch_width",
            min_height=500,
            config={"responsive": True, "displayModeBar": False},
        )

        # --- Details: legend + one slot per attribute + starplot ---
        self.legend_pane = pn.pane.HTML("", sizing_mode="stretch_width")
        self.slots: dict[str, pn.pane.Str] = {}
        self.detail_rows = []
        for attr in self.explorer_config.detail_attrs:
            sid = slot_id(attr)
            pane = pn.pane.Str("N/A", name=sid, margin=0)
            self.slots[sid] = pane
            self.detail_rows.append(pn.Row(
                pn.pane.HTML(f'<span class="detail-label">{attr}</span>', margin=0),
                pane,
                css_classes=["detail-row"],
            ))

        self.explorer = CarExplorer(self.explorer_config, slots=self.slots)

        self.starplot_pane = pn.pane.Plotly(
            self.explorer.get_starplot_figure(),
            width=self.explorer_config.starplot_width,
            height=self.explorer_config.starplot_height,
            config={"displayModeBar": False, "staticPlot": False},
        )
        self.clear_btn = pn.widgets.Button(name="Clear selection", button_type="default", width=140)

        # --- Wire up events ---
        self.chart_pane.param.watch(self._on_click, "click_data")
        self.chart_pane.param.watch(self._on_hover, "hover_data")
        self.clear_btn.on_click(self._on_clear)

    # ----- Loading -----

    async def load(self):
        """Read the CSV off the event loop, then draw everything in one pass."""
        ok = await self.explorer.load_async(executor=_executor)
        if not ok:
            # Leave the chart empty; the failure has been logged
            self.chart_pane.object = None
            self.legend_pane.object = ""
            return
        self.legend_pane.object = self.explorer.legend_html()
        self.chart_pane.object = self.explorer.get_figure()
        self.starplot_pane.object = self.explorer.get_starplot_figure()
        pn.state.add_periodic_callback(
            self._on_entrance, period=_ENTRANCE_DELAY_MS, count=1,
        )

    # ----- Event handlers -----

    def _apply(self, event_name: str, index=None):
        transition = self.explorer.dispatch(event_name, index)
        if RENDER_CHART in transition.renders:
            self.chart_pane.param.trigger("object")
        if RENDER_DETAILS in transition.renders:
            self.starplot_pane.object = self.explorer.get_starplot_figure()
        return transition

    def _on_entrance(self):
        self._apply("entrance_done")

    def _on_click(self, event):
        index = point_index(event.new)
        if index is not None:
            self._apply("click", index)

    def _on_hover(self, event):
        index = point_index(event.new)
        if index is None:
            self._apply("hover_exit")
        else:
            self._apply("hover_enter", index)

    def _on_clear(self, event):
        self._apply("clear_selection")

    # ----- Layout -----

    def build(self) -> pn.template.FastListTemplate:
        """Construct and return the page layout."""
        details_col = pn.Column(
            pn.pane.Markdown("### Legend", margin=(0, 0, 5, 0)),
            self.legend_pane,
            pn.layout.Divider(),
            pn.pane.Markdown("### Details", margin=(0, 0, 5, 0)),
            *self.detail_rows,
            self.clear_btn,
            pn.layout.Divider(),
            self.starplot_pane,
            css_classes=["details-content"],
            width=380,
        )

        main_row = pn.Row(
            self.chart_pane,
            details_col,
            sizing_mode="stretch_width",
        )

        template = pn.template.FastListTemplate(
            title="Car Explorer",
            main=[main_row],
            accent_base_color="#00b8d9",
            header_background="#0097b2",
            theme="default",
            theme_toggle=False,
            raw_css=[CUSTOM_CSS],
        )

        pn.state.onload(self.load)
        return template


def _create_page():
    return ExplorerPage(_config).build()


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main():
    global _config

    parser = argparse.ArgumentParser(description="Car Explorer (Panel web UI)")
    parser.add_argument("--port", type=int, default=5006, help="Port to listen on")
    parser.add_argument("--csv", default=None, help="CSV file to load")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show debug output on the console")
    parser.add_argument("--no-show", action="store_true",
                        help="Do not open a browser tab")

    args = parser.parse_args()

    setup_logging(verbose=args.verbose)
    _config = ExplorerConfig.from_config(csv_file=args.csv)
    logger.info(f"Serving {_config.csv_file} on port {args.port}")

    pn.extension("plotly", sizing_mode="stretch_width")

    pn.serve(
        {"/": _create_page},
        port=args.port,
        show=not args.no_show,
        title="Car Explorer",
    )


if __name__ == "__main__":
    main()
