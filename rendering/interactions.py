"""
Interaction dispatch: registry of named chart events and their transitions.

Each interaction maps (state, record index) to a new immutable ChartState
and names the render calls the host must run afterwards. Keeping this out
of the UI binding means hover/click behaviour can be exercised without a
browser.

Usage:
    registry = InteractionRegistry()
    registry.register_builtins()
    transition = registry.dispatch("click", state, index=3)
    for call in transition.renders:
        ...
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Optional

# Render call names understood by the explorer
RENDER_CHART = "chart"
RENDER_DETAILS = "details"

HOVER_DURATION_MS = 120
ENTRANCE_DURATION_MS = 700


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChartState:
    """Snapshot of everything interactive about the scatter chart.

    Attributes:
        selection: Index of the selected record, or None.
        hovered: Index of the record under the pointer, or None.
        draw_order: Record indices in paint order (last is on top).
        entered: False until the entrance animation has been played.
    """

    selection: Optional[int] = None
    hovered: Optional[int] = None
    draw_order: tuple[int, ...] = ()
    entered: bool = False

    @classmethod
    def initial(cls, n_records: int) -> ChartState:
        return cls(draw_order=tuple(range(n_records)))


@dataclass(frozen=True)
class Transition:
    """Result of dispatching one interaction."""

    state: ChartState
    renders: tuple[str, ...] = ()
    duration_ms: int = 0

    @property
    def changed_selection(self) -> bool:
        return RENDER_DETAILS in self.renders


def point_index(event_data: dict | None) -> Optional[int]:
    """Record index from a Plotly click/hover payload, or None.

    The chart trace stores each marker's record index as its customdata,
    so the index survives reordering of the draw order.
    """
    if not event_data:
        return None
    points = event_data.get("points") or []
    if not points:
        return None
    custom = points[0].get("customdata")
    if isinstance(custom, (list, tuple)):
        custom = custom[0] if custom else None
    if custom is None:
        return None
    try:
        return int(custom)
    except (TypeError, ValueError):
        return None


def _raise_to_front(order: tuple[int, ...], index: int) -> tuple[int, ...]:
    return tuple(i for i in order if i != index) + (index,)


# ---------------------------------------------------------------------------
# Built-in handlers
# ---------------------------------------------------------------------------

def _hover_enter(state: ChartState, index: Optional[int]) -> ChartState:
    if index is None:
        return state
    return replace(
        state,
        hovered=index,
        draw_order=_raise_to_front(state.draw_order, index),
    )


def _hover_exit(state: ChartState, index: Optional[int]) -> ChartState:
    return replace(state, hovered=None)


def _click(state: ChartState, index: Optional[int]) -> ChartState:
    if index is None:
        return state
    return replace(state, selection=index)


def _clear_selection(state: ChartState, index: Optional[int]) -> ChartState:
    return replace(state, selection=None)


def _entrance_done(state: ChartState, index: Optional[int]) -> ChartState:
    return replace(state, entered=True)


# ---------------------------------------------------------------------------
# Interaction definition
# ---------------------------------------------------------------------------

class InteractionDef:
    """A registered interaction.

    Attributes:
        name:  Unique event name (e.g. 'click').
        description:  Human-readable description.
        handler:  (state, index) -> new state.
        renders:  Render calls to run when the state changes.
        duration_ms:  Transition duration for the resulting restyle.
        needs_index:  If True, the event is ignored without a record index.
    """

    def __init__(
        self,
        name: str,
        handler: Callable[[ChartState, Optional[int]], ChartState],
        description: str = "",
        renders: tuple[str, ...] = (RENDER_CHART,),
        duration_ms: int = 0,
        needs_index: bool = False,
    ):
        self.name = name
        self.handler = handler
        self.description = description
        self.renders = tuple(renders)
        self.duration_ms = duration_ms
        self.needs_index = needs_index

    @classmethod
    def from_dict(cls, d: dict) -> InteractionDef:
        return cls(
            name=d["name"],
            handler=d["handler"],
            description=d.get("description", ""),
            renders=tuple(d.get("renders", (RENDER_CHART,))),
            duration_ms=d.get("duration_ms", 0),
            needs_index=d.get("needs_index", False),
        )


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class InteractionRegistry:
    """Registry of named interaction definitions."""

    def __init__(self):
        self._interactions: dict[str, InteractionDef] = {}

    def register(self, definition: InteractionDef | dict) -> None:
        """Register an interaction definition."""
        if isinstance(definition, dict):
            definition = InteractionDef.from_dict(definition)
        self._interactions[definition.name] = definition

    def get(self, name: str) -> InteractionDef | None:
        return self._interactions.get(name)

    def list_interactions(self) -> list[str]:
        return sorted(self._interactions.keys())

    def register_builtins(self) -> None:
        """Register all built-in interactions."""
        for definition in _BUILTIN_INTERACTIONS:
            self.register(definition)

    def dispatch(
        self,
        name: str,
        state: ChartState,
        index: Optional[int] = None,
    ) -> Transition:
        """Apply interaction *name* to *state*.

        Unknown names, and index-based events without an index, leave the
        state unchanged and request no renders.
        """
        definition = self._interactions.get(name)
        if definition is None:
            return Transition(state)
        if definition.needs_index and index is None:
            return Transition(state)

        new_state = definition.handler(state, index)
        if new_state == state:
            return Transition(state)

        renders = definition.renders
        if RENDER_DETAILS in renders and new_state.selection == state.selection:
            renders = tuple(r for r in renders if r != RENDER_DETAILS)
        return Transition(new_state, renders, definition.duration_ms)


# ---------------------------------------------------------------------------
# Built-in interaction definitions
# ---------------------------------------------------------------------------

_BUILTIN_INTERACTIONS: list[dict] = [
    {
        "name": "hover_enter",
        "description": "Raise the marker, grow it to 1.6x and show the tooltip",
        "handler": _hover_enter,
        "renders": (RENDER_CHART,),
        "duration_ms": HOVER_DURATION_MS,
        "needs_index": True,
    },
    {
        "name": "hover_exit",
        "description": "Return the marker to its resting size and outline",
        "handler": _hover_exit,
        "renders": (RENDER_CHART,),
        "duration_ms": HOVER_DURATION_MS,
    },
    {
        "name": "click",
        "description": "Select a record and refresh the detail panel and starplot",
        "handler": _click,
        "renders": (RENDER_CHART, RENDER_DETAILS),
        "needs_index": True,
    },
    {
        "name": "clear_selection",
        "description": "Deselect the current record",
        "handler": _clear_selection,
        "renders": (RENDER_CHART, RENDER_DETAILS),
    },
    {
        "name": "entrance_done",
        "description": "Grow markers from zero to their resting radius",
        "handler": _entrance_done,
        "renders": (RENDER_CHART,),
        "duration_ms": ENTRANCE_DURATION_MS,
    },
]


# ---------------------------------------------------------------------------
# Module-level default registry
# ---------------------------------------------------------------------------

_default_registry: InteractionRegistry | None = None


def get_default_registry() -> InteractionRegistry:
    """Return the singleton default registry with built-in interactions."""
    global _default_registry
    if _default_registry is None:
        _default_registry = InteractionRegistry()
        _default_registry.register_builtins()
    return _default_registry
