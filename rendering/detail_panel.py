"""Detail panel: writes the selected record's values into display slots."""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional, Sequence

from data_ops.dataset import MISSING_PLACEHOLDER, Record, format_value
from .starplot import StarplotRenderer

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]+")


def sanitize_id(name: str) -> str:
    """'Horsepower(HP)' -> 'Horsepower_HP'."""
    return _NON_ALNUM.sub("_", name).strip("_")


def slot_id(attr: str) -> str:
    return f"d-{sanitize_id(attr)}"


class DetailPanel:
    """Fills one slot per display attribute and forwards to the starplot.

    Slots are looked up by ``slot_id(attr)``; a slot is anything with a
    writable ``object`` attribute (Panel panes in the web UI). Attributes
    whose slot is absent are skipped.
    """

    def __init__(
        self,
        attrs: Sequence[str],
        slots: Mapping[str, Any],
        starplot: Optional[StarplotRenderer] = None,
    ):
        self.attrs = tuple(attrs)
        self.slots = slots
        self.starplot = starplot

    def values(self, record: Optional[Record]) -> dict[str, str]:
        """Display strings keyed by slot id."""
        out: dict[str, str] = {}
        for attr in self.attrs:
            value = record.get(attr) if record is not None else None
            out[slot_id(attr)] = format_value(value, MISSING_PLACEHOLDER)
        return out

    def update(self, record: Optional[Record]) -> dict[str, str]:
        values = self.values(record)
        for sid, text in values.items():
            slot = self.slots.get(sid)
            if slot is None:
                continue
            slot.object = text
        if self.starplot is not None:
            self.starplot.render(record)
        return values
