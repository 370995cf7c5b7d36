"""
Scale functions mapping data values to pixels, radii and colors.

Linear scales follow d3's "nice" and tick algorithms so axis ends land on
round numbers. Every scale accepts NaN and maps it to the domain minimum,
so a record with a missing value is still placed deterministically.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping

from plotly.colors import qualitative

from data_ops.dataset import Domain

# d3.schemeCategory10
CATEGORY_PALETTE: list[str] = list(qualitative.D3)

MIN_RADIUS = 3.0
MAX_RADIUS = 12.0

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


# ---------------------------------------------------------------------------
# d3-array tick helpers
# ---------------------------------------------------------------------------

def tick_increment(start: float, stop: float, count: int) -> float:
    """Return the d3 tick increment for [start, stop].

    Positive values are the step itself; negative values are ``-1/step``
    for steps below 1 (keeps the arithmetic exact for decimals).
    """
    step = (stop - start) / max(0, count) if count > 0 else math.inf
    if step <= 0 or not math.isfinite(step):
        return 0.0
    power = math.floor(math.log10(step))
    error = step / (10 ** power)
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1
    if power >= 0:
        return factor * (10 ** power)
    return -(10 ** -power) / factor


def ticks(start: float, stop: float, count: int) -> list[float]:
    """Return about *count* round tick values covering [start, stop]."""
    if not (math.isfinite(start) and math.isfinite(stop)):
        return []
    if start == stop and count > 0:
        return [start]
    reverse = stop < start
    if reverse:
        start, stop = stop, start
    step = tick_increment(start, stop, count)
    if step == 0 or not math.isfinite(step):
        return []
    if step > 0:
        lo = math.ceil(start / step)
        hi = math.floor(stop / step)
        values = [(lo + i) * step for i in range(int(hi - lo + 1))]
    else:
        lo = math.floor(start * step)
        hi = math.ceil(stop * step)
        values = [(lo - i) / step for i in range(int(lo - hi + 1))]
    if reverse:
        values.reverse()
    return values


def nice_domain(start: float, stop: float, count: int = 10) -> tuple[float, float]:
    """Extend [start, stop] outward to round tick multiples (d3 ``nice``)."""
    if not (math.isfinite(start) and math.isfinite(stop)) or start == stop:
        return (start, stop)
    reverse = stop < start
    if reverse:
        start, stop = stop, start

    prestep = None
    # d3 iterates until the step stabilises
    for _ in range(10):
        step = tick_increment(start, stop, count)
        if step == prestep:
            break
        if step > 0:
            start = math.floor(start / step) * step
            stop = math.ceil(stop / step) * step
        elif step < 0:
            start = math.ceil(start * step) / step
            stop = math.floor(stop * step) / step
        else:
            break
        prestep = step

    return (stop, start) if reverse else (start, stop)


def tick_precision(step: float) -> int:
    """Digits after the decimal point needed to show ticks of size *step*."""
    if step <= 0 or not math.isfinite(step):
        return 0
    return max(0, -math.floor(math.log10(step) + 1e-9))


# ---------------------------------------------------------------------------
# Continuous scales
# ---------------------------------------------------------------------------

class LinearScale:
    """Linear map from a numeric domain to a numeric range.

    A degenerate domain (min == max, or non-finite bounds) maps every input
    to the first end of the range. NaN and infinite inputs map like the
    domain minimum.
    """

    def __init__(self, domain: tuple[float, float], range_: tuple[float, float]):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))

    @property
    def is_degenerate(self) -> bool:
        d0, d1 = self.domain
        return not (math.isfinite(d0) and math.isfinite(d1)) or d0 == d1

    def _transform(self, value: float) -> float:
        return value

    def __call__(self, value) -> float:
        r0, r1 = self.range
        if self.is_degenerate:
            return r0
        try:
            value = float(value)
        except (TypeError, ValueError):
            value = math.nan
        if not math.isfinite(value):
            value = self.domain[0]
        t0 = self._transform(self.domain[0])
        t1 = self._transform(self.domain[1])
        t = (self._transform(value) - t0) / (t1 - t0)
        return r0 + t * (r1 - r0)

    def nice(self, count: int = 10) -> LinearScale:
        """Return a copy with the domain extended to round numbers."""
        return type(self)(nice_domain(self.domain[0], self.domain[1], count), self.range)

    def ticks(self, count: int = 10) -> list[float]:
        return ticks(self.domain[0], self.domain[1], count)

    def tick_format(self, count: int = 10):
        """Return a formatter for tick labels, e.g. ``20,000`` or ``2.5``."""
        inc = 0.0 if self.is_degenerate else tick_increment(*sorted(self.domain), count)
        if inc > 0:
            step = inc
        elif inc < 0:
            step = 1 / -inc
        else:
            step = 0.0
        precision = tick_precision(step)

        def _format(value: float) -> str:
            return f"{value:,.{precision}f}"

        return _format


class SqrtScale(LinearScale):
    """Power scale with exponent 0.5 (area-proportional marker sizes)."""

    def _transform(self, value: float) -> float:
        return math.copysign(math.sqrt(abs(value)), value)


# ---------------------------------------------------------------------------
# Ordinal color scale
# ---------------------------------------------------------------------------

class ColorState:
    """Tracks category-to-color assignments in first-seen order.

    Unseen categories get the next palette color, cycling when the palette
    runs out.
    """

    def __init__(
        self,
        label_colors: dict[str, str] | None = None,
        color_index: int = 0,
        palette: list[str] | None = None,
    ):
        self.label_colors: dict[str, str] = dict(label_colors or {})
        self.color_index: int = color_index
        self.palette: list[str] = list(palette or CATEGORY_PALETTE)

    def next_color(self, label: str) -> str:
        """Return a stable colour for *label*, assigning a new one if unseen."""
        if label in self.label_colors:
            return self.label_colors[label]
        color = self.palette[self.color_index % len(self.palette)]
        self.color_index += 1
        self.label_colors[label] = color
        return color

    __call__ = next_color

    @classmethod
    def for_categories(cls, categories, palette: list[str] | None = None) -> ColorState:
        state = cls(palette=palette)
        for c in categories:
            state.next_color(c)
        return state


# ---------------------------------------------------------------------------
# Scale set
# ---------------------------------------------------------------------------

@dataclass
class Scales:
    """The four mapping functions used by the chart renderer."""

    x: LinearScale
    y: LinearScale
    size: SqrtScale
    color: ColorState


def build_scales(
    domains: Mapping[str, Domain],
    categories,
    x_attr: str,
    y_attr: str,
    size_attr: str,
    width: float,
    height: float,
) -> Scales:
    """Build x/y/size/color scales from precomputed domains.

    Args:
        domains: Per-attribute observed domains (computed once at load).
        categories: Distinct color-attribute values, first-seen order.
        x_attr: Attribute mapped to horizontal position.
        y_attr: Attribute mapped to vertical position.
        size_attr: Attribute mapped to marker radius.
        width: Plot area width in pixels.
        height: Plot area height in pixels.
    """
    nan_domain = Domain(math.nan, math.nan)
    x_dom = domains.get(x_attr, nan_domain)
    y_dom = domains.get(y_attr, nan_domain)
    size_dom = domains.get(size_attr, nan_domain)

    return Scales(
        x=LinearScale(x_dom.as_tuple(), (0, width)).nice(),
        y=LinearScale(y_dom.as_tuple(), (height, 0)).nice(),
        size=SqrtScale(size_dom.as_tuple(), (MIN_RADIUS, MAX_RADIUS)),
        color=ColorState.for_categories(categories),
    )
