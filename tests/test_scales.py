"""
Unit tests for rendering.scales: nice/ticks, linear and sqrt scales, colors.
"""

import math

import pytest

from data_ops.dataset import Domain
from rendering.scales import (
    CATEGORY_PALETTE,
    MAX_RADIUS,
    MIN_RADIUS,
    ColorState,
    LinearScale,
    SqrtScale,
    build_scales,
    nice_domain,
    tick_increment,
    ticks,
)


# ---------------------------------------------------------------------------
# Tick helpers
# ---------------------------------------------------------------------------

class TestTicks:
    def test_tick_increment(self):
        assert tick_increment(20000, 50000, 6) == 5000
        assert tick_increment(20000, 50000, 10) == 2000
        # Steps below 1 come back as -1/step
        assert tick_increment(0, 1, 10) == -10
        assert tick_increment(0, 1, 5) == -5

    def test_tick_increment_empty_range(self):
        assert tick_increment(5, 5, 10) == 0

    def test_ticks_integers(self):
        assert ticks(20000, 50000, 6) == [20000, 25000, 30000, 35000, 40000, 45000, 50000]

    def test_ticks_decimals(self):
        assert ticks(0, 1, 5) == pytest.approx([0, 0.2, 0.4, 0.6, 0.8, 1.0])

    def test_ticks_reversed(self):
        assert ticks(10, 0, 2) == [10, 5, 0]

    def test_ticks_nan(self):
        assert ticks(math.nan, 1, 5) == []


class TestNice:
    def test_already_round(self):
        assert nice_domain(20000, 50000) == (20000, 50000)

    def test_extends_outward(self):
        assert nice_domain(150, 300) == (140, 300)
        assert nice_domain(0.5, 9.7) == (0, 10)

    def test_decimal_domain(self):
        lo, hi = nice_domain(0.201479, 0.996679)
        assert lo == pytest.approx(0.2)
        assert hi == pytest.approx(1.0)

    def test_degenerate_untouched(self):
        assert nice_domain(7, 7) == (7, 7)


# ---------------------------------------------------------------------------
# Linear / sqrt scales
# ---------------------------------------------------------------------------

class TestLinearScale:
    def test_maps_domain_to_range(self):
        x = LinearScale((20000, 50000), (0, 570))
        assert x(20000) == 0
        assert x(50000) == 570
        assert x(35000) == pytest.approx(285)

    def test_inverted_range(self):
        y = LinearScale((140, 300), (400, 0))
        assert y(300) == 0
        assert y(150) == pytest.approx(375)

    def test_nan_maps_to_domain_min(self):
        y = LinearScale((140, 300), (400, 0))
        assert y(math.nan) == 400
        assert y("not a number") == 400

    def test_infinite_input_maps_to_domain_min(self):
        x = LinearScale((20000, 50000), (0, 570))
        assert x(math.inf) == 0
        assert x(-math.inf) == 0

    def test_infinite_domain_is_degenerate(self):
        x = LinearScale((20000, math.inf), (0, 570))
        assert x.is_degenerate
        assert x(30000) == 0
        assert x.nice().domain == (20000, math.inf)
        assert x.ticks(6) == []

    def test_degenerate_domain_maps_to_range_start(self):
        assert LinearScale((5, 5), (0, 570))(5) == 0
        assert LinearScale((math.nan, math.nan), (400, 0))(12) == 400

    def test_nice_returns_new_scale(self):
        s = LinearScale((150, 300), (400, 0))
        n = s.nice()
        assert n.domain == (140, 300)
        assert s.domain == (150, 300)
        assert n.range == s.range

    def test_tick_format(self):
        fmt = LinearScale((20000, 50000), (0, 570)).tick_format(6)
        assert fmt(20000) == "20,000"
        fmt = LinearScale((0, 1), (0, 100)).tick_format(5)
        assert fmt(0.2) == "0.2"


class TestSqrtScale:
    def test_endpoints(self):
        s = SqrtScale((15, 25), (MIN_RADIUS, MAX_RADIUS))
        assert s(15) == pytest.approx(MIN_RADIUS)
        assert s(25) == pytest.approx(MAX_RADIUS)

    def test_monotonic(self):
        s = SqrtScale((10, 60), (3, 12))
        values = [s(v) for v in range(10, 61, 5)]
        assert values == sorted(values)
        assert len(set(values)) == len(values)

    def test_area_proportional_from_zero(self):
        s = SqrtScale((0, 100), (0, 10))
        assert s(25) == pytest.approx(5)

    def test_nan_is_min_radius(self):
        s = SqrtScale((15, 25), (3, 12))
        assert s(math.nan) == pytest.approx(3)


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------

class TestColorState:
    def test_palette_is_category10(self):
        assert len(CATEGORY_PALETTE) == 10
        assert CATEGORY_PALETTE[0].lower() == "#1f77b4"

    def test_first_seen_assignment(self):
        colors = ColorState.for_categories(["Sedan", "Truck"])
        assert colors("Sedan") == CATEGORY_PALETTE[0]
        assert colors("Truck") == CATEGORY_PALETTE[1]

    def test_stable_and_unseen(self):
        colors = ColorState()
        a = colors.next_color("a")
        assert colors.next_color("b") != a
        assert colors.next_color("a") == a

    def test_cycles(self):
        colors = ColorState.for_categories([str(i) for i in range(10)])
        assert colors("extra") == CATEGORY_PALETTE[0]

    def test_custom_palette(self):
        colors = ColorState.for_categories(["Sedan", "Truck", "SUV"], palette=["red", "blue"])
        assert colors("Sedan") == "red"
        assert colors("Truck") == "blue"
        assert colors("SUV") == "red"


class TestBuildScales:
    def test_sedan_truck_scenario(self):
        domains = {
            "Retail Price": Domain(20000.0, 50000.0),
            "Horsepower(HP)": Domain(150.0, 300.0),
            "City Miles Per Gallon": Domain(15.0, 25.0),
        }
        scales = build_scales(
            domains, ["Sedan", "Truck"],
            "Retail Price", "Horsepower(HP)", "City Miles Per Gallon",
            570, 400,
        )
        assert scales.x(20000) == 0
        assert scales.x(50000) == 570
        assert scales.y.domain == (140, 300)
        assert scales.size(15) == pytest.approx(3)
        assert scales.color("Truck") == CATEGORY_PALETTE[1]

    def test_missing_size_attr(self):
        scales = build_scales({}, [], "x", "y", "size", 570, 400)
        assert scales.size(10) == MIN_RADIUS
        assert scales.x(1) == 0
