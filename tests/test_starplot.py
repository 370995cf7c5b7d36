"""Tests for rendering.starplot: geometry, labels and the figure."""

import math

import pytest

from data_ops.dataset import Domain, Record
from rendering.starplot import (
    LABEL_OFFSET,
    PLACEHOLDER_TEXT,
    POLYGON_FILL,
    RING_COUNT,
    StarplotRenderer,
    axis_label,
    build_starplot_figure,
    normalize,
    project_starplot,
)

ATTRS = ["A", "B", "C", "D", "E", "F"]
DOMAINS = {a: Domain(0.0, 10.0) for a in ATTRS}


def _record(**values):
    return Record(index=0, values=dict(values))


def _dist(p, q):
    return math.hypot(p[0] - q[0], p[1] - q[1])


class TestAxisLabel:
    def test_strips_unit(self):
        assert axis_label("Engine Size (l)") == "Engine Size"
        assert axis_label("Horsepower(HP)") == "Horsepower"

    def test_no_unit(self):
        assert axis_label("City Miles Per Gallon") == "City Miles Per Gallon"


class TestNormalize:
    def test_endpoints(self):
        d = Domain(100.0, 200.0)
        assert normalize(100.0, d) == 0.0
        assert normalize(200.0, d) == 1.0

    def test_degenerate_and_missing(self):
        assert normalize(5.0, Domain(5.0, 5.0)) == 0.0
        assert normalize(float("nan"), Domain(0.0, 1.0)) == 0.0
        assert normalize(5.0, None) == 0.0


class TestProjection:
    def test_center_and_radius(self):
        geo = project_starplot(_record(), ATTRS, DOMAINS, 320, 280)
        assert geo.center == (160, 150)
        assert geo.radius == pytest.approx(280 * 0.29)
        assert len(geo.rings) == RING_COUNT
        assert geo.rings[-1] == pytest.approx(geo.radius)

    def test_one_vertex_per_attribute(self):
        geo = project_starplot(_record(A=5.0), ATTRS, DOMAINS)
        assert len(geo.vertices) == len(ATTRS)
        assert len(geo.axes) == len(ATTRS)

    def test_first_axis_points_up(self):
        geo = project_starplot(_record(A=10.0), ATTRS, DOMAINS, 320, 280)
        x, y = geo.vertices[0]
        assert x == pytest.approx(160)
        assert y == pytest.approx(150 - geo.radius)

    def test_axes_equally_spaced(self):
        geo = project_starplot(_record(), ATTRS, DOMAINS)
        angles = [a.angle for a in geo.axes]
        for a, b in zip(angles, angles[1:]):
            assert b - a == pytest.approx(2 * math.pi / len(ATTRS))

    def test_vertex_distance_is_norm_times_radius(self):
        geo = project_starplot(_record(B=2.5, C=10.0), ATTRS, DOMAINS)
        assert _dist(geo.vertices[1], geo.center) == pytest.approx(0.25 * geo.radius)
        assert _dist(geo.vertices[2], geo.center) == pytest.approx(geo.radius)

    def test_missing_and_degenerate_sit_at_center(self):
        domains = dict(DOMAINS, D=Domain(3.0, 3.0))
        geo = project_starplot(_record(D=3.0), ATTRS, domains)
        assert geo.axes[3].norm == 0.0
        assert _dist(geo.vertices[3], geo.center) == pytest.approx(0)
        # A is missing from the record entirely
        assert _dist(geo.vertices[0], geo.center) == pytest.approx(0)

    def test_below_minimum_clamps_to_center(self):
        geo = project_starplot(_record(E=-5.0), ATTRS, DOMAINS)
        assert geo.axes[4].norm == pytest.approx(-0.5)
        assert _dist(geo.vertices[4], geo.center) == pytest.approx(0)

    def test_label_position_and_anchor(self):
        geo = project_starplot(_record(), ATTRS, DOMAINS)
        top = geo.axes[0]
        assert _dist(top.label_pos, geo.center) == pytest.approx(geo.radius + LABEL_OFFSET)
        assert top.anchor == "center"
        assert geo.axes[1].anchor == "left"
        assert geo.axes[4].anchor == "right"


class TestFigure:
    def test_polygon_closed_and_filled(self):
        geo = project_starplot(_record(A=5.0, B=5.0), ATTRS, DOMAINS)
        fig = build_starplot_figure(geo)
        polygon, vertices = fig.data
        assert polygon.fill == "toself"
        assert polygon.fillcolor == POLYGON_FILL
        assert len(polygon.x) == len(ATTRS) + 1
        assert polygon.x[0] == polygon.x[-1]
        assert len(vertices.x) == len(ATTRS)

    def test_labels_and_guides(self):
        fig = build_starplot_figure(project_starplot(_record(), ATTRS, DOMAINS))
        assert [a.text for a in fig.layout.annotations] == ATTRS
        kinds = [s.type for s in fig.layout.shapes]
        assert kinds.count("line") == len(ATTRS)
        assert kinds.count("circle") == RING_COUNT


class TestRenderer:
    def test_placeholder_until_selection(self):
        sp = StarplotRenderer(ATTRS, DOMAINS)
        assert sp.geometry is None
        assert len(sp.figure.data) == 0
        assert sp.figure.layout.annotations[0].text == PLACEHOLDER_TEXT

    def test_render_replaces_figure(self):
        sp = StarplotRenderer(ATTRS, DOMAINS)
        first = sp.render(_record(A=1.0))
        second = sp.render(_record(A=9.0))
        assert first is not second
        assert sp.figure is second
        assert sp.geometry.axes[0].raw == 9.0

    def test_render_none_resets(self):
        sp = StarplotRenderer(ATTRS, DOMAINS)
        sp.render(_record(A=1.0))
        sp.render(None)
        assert sp.geometry is None
        assert sp.figure.layout.annotations[0].text == PLACEHOLDER_TEXT

    def test_render_same_record_twice_is_identical(self):
        sp = StarplotRenderer(ATTRS, DOMAINS)
        record = _record(A=1.0, B=2.0, C=7.5, D=0.0, E=4.0, F=10.0)
        first = sp.render(record).to_dict()
        first_geometry = sp.geometry
        second = sp.render(record).to_dict()
        assert first == second
        assert sp.geometry == first_geometry

    def test_render_none_twice_is_identical(self):
        sp = StarplotRenderer(ATTRS, DOMAINS)
        sp.render(_record(A=1.0))
        first = sp.render(None).to_dict()
        second = sp.render(None).to_dict()
        assert first == second
        assert first == StarplotRenderer(ATTRS, DOMAINS).figure.to_dict()
