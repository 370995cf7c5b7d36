"""Tests for rendering.detail_panel."""

from types import SimpleNamespace

from data_ops.dataset import Domain, Record
from rendering.detail_panel import DetailPanel, sanitize_id, slot_id
from rendering.starplot import StarplotRenderer

ATTRS = ["Name", "Type", "Retail Price", "Engine Size (l)"]


def _slots(attrs=ATTRS):
    return {slot_id(a): SimpleNamespace(object=None) for a in attrs}


def _record():
    return Record(index=0, values={
        "Name": "Alpha",
        "Type": "Sedan",
        "Retail Price": 20000.0,
        "Engine Size (l)": float("nan"),
    })


class TestIds:
    def test_sanitize(self):
        assert sanitize_id("Horsepower(HP)") == "Horsepower_HP"
        assert sanitize_id("Engine Size (l)") == "Engine_Size_l"
        assert sanitize_id("Name") == "Name"

    def test_slot_id(self):
        assert slot_id("Retail Price") == "d-Retail_Price"


class TestDetailPanel:
    def test_values(self):
        panel = DetailPanel(ATTRS, {})
        assert panel.values(_record()) == {
            "d-Name": "Alpha",
            "d-Type": "Sedan",
            "d-Retail_Price": "20000",
            "d-Engine_Size_l": "N/A",
        }

    def test_no_selection_shows_placeholder(self):
        slots = _slots()
        DetailPanel(ATTRS, slots).update(None)
        assert all(s.object == "N/A" for s in slots.values())

    def test_update_writes_slots(self):
        slots = _slots()
        DetailPanel(ATTRS, slots).update(_record())
        assert slots["d-Name"].object == "Alpha"
        assert slots["d-Engine_Size_l"].object == "N/A"

    def test_missing_slot_skipped(self):
        slots = _slots(["Name"])
        values = DetailPanel(ATTRS, slots).update(_record())
        assert slots["d-Name"].object == "Alpha"
        assert "d-Type" in values
        assert "d-Type" not in slots

    def test_idempotent(self):
        slots = _slots()
        panel = DetailPanel(ATTRS, slots)
        first = panel.update(_record())
        snapshot = {k: s.object for k, s in slots.items()}
        second = panel.update(_record())
        assert first == second
        assert snapshot == {k: s.object for k, s in slots.items()}

    def test_forwards_to_starplot(self):
        starplot = StarplotRenderer(["Retail Price"], {"Retail Price": Domain(0.0, 40000.0)})
        panel = DetailPanel(ATTRS, _slots(), starplot)
        panel.update(_record())
        assert starplot.geometry is not None
        assert starplot.geometry.axes[0].norm == 0.5
        panel.update(None)
        assert starplot.geometry is None

    def test_idempotent_with_starplot(self):
        starplot = StarplotRenderer(
            ["Retail Price", "Engine Size (l)"],
            {"Retail Price": Domain(0.0, 40000.0), "Engine Size (l)": Domain(1.0, 6.0)},
        )
        slots = _slots()
        panel = DetailPanel(ATTRS, slots, starplot)
        for record in (_record(), None):
            panel.update(record)
            fig_before = starplot.figure.to_dict()
            slots_before = {k: s.object for k, s in slots.items()}
            panel.update(record)
            assert starplot.figure.to_dict() == fig_before
            assert {k: s.object for k, s in slots.items()} == slots_before
