import logging

import pytest

from seatmap.config_loader import load_config
from seatmap.core.engine import SeatingEngine
from seatmap.core.model.layout import LayoutError
from seatmap.testing.layouts import layout_document, single_row_layout


# world positions in data/venues/venue.json: ORCH origin (100, 120), 24 units per column/row
ORCH_1_1 = (124.0, 144.0)
ORCH_1_2 = (148.0, 144.0)


@pytest.fixture
def engine(venue_path) -> SeatingEngine:
    eng = SeatingEngine()
    eng.load_layout_file(venue_path)
    return eng


def _selected(engine: SeatingEngine) -> list[str]:
    return [entry.seat.id for entry in engine.selection.entries]


def test_load_picks_renderer_and_resets_state(engine) -> None:
    assert engine.layout.id == "venue-1"
    assert len(engine.dataset) == 36
    assert engine.renderer.name == "naive"
    assert engine.focused_seat_id is None
    assert _selected(engine) == []


def test_click_toggles_available_seat(engine) -> None:
    record = engine.click(*ORCH_1_1)
    assert record.id == "ORCH-1-1"
    assert engine.focused_seat_id == "ORCH-1-1"
    assert _selected(engine) == ["ORCH-1-1"]
    assert engine.selection.get_total_price() == 150
    assert engine.click(*ORCH_1_1).id == "ORCH-1-1"
    assert _selected(engine) == []


def test_click_on_reserved_seat_changes_nothing(engine) -> None:
    engine.set_focus("ORCH-1-1")
    assert engine.click(*ORCH_1_2) is None
    assert engine.focused_seat_id == "ORCH-1-1"
    assert _selected(engine) == []


def test_click_on_empty_space_is_ignored(engine) -> None:
    assert engine.click(5.0, 5.0) is None
    assert engine.focused_seat_id is None


def test_click_respects_zoom_and_pan(engine) -> None:
    engine.act("ZOOM_BY", {"delta": 1.0})
    engine.act("PAN", {"dx": 10.0, "dy": 20.0})
    x, y = engine.camera.to_surface(*ORCH_1_1)
    assert (x, y) == (258.0, 308.0)
    assert engine.act("CLICK", {"x": x, "y": y}).id == "ORCH-1-1"
    assert engine.click(*ORCH_1_1) is None


def test_click_respects_capacity() -> None:
    engine = SeatingEngine(load_config(overrides_list=["selection.max_selectable=1"]))
    engine.load_layout(single_row_layout(["available", "available"]))
    assert engine.click(20.0, 100.0).id == "A1"
    engine.click(40.0, 100.0)
    assert _selected(engine) == ["A1"]


def test_keyboard_focus_and_toggle(engine) -> None:
    engine.set_focus("ORCH-1-1")
    assert engine.handle_key("right")
    assert engine.focused_seat_id == "ORCH-1-2"
    engine.handle_key("down")
    assert engine.focused_seat_id == "ORCH-2-2"
    engine.handle_key("enter")
    assert _selected(engine) == []
    engine.handle_key("left")
    engine.handle_key("space")
    assert _selected(engine) == ["ORCH-2-1"]
    engine.handle_key("return")
    assert _selected(engine) == []
    engine.handle_key("up")
    engine.handle_key("up")
    assert engine.focused_seat_id == "ORCH-1-1"
    engine.handle_key("escape")
    assert engine.focused_seat_id is None


def test_arrow_without_focus_is_consumed_but_inert(engine) -> None:
    assert engine.handle_key("left") is True
    assert engine.focused_seat_id is None
    assert engine.handle_key("q") is False


def test_ctrl_shortcuts_drive_camera(engine) -> None:
    assert engine.handle_key("=", ctrl=True)
    assert engine.camera.zoom == 1.2
    engine.handle_key("+", ctrl=True)
    engine.handle_key("-", ctrl=True)
    assert engine.camera.zoom == 1.2
    engine.camera.pan_by(40.0, 40.0)
    engine.handle_key("0", ctrl=True)
    assert (engine.camera.zoom, engine.camera.pan_x, engine.camera.pan_y) == (1.0, 0.0, 0.0)
    assert engine.handle_key("x", ctrl=True) is False


def test_keys_without_layout_are_ignored() -> None:
    engine = SeatingEngine()
    assert engine.handle_key("left") is False
    assert engine.handle_key("0", ctrl=True) is True


def test_set_focus_ignores_unknown_seat(engine) -> None:
    engine.set_focus("ORCH-1-1")
    engine.set_focus("nope")
    assert engine.focused_seat_id == "ORCH-1-1"


def test_reload_clears_selection_and_focus(engine) -> None:
    engine.click(*ORCH_1_1)
    engine.load_layout_data(layout_document())
    assert engine.layout.id == "venue-1"
    assert len(engine.dataset) == 4
    assert _selected(engine) == []
    assert engine.focused_seat_id is None


def test_failed_load_keeps_previous_state(engine, caplog) -> None:
    engine.click(*ORCH_1_1)
    before = engine.dataset
    doc = layout_document()
    doc["sections"][0]["rows"][0]["entities"][0]["status"] = "gone"
    with caplog.at_level(logging.WARNING, logger="seatmap.core.engine"):
        with pytest.raises(LayoutError):
            engine.load_layout_data(doc)
    assert any("rejected" in rec.message for rec in caplog.records)
    assert engine.dataset is before
    assert _selected(engine) == ["ORCH-1-1"]
    assert engine.focused_seat_id == "ORCH-1-1"


def test_select_adjacent_replaces_selection(engine) -> None:
    engine.click(*ORCH_1_1)
    found = engine.act("SELECT_ADJACENT", {"count": 2})
    assert [entry.seat.id for entry in found] == ["ORCH-1-3", "ORCH-1-4"]
    assert _selected(engine) == ["ORCH-1-3", "ORCH-1-4"]


def test_select_adjacent_miss_leaves_selection(engine, caplog) -> None:
    engine.click(*ORCH_1_1)
    with caplog.at_level(logging.INFO, logger="seatmap.core.engine"):
        assert engine.select_adjacent(3) == []
    assert _selected(engine) == ["ORCH-1-1"]
    assert any("no run of 3" in rec.message for rec in caplog.records)


def test_find_adjacent_skips_selected_seats(engine) -> None:
    engine.toggle_seat("ORCH-1-3")
    assert [entry.seat.id for entry in engine.find_adjacent(2)] == ["ORCH-1-6", "ORCH-1-7"]


def test_act_dispatch(engine) -> None:
    assert engine.act("ZOOM_IN") == 1.2
    assert engine.act("ZOOM_OUT") == 1.0
    assert engine.act("TOGGLE_HEAT_MAP") is True
    engine.act("RESET_VIEW")
    assert engine.act("CLICK", {"x": None}) is None
    assert engine.act("KEY", {}) is False
    engine.click(*ORCH_1_1)
    engine.act("CLEAR_SELECTION")
    assert _selected(engine) == []
    with pytest.raises(ValueError):
        engine.act("JUMP")


def test_plan_frame_reflects_heat_map_and_selection(engine) -> None:
    engine.click(*ORCH_1_1)
    engine.toggle_heat_map()
    plan = engine.plan_frame(800, 600)
    assert plan.drawn_count == 36
    colors = {engine.dataset.records[b.indices[0]].id: b.color for b in plan.batches}
    assert colors["ORCH-1-1"] == "#3b82f6"
    assert colors["ORCH-3-1"] == "#8b5cf6"
    assert plan.focus_outline is not None
    assert engine.plan_frame(0, 0).skipped


def test_observe_summarises_state(engine) -> None:
    engine.click(*ORCH_1_1)
    state = engine.observe()
    assert state["layout"] == "venue-1"
    assert state["seats"] == 36
    assert state["selected"] == [
        {"id": "ORCH-1-1", "section": "Orchestra", "row": 1, "column": 1, "price": 150}
    ]
    assert state["total"] == 150
    assert state["max_selectable"] == 8
    assert state["focused"] == "ORCH-1-1"


def test_select_adjacent_beyond_capacity_is_a_miss() -> None:
    engine = SeatingEngine()
    engine.load_layout(single_row_layout(["available"] * 10))
    engine.click(20.0, 100.0)
    assert engine.act("SELECT_ADJACENT", {"count": 10}) == []
    assert _selected(engine) == ["A1"]
    found = engine.act("SELECT_ADJACENT", {"count": 8})
    assert len(found) == 8
    assert _selected(engine) == [entry.seat.id for entry in found]


def test_keyboard_toggle_uses_same_rule_as_click() -> None:
    engine = SeatingEngine()
    engine.load_layout(single_row_layout(["sold", "available"]))
    engine.set_focus("A1")
    engine.handle_key("enter")
    assert _selected(engine) == []
    engine.set_focus("A2")
    engine.handle_key("space")
    assert _selected(engine) == ["A2"]
    engine.handle_key("enter")
    assert _selected(engine) == []
