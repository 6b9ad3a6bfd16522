from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal

from seatmap.config_loader import AppConfig, default_config

from .camera import Camera
from .model.dataset import EMPTY_DATASET, SeatDataset, SeatRecord, build_dataset
from .model.layout import Layout, LayoutError, load_layout_json, parse_layout
from .rules.adjacency import find_adjacent
from .rules.hit_test import is_actionable, seat_at
from .rules.navigation import Direction, next_seat_id
from .rules.selection import SelectedSeat, SelectionStore
from ..render.frame import FramePlan, RenderSettings, SeatRenderer, choose_renderer


logger = logging.getLogger(__name__)


ActionType = Literal[
    "ZOOM_IN",
    "ZOOM_OUT",
    "ZOOM_BY",
    "PAN",
    "RESET_VIEW",
    "TOGGLE_HEAT_MAP",
    "CLICK",
    "KEY",
    "SELECT_ADJACENT",
    "CLEAR_SELECTION",
]

_ARROW_KEYS: dict[str, Direction] = {
    "up": "up",
    "down": "down",
    "left": "left",
    "right": "right",
}


class SeatingEngine:
    """Owns the layout, camera, selection and UI focus state.

    Single-threaded: event handlers mutate state synchronously between
    frames and ``plan_frame`` reads it once per tick. Loading a new
    layout replaces the previous one wholesale and clears the selection
    and focus; a layout that fails to load leaves everything unchanged.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or default_config()
        view = self.config.viewport
        self.camera = Camera(
            min_zoom=view.min_zoom,
            max_zoom=view.max_zoom,
            zoom_step=view.zoom_step,
            zoom_step_large=view.zoom_step_large,
        )
        self.selection = SelectionStore(
            price_tiers=self.config.price_tiers,
            max_selectable=self.config.selection.max_selectable,
        )
        self.render_settings = RenderSettings(
            sizing=self.config.render.sizing,
            culling_buffer=self.config.render.culling_buffer,
            naive_threshold=self.config.render.naive_threshold,
            price_tiers=self.config.price_tiers,
        )
        self.layout: Layout | None = None
        self.dataset: SeatDataset = EMPTY_DATASET
        self.renderer: SeatRenderer = choose_renderer(0, self.render_settings)
        self.focused_seat_id: str | None = None
        self.heat_map = False

    # -- loading -----------------------------------------------------------

    def load_layout(self, layout: Layout) -> None:
        dataset = build_dataset(layout)
        renderer = choose_renderer(len(dataset), self.render_settings)
        self.layout = layout
        self.dataset = dataset
        self.renderer = renderer
        self.selection.clear_selection()
        self.focused_seat_id = None
        logger.info(
            "layout %s loaded: %s seats in %s sections, renderer=%s",
            layout.id,
            len(dataset),
            len(layout.sections),
            renderer.name,
        )

    def load_layout_data(self, data: Any) -> None:
        try:
            layout = parse_layout(data)
        except LayoutError as exc:
            logger.warning("layout rejected, keeping previous state: %s", exc)
            raise
        self.load_layout(layout)

    def load_layout_file(self, path: str | Path) -> None:
        try:
            layout = load_layout_json(path)
        except LayoutError as exc:
            logger.warning("layout %s rejected, keeping previous state: %s", path, exc)
            raise
        self.load_layout(layout)

    # -- actions -----------------------------------------------------------

    def act(self, action_type: ActionType, payload: dict[str, Any] | None = None) -> Any:
        payload = payload or {}
        if action_type == "ZOOM_IN":
            return self.camera.zoom_in()
        if action_type == "ZOOM_OUT":
            return self.camera.zoom_out()
        if action_type == "ZOOM_BY":
            return self.camera.zoom_by(float(payload.get("delta", 0.0)))
        if action_type == "PAN":
            self.camera.pan_by(float(payload.get("dx", 0.0)), float(payload.get("dy", 0.0)))
            return None
        if action_type == "RESET_VIEW":
            self.camera.reset_view()
            return None
        if action_type == "TOGGLE_HEAT_MAP":
            return self.toggle_heat_map()
        if action_type == "CLICK":
            x = payload.get("x")
            y = payload.get("y")
            if x is None or y is None:
                return None
            return self.click(float(x), float(y))
        if action_type == "KEY":
            key = payload.get("key")
            if not key:
                return False
            return self.handle_key(str(key), ctrl=bool(payload.get("ctrl", False)))
        if action_type == "SELECT_ADJACENT":
            return self.select_adjacent(int(payload.get("count", 0)))
        if action_type == "CLEAR_SELECTION":
            self.selection.clear_selection()
            return None

        raise ValueError(f"Unknown action_type={action_type!r}")

    def toggle_heat_map(self) -> bool:
        self.heat_map = not self.heat_map
        return self.heat_map

    def set_focus(self, seat_id: str | None) -> None:
        if seat_id is not None and self.dataset.get(seat_id) is None:
            return
        self.focused_seat_id = seat_id

    def seat_at_surface(self, surface_x: float, surface_y: float) -> SeatRecord | None:
        world_x, world_y = self.camera.to_world(surface_x, surface_y)
        return seat_at(self.dataset, world_x, world_y, self.camera.zoom, self.render_settings.sizing)

    def click(self, surface_x: float, surface_y: float) -> SeatRecord | None:
        """Resolve a pointer press and toggle the seat under it.

        Returns the actionable seat that was hit, or None when the press
        landed on nothing or on a seat that can be neither selected nor
        deselected.
        """
        record = self.seat_at_surface(surface_x, surface_y)
        if not is_actionable(record, self.selection.selected_ids()):
            return None
        self.focused_seat_id = record.id
        self.toggle_seat(record.id)
        return record

    def toggle_seat(self, seat_id: str) -> bool:
        record = self.dataset.get(seat_id)
        if record is None:
            return False
        if self.selection.is_selected(seat_id):
            return self.selection.deselect_seat(seat_id)
        return self.selection.select_seat(record.seat, record.section, record.row)

    def handle_key(self, key: str, *, ctrl: bool = False) -> bool:
        """Apply one key press; returns True when the key was consumed."""
        key = key.lower()
        if ctrl:
            if key == "0":
                self.camera.reset_view()
                return True
            if key in ("=", "+"):
                self.camera.zoom_in()
                return True
            if key == "-":
                self.camera.zoom_out()
                return True
            return False

        if self.layout is None:
            return False
        direction = _ARROW_KEYS.get(key)
        if direction is not None:
            target = next_seat_id(self.dataset, self.focused_seat_id, direction)
            if target is not None:
                self.focused_seat_id = target
            return True
        if key in ("enter", "return", "space", " "):
            if self.focused_seat_id is not None:
                record = self.dataset.get(self.focused_seat_id)
                if is_actionable(record, self.selection.selected_ids()):
                    self.toggle_seat(record.id)
            return True
        if key == "escape":
            self.focused_seat_id = None
            return True
        return False

    # -- adjacency ---------------------------------------------------------

    def find_adjacent(self, count: int) -> list[SelectedSeat]:
        return find_adjacent(self.layout, count, self.selection.selected_ids(), self.selection.price_tiers)

    def select_adjacent(self, count: int) -> list[SelectedSeat]:
        """Replace the selection with the first adjacent run of ``count`` seats.

        A miss leaves the current selection untouched. A run longer than
        the selection capacity counts as a miss.
        """
        if count > self.selection.max_selectable:
            logger.info("cannot select %s adjacent seats, limit is %s", count, self.selection.max_selectable)
            return []
        found = self.find_adjacent(count)
        if not found:
            logger.info("no run of %s adjacent seats available", count)
            return []
        self.selection.clear_selection()
        for entry in found:
            self.selection.select_seat(entry.seat, entry.section, entry.row)
        return found

    # -- rendering ---------------------------------------------------------

    def plan_frame(self, surface_width: float, surface_height: float) -> FramePlan:
        return self.renderer.plan(
            self.dataset,
            self.camera,
            self.selection.selected_ids(),
            self.focused_seat_id,
            self.heat_map,
            surface_width,
            surface_height,
        )

    def observe(self) -> dict[str, Any]:
        return {
            "layout": None if self.layout is None else self.layout.id,
            "seats": len(self.dataset),
            "renderer": self.renderer.name,
            "zoom": self.camera.zoom,
            "pan": (self.camera.pan_x, self.camera.pan_y),
            "heat_map": self.heat_map,
            "focused": self.focused_seat_id,
            "selected": [
                {
                    "id": entry.seat.id,
                    "section": entry.section.label,
                    "row": entry.row.index,
                    "column": entry.seat.column,
                    "price": entry.price,
                }
                for entry in self.selection.entries
            ],
            "total": self.selection.get_total_price(),
            "max_selectable": self.selection.max_selectable,
        }
