from __future__ import annotations

import logging
from pathlib import Path
import time
from typing import Callable

import pyglet
from pyglet.math import Mat4
from pyglet.window import key

from .frame_loop import FrameLoop
from .run_log import next_run_dir, open_run_log
from .ui_layout import SidebarLayout
from ..config_loader import AppConfig, config_to_dict, dump_effective_config
from ..core.engine import SeatingEngine
from ..core.model.tiers import describe_price_tier
from ..core.rules.colors import hex_to_rgb
from ..core.rules.selection import SelectedSeat
from ..render.frame import FramePlan
from ..render.perf import FrameStats


logger = logging.getLogger(__name__)

PERF_AUTO_THRESHOLD = 1000
MAP_BACKGROUND = (243, 244, 246)
SIDEBAR_COLOR = (34, 36, 40)
TEXT_COLOR = (240, 240, 240, 255)
MUTED_TEXT = (200, 200, 200, 255)
PERF_COLORS = {
    "good": (40, 200, 80, 255),
    "warning": (230, 180, 40, 255),
    "critical": (220, 60, 60, 255),
}


class _Button:
    def __init__(
        self,
        bounds: tuple[float, float, float, float],
        text: str,
        on_click: Callable[[], None],
        batch: pyglet.graphics.Batch,
    ) -> None:
        x, y, w, h = bounds
        self.bounds = bounds
        self.on_click = on_click
        self.shape = pyglet.shapes.BorderedRectangle(
            x,
            y,
            w,
            h,
            border=2,
            color=(60, 60, 64),
            border_color=(110, 110, 115),
            batch=batch,
        )
        self.label = pyglet.text.Label(
            text,
            x=x + w / 2,
            y=y + h / 2,
            anchor_x="center",
            anchor_y="center",
            font_size=11,
            color=(230, 230, 230, 255),
            batch=batch,
        )

    def set_active(self, active: bool) -> None:
        if active:
            self.shape.color = (70, 90, 70)
            self.shape.border_color = (120, 180, 120)
        else:
            self.shape.color = (60, 60, 64)
            self.shape.border_color = (110, 110, 115)

    def set_enabled(self, enabled: bool) -> None:
        self.shape.opacity = 255 if enabled else 150
        r, g, b, _ = self.label.color
        self.label.color = (r, g, b, 255 if enabled else 120)


class SeatingGui:
    def __init__(self, engine: SeatingEngine, *, width: int = 1280, height: int = 800) -> None:
        self.engine = engine
        self._sidebar_width = 280
        self._sidebar_padding = 12
        label = engine.layout.label if engine.layout is not None else "no layout"
        self.window = pyglet.window.Window(
            width=width,
            height=height,
            caption=f"Seat map - {label}",
            resizable=True,
        )
        self.seat_batch = pyglet.graphics.Batch()
        self.ui_batch = pyglet.graphics.Batch()
        self._square_pool: list[pyglet.shapes.Rectangle] = []
        self._rounded_pool: list[pyglet.shapes.RoundedRectangle] = []
        self._rounded_radius: float | None = None
        self._focus_box: pyglet.shapes.Box | None = None
        self._focus_key: tuple | None = None
        self._rgb_cache: dict[str, tuple[int, int, int]] = {}
        self._plan: FramePlan | None = None

        self._stats = FrameStats()
        self._show_perf = len(engine.dataset) > PERF_AUTO_THRESHOLD
        self._adjacent_count = 2
        self._status_text = ""
        self._press_pos: tuple[float, float] | None = None
        self._dragged = False

        pyglet.gl.glClearColor(*(c / 255.0 for c in MAP_BACKGROUND), 1.0)
        self._build_sidebar_ui()
        self._unsubscribe = engine.selection.add_listener(self._refresh_selection_labels)

        self.window.push_handlers(
            on_draw=self.on_draw,
            on_resize=self.on_resize,
            on_mouse_press=self.on_mouse_press,
            on_mouse_release=self.on_mouse_release,
            on_mouse_drag=self.on_mouse_drag,
            on_mouse_scroll=self.on_mouse_scroll,
            on_key_press=self.on_key_press,
            on_close=self.on_close,
        )
        self.loop = FrameLoop(self.update).start()

    # -- geometry ----------------------------------------------------------

    @property
    def _map_width(self) -> int:
        return max(0, self.window.width - self._sidebar_width)

    @property
    def _map_height(self) -> int:
        return max(0, self.window.height)

    def _to_surface_coords(self, x: float, y: float) -> tuple[float, float]:
        return x, self.window.height - y

    def _world_view(self) -> Mat4:
        camera = self.engine.camera
        return Mat4().translate(
            (camera.pan_x, self.window.height - camera.pan_y, 0.0),
        ).scale(
            (camera.zoom, -camera.zoom, 1.0),
        )

    def _rgb(self, color: str) -> tuple[int, int, int]:
        rgb = self._rgb_cache.get(color)
        if rgb is None:
            rgb = hex_to_rgb(color)
            self._rgb_cache[color] = rgb
        return rgb

    # -- per tick ----------------------------------------------------------

    def update(self, dt: float) -> None:
        started = time.perf_counter()
        plan = self.engine.plan_frame(self._map_width, self._map_height)
        if not plan.skipped:
            self._sync_seat_shapes(plan)
            self._sync_focus_box(plan)
        self._plan = plan
        self._stats.record(dt, (time.perf_counter() - started) * 1000.0)
        self._refresh_view_labels()

    def _sync_seat_shapes(self, plan: FramePlan) -> None:
        geometry = plan.geometry
        rounded = geometry.rounded
        if rounded and self._rounded_radius != geometry.corner_radius:
            for shape in self._rounded_pool:
                shape.delete()
            self._rounded_pool.clear()
            self._rounded_radius = geometry.corner_radius

        pool = self._rounded_pool if rounded else self._square_pool
        idle = self._square_pool if rounded else self._rounded_pool
        for shape in idle:
            shape.visible = False

        records = self.engine.dataset.records
        size = geometry.size
        half = size / 2.0
        used = 0
        for batch in plan.batches:
            rgb = self._rgb(batch.color)
            for idx in batch.indices:
                record = records[idx]
                if used < len(pool):
                    shape = pool[used]
                    shape.position = (record.x - half, record.y - half)
                    shape.width = size
                    shape.height = size
                elif rounded:
                    shape = pyglet.shapes.RoundedRectangle(
                        record.x - half,
                        record.y - half,
                        size,
                        size,
                        radius=geometry.corner_radius,
                        batch=self.seat_batch,
                    )
                    pool.append(shape)
                else:
                    shape = pyglet.shapes.Rectangle(
                        record.x - half,
                        record.y - half,
                        size,
                        size,
                        batch=self.seat_batch,
                    )
                    pool.append(shape)
                shape.color = rgb
                shape.visible = True
                used += 1
        for shape in pool[used:]:
            shape.visible = False

    def _sync_focus_box(self, plan: FramePlan) -> None:
        outline = plan.focus_outline
        focus_key = None
        if outline is not None:
            focus_key = (outline.left, outline.top, outline.width, outline.line_width)
        if focus_key == self._focus_key:
            return
        self._focus_key = focus_key
        if self._focus_box is not None:
            self._focus_box.delete()
            self._focus_box = None
        if outline is None:
            return
        self._focus_box = pyglet.shapes.Box(
            outline.left,
            outline.top,
            outline.width,
            outline.height,
            thickness=outline.line_width,
            color=self._rgb(outline.color),
            batch=self.seat_batch,
        )

    def on_draw(self) -> None:
        self.window.clear()
        if self._plan is not None and not self._plan.skipped:
            self.window.view = self._world_view()
            self.seat_batch.draw()
        self.window.view = Mat4()
        self.ui_batch.draw()

    def on_resize(self, width: int, height: int) -> None:
        self._layout_sidebar()

    def on_close(self) -> None:
        self.loop.stop()
        self._unsubscribe()
        logger.info("window closed after %s frames", self._stats.frames)

    # -- input -------------------------------------------------------------

    def on_mouse_press(self, x: int, y: int, button: int, modifiers: int) -> None:
        if x >= self._map_width:
            for btn in self._buttons:
                if _point_in_rect(x, y, btn.bounds):
                    btn.on_click()
                    return
            return
        if button == pyglet.window.mouse.LEFT:
            self._press_pos = (x, y)
            self._dragged = False

    def on_mouse_drag(self, x: int, y: int, dx: int, dy: int, buttons: int, modifiers: int) -> None:
        if self._press_pos is None or not buttons & pyglet.window.mouse.LEFT:
            return
        px, py = self._press_pos
        if abs(x - px) + abs(y - py) > 3:
            self._dragged = True
        if self._dragged:
            self.engine.act("PAN", {"dx": dx, "dy": -dy})

    def on_mouse_release(self, x: int, y: int, button: int, modifiers: int) -> None:
        if self._press_pos is None:
            return
        dragged = self._dragged
        self._press_pos = None
        self._dragged = False
        if dragged:
            return
        surface_x, surface_y = self._to_surface_coords(x, y)
        record = self.engine.act("CLICK", {"x": surface_x, "y": surface_y})
        logger.debug(
            "click surface=(%.1f,%.1f) zoom=%.2f seat=%s",
            surface_x,
            surface_y,
            self.engine.camera.zoom,
            None if record is None else record.id,
        )
        if record is not None:
            status = _describe_seat(record.seat.id, record.section.label, record.row.index, record.seat.status)
            self._set_status(f"{status} {describe_price_tier(self.engine.config.price_tiers, record.seat.tier)}")

    def on_mouse_scroll(self, x: int, y: int, scroll_x: float, scroll_y: float) -> None:
        if x >= self._map_width or scroll_y == 0:
            return
        step = self.engine.camera.zoom_step
        self.engine.act("ZOOM_BY", {"delta": step if scroll_y > 0 else -step})

    def on_key_press(self, symbol: int, modifiers: int):
        ctrl = bool(modifiers & (key.MOD_CTRL | key.MOD_COMMAND))
        if ctrl and symbol == key.P:
            self._show_perf = not self._show_perf
            return pyglet.event.EVENT_HANDLED
        name = _KEY_NAMES.get(symbol)
        if name is not None and self.engine.act("KEY", {"key": name, "ctrl": ctrl}):
            return pyglet.event.EVENT_HANDLED
        if ctrl:
            return None
        if symbol == key.H:
            self._toggle_heat_map()
        elif symbol == key.C:
            self._clear_selection()
        elif symbol == key.F:
            self._find_adjacent()
        elif symbol == key.BRACKETLEFT:
            self._set_adjacent_count(self._adjacent_count - 1)
        elif symbol == key.BRACKETRIGHT:
            self._set_adjacent_count(self._adjacent_count + 1)
        else:
            return None
        return pyglet.event.EVENT_HANDLED

    # -- sidebar -----------------------------------------------------------

    def _build_sidebar_ui(self) -> None:
        self._sidebar_bg = pyglet.shapes.Rectangle(
            self._map_width,
            0,
            self._sidebar_width,
            self.window.height,
            color=SIDEBAR_COLOR,
            batch=self.ui_batch,
        )
        self._widgets: list = []
        self._buttons: list[_Button] = []
        self._layout_sidebar()

    def _layout_sidebar(self) -> None:
        for widget in self._widgets:
            widget.delete()
        self._widgets = []
        for btn in self._buttons:
            btn.shape.delete()
            btn.label.delete()
        self._buttons = []

        self._sidebar_bg.x = self._map_width
        self._sidebar_bg.height = self.window.height
        engine = self.engine
        layout = SidebarLayout(
            x=self._map_width,
            y_top=self.window.height,
            width=self._sidebar_width,
            padding=self._sidebar_padding,
            spacing=8,
        )

        title = engine.layout.label if engine.layout is not None else "No layout loaded"
        self._title_label = layout.add_label(title, font_size=14, color=TEXT_COLOR, batch=self.ui_batch)
        self._info_label = layout.add_label(
            f"{len(engine.dataset)} seats ({engine.renderer.name} renderer)",
            font_size=10,
            color=MUTED_TEXT,
            batch=self.ui_batch,
        )
        self._zoom_label = layout.add_label("", font_size=11, color=TEXT_COLOR, batch=self.ui_batch)

        zoom_out, zoom_in, reset = layout.add_button_row(3, 26)
        self._zoom_out_button = self._add_button(zoom_out, "-", lambda: engine.act("ZOOM_OUT"))
        self._zoom_in_button = self._add_button(zoom_in, "+", lambda: engine.act("ZOOM_IN"))
        self._add_button(reset, "Reset", lambda: engine.act("RESET_VIEW"))
        (heat,) = layout.add_button_row(1, 26)
        self._heat_button = self._add_button(heat, "Price heat map", self._toggle_heat_map)
        self._heat_button.set_active(engine.heat_map)

        layout.add_spacer(6)
        self._count_label = layout.add_label("", font_size=12, color=TEXT_COLOR, batch=self.ui_batch)
        self._total_label = layout.add_label("", font_size=14, color=TEXT_COLOR, batch=self.ui_batch)
        self._entries_label = layout.add_label(
            "",
            font_size=9,
            color=MUTED_TEXT,
            batch=self.ui_batch,
            multiline=True,
            height=9 * 1.6 * engine.selection.max_selectable,
        )
        (clear,) = layout.add_button_row(1, 26)
        self._add_button(clear, "Clear selection", self._clear_selection)

        layout.add_spacer(6)
        self._adjacent_label = layout.add_label("", font_size=11, color=TEXT_COLOR, batch=self.ui_batch)
        fewer, more, find = layout.add_button_row(3, 26)
        self._add_button(fewer, "<", lambda: self._set_adjacent_count(self._adjacent_count - 1))
        self._add_button(more, ">", lambda: self._set_adjacent_count(self._adjacent_count + 1))
        self._add_button(find, "Find", self._find_adjacent)
        self._status_label = layout.add_label(
            self._status_text,
            font_size=10,
            color=MUTED_TEXT,
            batch=self.ui_batch,
            multiline=True,
            height=30,
        )
        self._help_label = layout.add_label(
            "Drag to pan, wheel to zoom. Arrows move focus, Enter toggles, "
            "Esc clears focus. H heat map, C clear, [ ] F adjacent, Ctrl+P perf.",
            font_size=8,
            color=MUTED_TEXT,
            batch=self.ui_batch,
            multiline=True,
        )
        self._fps_label = pyglet.text.Label(
            "",
            x=self._map_width + self._sidebar_padding,
            y=self._sidebar_padding + 18,
            anchor_x="left",
            anchor_y="bottom",
            font_size=10,
            color=PERF_COLORS["good"],
            batch=self.ui_batch,
        )
        self._render_label = pyglet.text.Label(
            "",
            x=self._map_width + self._sidebar_padding,
            y=self._sidebar_padding,
            anchor_x="left",
            anchor_y="bottom",
            font_size=10,
            color=PERF_COLORS["good"],
            batch=self.ui_batch,
        )
        self._widgets.extend(
            [
                self._title_label,
                self._info_label,
                self._zoom_label,
                self._count_label,
                self._total_label,
                self._entries_label,
                self._adjacent_label,
                self._status_label,
                self._help_label,
                self._fps_label,
                self._render_label,
            ]
        )
        self._set_adjacent_count(self._adjacent_count)
        self._refresh_selection_labels(engine.selection.entries)
        self._refresh_view_labels()

    def _add_button(self, bounds, text: str, on_click: Callable[[], None]) -> _Button:
        btn = _Button(bounds, text, on_click, self.ui_batch)
        self._buttons.append(btn)
        return btn

    def _refresh_view_labels(self) -> None:
        camera = self.engine.camera
        self._zoom_label.text = f"Zoom: {round(camera.zoom * 100)}%"
        self._zoom_in_button.set_enabled(camera.can_zoom_in())
        self._zoom_out_button.set_enabled(camera.can_zoom_out())
        self._heat_button.set_active(self.engine.heat_map)
        if self._show_perf:
            self._fps_label.text = self._stats.fps_text()
            self._fps_label.color = PERF_COLORS[self._stats.fps_level()]
            self._render_label.text = self._stats.render_text()
            self._render_label.color = PERF_COLORS[self._stats.render_level()]
        else:
            self._fps_label.text = ""
            self._render_label.text = ""

    def _refresh_selection_labels(self, entries: tuple[SelectedSeat, ...]) -> None:
        selection = self.engine.selection
        self._count_label.text = f"Seats selected: {len(entries)} / {selection.max_selectable}"
        self._total_label.text = f"Total: ${selection.get_total_price():,.2f}"
        self._entries_label.text = "\n".join(
            f"{entry.section.label} row {entry.row.index} seat {entry.seat.column}  ${entry.price:,.2f}"
            for entry in entries
        )

    def _set_status(self, text: str) -> None:
        self._status_text = text
        self._status_label.text = text

    def _toggle_heat_map(self) -> None:
        self.engine.act("TOGGLE_HEAT_MAP")
        self._heat_button.set_active(self.engine.heat_map)

    def _clear_selection(self) -> None:
        self.engine.act("CLEAR_SELECTION")
        self._set_status("")

    def _set_adjacent_count(self, count: int) -> None:
        self._adjacent_count = max(1, min(count, self.engine.selection.max_selectable))
        plural = "s" if self._adjacent_count != 1 else ""
        self._adjacent_label.text = f"Find adjacent: {self._adjacent_count} seat{plural}"

    def _find_adjacent(self) -> None:
        found = self.engine.act("SELECT_ADJACENT", {"count": self._adjacent_count})
        if found:
            first = found[0]
            self._set_status(
                f"Found {len(found)} together in {first.section.label} row {first.row.index}"
            )
        else:
            self._set_status(f"No {self._adjacent_count} adjacent seats available")


_KEY_NAMES: dict[int, str] = {
    key.UP: "up",
    key.DOWN: "down",
    key.LEFT: "left",
    key.RIGHT: "right",
    key.ENTER: "enter",
    key.RETURN: "enter",
    key.SPACE: "space",
    key.ESCAPE: "escape",
    key._0: "0",
    key.NUM_0: "0",
    key.EQUAL: "=",
    key.PLUS: "+",
    key.NUM_ADD: "+",
    key.MINUS: "-",
    key.NUM_SUBTRACT: "-",
}


def _describe_seat(seat_id: str, section_label: str, row_index: int, status: str) -> str:
    return f"{seat_id}: {section_label}, row {row_index} ({status})"


def _point_in_rect(x: float, y: float, rect: tuple[float, float, float, float]) -> bool:
    rx, ry, rw, rh = rect
    return rx <= x <= (rx + rw) and ry <= y <= (ry + rh)


def run(layout_path: str | Path, config: AppConfig | None = None) -> None:
    run_dir = next_run_dir(Path("runs"))
    open_run_log(run_dir)

    engine = SeatingEngine(config)
    dump_effective_config(run_dir, config_to_dict(engine.config))
    engine.load_layout_file(layout_path)
    _app = SeatingGui(engine)
    pyglet.app.run()
