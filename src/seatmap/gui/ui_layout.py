from __future__ import annotations

import pyglet


class SidebarLayout:
    """Stacks sidebar widgets top-down from ``y_top``."""

    def __init__(
        self,
        *,
        x: float,
        y_top: float,
        width: float,
        padding: float = 12,
        spacing: float = 10,
    ) -> None:
        self.x = x + padding
        self.y_top = y_top - padding
        self.width = max(0.0, width - 2 * padding)
        self.spacing = spacing
        self._cursor = self.y_top

    def add_label(
        self,
        text: str,
        *,
        font_size: int,
        color: tuple[int, int, int, int],
        batch: pyglet.graphics.Batch,
        multiline: bool = False,
        height: float | None = None,
    ) -> pyglet.text.Label:
        label = pyglet.text.Label(
            text,
            x=self.x,
            y=self._cursor,
            width=int(self.width) if multiline else None,
            multiline=multiline,
            anchor_x="left",
            anchor_y="top",
            font_size=font_size,
            color=color,
            batch=batch,
        )
        used = height if height is not None else max(label.content_height, float(font_size))
        self._cursor -= used + self.spacing
        return label

    def add_button_row(self, count: int, height: float, spacing: float = 6) -> list[tuple[float, float, float, float]]:
        count = max(1, count)
        button_w = (self.width - spacing * (count - 1)) / count
        y = self._cursor - height
        bounds = [(self.x + i * (button_w + spacing), y, button_w, height) for i in range(count)]
        self._cursor -= height + self.spacing
        return bounds

    def add_spacer(self, height: float) -> None:
        self._cursor -= max(0.0, height)
