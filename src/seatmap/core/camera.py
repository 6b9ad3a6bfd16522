from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Camera:
    """Zoom and pan of the draw surface.

    Surface coordinates have their origin at the top-left of the draw
    surface; ``surface = world * zoom + pan``.
    """
    min_zoom: float = 0.5
    max_zoom: float = 3.0
    zoom_step: float = 0.1
    zoom_step_large: float = 0.2
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0

    def __post_init__(self) -> None:
        if self.min_zoom <= 0 or self.min_zoom > self.max_zoom:
            raise ValueError(f"invalid zoom bounds [{self.min_zoom}, {self.max_zoom}]")
        self.zoom = self._clamp(self.zoom)

    def _clamp(self, zoom: float) -> float:
        return max(self.min_zoom, min(self.max_zoom, zoom))

    def zoom_by(self, delta: float) -> float:
        # 1.0 -> 1.2 -> 1.0 must round-trip exactly
        self.zoom = round(self._clamp(self.zoom + delta), 6)
        return self.zoom

    def zoom_in(self) -> float:
        return self.zoom_by(self.zoom_step_large)

    def zoom_out(self) -> float:
        return self.zoom_by(-self.zoom_step_large)

    def can_zoom_in(self) -> bool:
        return self.zoom < self.max_zoom

    def can_zoom_out(self) -> bool:
        return self.zoom > self.min_zoom

    def pan_by(self, dx: float, dy: float) -> None:
        self.pan_x += dx
        self.pan_y += dy

    def reset_view(self) -> None:
        self.zoom = self._clamp(1.0)
        self.pan_x = 0.0
        self.pan_y = 0.0

    def to_world(self, surface_x: float, surface_y: float) -> tuple[float, float]:
        return (surface_x - self.pan_x) / self.zoom, (surface_y - self.pan_y) / self.zoom

    def to_surface(self, world_x: float, world_y: float) -> tuple[float, float]:
        return world_x * self.zoom + self.pan_x, world_y * self.zoom + self.pan_y
