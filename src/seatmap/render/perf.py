from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


PerfLevel = Literal["good", "warning", "critical"]

TARGET_FPS = 60
GOOD_FPS = 55
WARNING_FPS = 30
TARGET_RENDER_MS = 16.0
WARNING_RENDER_MS = 33.0


@dataclass(slots=True)
class FrameStats:
    """Frames-per-second over one-second windows plus last render time."""
    window_sec: float = 1.0
    fps: int = 0
    render_ms: float = 0.0
    frames: int = 0
    _window_frames: int = 0
    _window_elapsed: float = 0.0

    def record(self, dt: float, render_ms: float) -> None:
        self.frames += 1
        self.render_ms = round(max(0.0, render_ms), 2)
        self._window_frames += 1
        self._window_elapsed += max(0.0, dt)
        if self._window_elapsed >= self.window_sec:
            self.fps = int(round(self._window_frames / self._window_elapsed))
            self._window_frames = 0
            self._window_elapsed = 0.0

    def fps_level(self) -> PerfLevel:
        if self.fps >= GOOD_FPS:
            return "good"
        if self.fps >= WARNING_FPS:
            return "warning"
        return "critical"

    def render_level(self) -> PerfLevel:
        if self.render_ms <= TARGET_RENDER_MS:
            return "good"
        if self.render_ms <= WARNING_RENDER_MS:
            return "warning"
        return "critical"

    def fps_text(self) -> str:
        return f"FPS: {self.fps} (target {TARGET_FPS})"

    def render_text(self) -> str:
        return f"Render: {self.render_ms}ms (target <{TARGET_RENDER_MS:g}ms)"
