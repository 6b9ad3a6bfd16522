from __future__ import annotations

from typing import Any, Callable


class FrameLoop:
    """Repeating per-frame callback with an explicit start/stop handle.

    ``clock`` only needs ``schedule_interval`` and ``unschedule``; it
    defaults to ``pyglet.clock``. Usable as a context manager so the
    schedule is released when the owning window goes away.
    """

    def __init__(self, tick: Callable[[float], None], fps: float = 60.0, clock: Any = None) -> None:
        if fps <= 0:
            raise ValueError("fps must be > 0")
        self._tick = tick
        self.interval = 1.0 / fps
        self._clock = clock
        self.running = False

    def _get_clock(self):
        if self._clock is None:
            import pyglet

            self._clock = pyglet.clock
        return self._clock

    def start(self) -> "FrameLoop":
        if not self.running:
            self._get_clock().schedule_interval(self._tick, self.interval)
            self.running = True
        return self

    def stop(self) -> None:
        if self.running:
            self._get_clock().unschedule(self._tick)
            self.running = False

    def __enter__(self) -> "FrameLoop":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
