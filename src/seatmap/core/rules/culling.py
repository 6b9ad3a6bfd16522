from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..camera import Camera
from ..model.dataset import SeatDataset


@dataclass(frozen=True, slots=True)
class WorldRect:
    left: float
    top: float
    right: float
    bottom: float

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom


def expanded_view_rect(camera: Camera, surface_width: float, surface_height: float, buffer: float) -> WorldRect:
    """World-space rectangle covering the surface plus ``buffer`` surface units per side."""
    left, top = camera.to_world(-buffer, -buffer)
    right, bottom = camera.to_world(surface_width + buffer, surface_height + buffer)
    return WorldRect(left=left, top=top, right=right, bottom=bottom)


def visible_indices(dataset: SeatDataset, rect: WorldRect) -> np.ndarray:
    # linear in dataset size, no spatial index
    xs = dataset.xs
    ys = dataset.ys
    mask = (xs >= rect.left) & (xs <= rect.right) & (ys >= rect.top) & (ys <= rect.bottom)
    return np.flatnonzero(mask)
