from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


LodTier = Literal["ultra", "low", "full"]


@dataclass(frozen=True, slots=True)
class SizingRules:
    seat_size: float = 12.0
    min_seat_size: float = 6.0
    ultra_shrink: float = 0.7
    lod_low_zoom: float = 0.8
    lod_ultra_zoom: float = 0.5


DEFAULT_SIZING = SizingRules()


@dataclass(frozen=True, slots=True)
class SeatGeometry:
    tier: LodTier
    size: float
    corner_radius: float

    @property
    def rounded(self) -> bool:
        return self.tier == "full"


def lod_tier(zoom: float, rules: SizingRules = DEFAULT_SIZING) -> LodTier:
    if zoom < rules.lod_ultra_zoom:
        return "ultra"
    if zoom < rules.lod_low_zoom:
        return "low"
    return "full"


def seat_geometry(zoom: float, rules: SizingRules = DEFAULT_SIZING) -> SeatGeometry:
    """Drawn size of one seat at ``zoom``, in world units.

    Both the renderer and the hit tester size seats through this function,
    so the clickable square is always the drawn square.
    """
    tier = lod_tier(zoom, rules)
    size = max(rules.seat_size * zoom, rules.min_seat_size)
    if tier == "ultra":
        size = max(size * rules.ultra_shrink, rules.min_seat_size)
    radius = max(2.0 * zoom, 1.0) if tier == "full" else 0.0
    return SeatGeometry(tier=tier, size=size, corner_radius=radius)


def seat_hit_size(zoom: float, rules: SizingRules = DEFAULT_SIZING) -> float:
    return seat_geometry(zoom, rules).size


def focus_outline_box(
    x: float,
    y: float,
    zoom: float,
    rules: SizingRules = DEFAULT_SIZING,
    *,
    padding: float = 2.0,
) -> tuple[float, float, float, float]:
    """Square outline around a seat centred at (x, y): left, top, width, height.

    The outline stays square at every LOD tier, including when the seat
    itself is drawn rounded.
    """
    geometry = seat_geometry(zoom, rules)
    size = geometry.size + 2 * padding
    return x - size / 2, y - size / 2, size, size
