from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping

from ..model.tiers import PriceTier


ColorRule = Literal["selected", "focused", "heat_map", "status"]

STATUS_COLORS: dict[str, str] = {
    "available": "#10b981",
    "reserved": "#f59e0b",
    "sold": "#ef4444",
    "held": "#8b5cf6",
}
SELECTED_COLOR = "#3b82f6"
FOCUSED_COLOR = "#1d4ed8"
FOCUS_OUTLINE_COLOR = "#ffffff"


@dataclass(frozen=True, slots=True)
class ResolvedColor:
    rule: ColorRule
    color: str


def resolve_seat_color(
    status: str,
    tier: int,
    *,
    selected: bool,
    focused: bool,
    heat_map: bool,
    tiers: Mapping[int, PriceTier],
) -> ResolvedColor:
    """Pick the single display color of a seat.

    Precedence is selected > focused > heat-map tier color > status color.
    A tier missing from ``tiers`` falls through to the status color.
    """
    if selected:
        return ResolvedColor("selected", SELECTED_COLOR)
    if focused:
        return ResolvedColor("focused", FOCUSED_COLOR)
    if heat_map:
        entry = tiers.get(tier)
        if entry is not None:
            return ResolvedColor("heat_map", entry.color)
    return ResolvedColor("status", STATUS_COLORS.get(status, STATUS_COLORS["available"]))


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    value = color.lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    if len(value) != 6:
        raise ValueError(f"Unsupported color: {color!r}")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)
