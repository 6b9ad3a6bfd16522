from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import json
from typing import Any, Literal


SeatStatus = Literal["available", "reserved", "sold", "held"]
SEAT_STATUSES: tuple[str, ...] = ("available", "reserved", "sold", "held")


class LayoutError(ValueError):
    """Raised when a layout document cannot be read or fails validation."""


@dataclass(frozen=True, slots=True)
class Seat:
    id: str
    column: int
    x: float
    y: float
    tier: int
    status: SeatStatus


@dataclass(frozen=True, slots=True)
class Row:
    index: int
    seats: tuple[Seat, ...]


@dataclass(frozen=True, slots=True)
class Section:
    id: str
    label: str
    origin_x: float
    origin_y: float
    scale: float
    rows: tuple[Row, ...]


@dataclass(frozen=True, slots=True)
class Layout:
    id: str
    label: str
    width: int
    height: int
    sections: tuple[Section, ...]

    def seat_count(self) -> int:
        return sum(len(row.seats) for section in self.sections for row in section.rows)


def load_layout_json(path: str | Path) -> Layout:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise LayoutError(f"cannot read layout file {p}: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LayoutError(f"layout file {p} is not valid JSON: {exc}") from exc
    return parse_layout(data)


def parse_layout(data: Any) -> Layout:
    """Build a Layout from a decoded layout document.

    Keys from older venue exports (``venueId``, ``name``, ``map``,
    ``transform``, ``seats``, ``col``, ``priceTier``) are accepted as
    aliases of the current ones. Entity ids must be unique across the
    whole document.
    """
    if not isinstance(data, dict):
        raise LayoutError("layout root must be a JSON object")

    extent = _require_dict(data, "layout", "canvasExtent", "map")
    sections_raw = _require_list(data, "layout", "sections")

    seen_ids: set[str] = set()
    sections = tuple(
        _parse_section(raw, f"sections[{i}]", seen_ids) for i, raw in enumerate(sections_raw)
    )
    return Layout(
        id=str(_require(data, "layout", "id", "venueId")),
        label=str(_pick(data, "label", "name", default="")),
        width=_as_int(_require(extent, "canvasExtent", "width"), "canvasExtent.width"),
        height=_as_int(_require(extent, "canvasExtent", "height"), "canvasExtent.height"),
        sections=sections,
    )


def _parse_section(raw: Any, where: str, seen_ids: set[str]) -> Section:
    if not isinstance(raw, dict):
        raise LayoutError(f"{where} must be an object")
    offset = _pick(raw, "originOffset", "transform", default=None) or {}
    if not isinstance(offset, dict):
        raise LayoutError(f"{where}.originOffset must be an object")
    rows_raw = _require_list(raw, where, "rows")
    rows = tuple(
        _parse_row(row_raw, f"{where}.rows[{i}]", seen_ids) for i, row_raw in enumerate(rows_raw)
    )
    return Section(
        id=str(_require(raw, where, "id")),
        label=str(raw.get("label", "")),
        origin_x=_as_float(offset.get("x", 0.0), f"{where}.originOffset.x"),
        origin_y=_as_float(offset.get("y", 0.0), f"{where}.originOffset.y"),
        scale=_as_float(offset.get("scale", 1.0), f"{where}.originOffset.scale"),
        rows=rows,
    )


def _parse_row(raw: Any, where: str, seen_ids: set[str]) -> Row:
    if not isinstance(raw, dict):
        raise LayoutError(f"{where} must be an object")
    seats_raw = _require_list(raw, where, "entities", "seats")
    seats = tuple(
        _parse_seat(seat_raw, f"{where}.entities[{i}]", seen_ids) for i, seat_raw in enumerate(seats_raw)
    )
    return Row(index=_as_int(_require(raw, where, "index"), f"{where}.index"), seats=seats)


def _parse_seat(raw: Any, where: str, seen_ids: set[str]) -> Seat:
    if not isinstance(raw, dict):
        raise LayoutError(f"{where} must be an object")
    seat_id = str(_require(raw, where, "id"))
    if seat_id in seen_ids:
        raise LayoutError(f"{where}.id duplicates entity id {seat_id!r}")
    seen_ids.add(seat_id)

    column = _as_int(_require(raw, where, "column", "col"), f"{where}.column")
    if column < 1:
        raise LayoutError(f"{where}.column must be >= 1, got {column}")
    tier = _as_int(_require(raw, where, "tier", "priceTier"), f"{where}.tier")
    if tier < 1:
        raise LayoutError(f"{where}.tier must be a positive integer, got {tier}")
    status = _require(raw, where, "status")
    if status not in SEAT_STATUSES:
        raise LayoutError(f"{where}.status must be one of {', '.join(SEAT_STATUSES)}; got {status!r}")

    return Seat(
        id=seat_id,
        column=column,
        x=_as_float(_require(raw, where, "x"), f"{where}.x"),
        y=_as_float(_require(raw, where, "y"), f"{where}.y"),
        tier=tier,
        status=status,
    )


def _pick(raw: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return default


def _require(raw: dict[str, Any], where: str, *keys: str) -> Any:
    value = _pick(raw, *keys)
    if value is None:
        raise LayoutError(f"missing '{keys[0]}' in {where}")
    return value


def _require_dict(raw: dict[str, Any], where: str, *keys: str) -> dict[str, Any]:
    value = _require(raw, where, *keys)
    if not isinstance(value, dict):
        raise LayoutError(f"{where}.{keys[0]} must be an object")
    return value


def _require_list(raw: dict[str, Any], where: str, *keys: str) -> list[Any]:
    value = _require(raw, where, *keys)
    if not isinstance(value, list):
        raise LayoutError(f"{where}.{keys[0]} must be a list")
    return value


def _as_int(value: Any, where: str) -> int:
    if isinstance(value, bool):
        raise LayoutError(f"{where} must be an integer")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if not isinstance(value, int):
        raise LayoutError(f"{where} must be an integer")
    return value


def _as_float(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise LayoutError(f"{where} must be a number")
    return float(value)
