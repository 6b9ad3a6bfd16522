from __future__ import annotations

from typing import Iterable

from seatmap.core.model.layout import Layout, Row, Seat, Section


def make_seat(
    seat_id: str,
    column: int,
    *,
    x: float | None = None,
    y: float = 0.0,
    tier: int = 1,
    status: str = "available",
) -> Seat:
    return Seat(
        id=seat_id,
        column=int(column),
        x=float(column * 20 if x is None else x),
        y=float(y),
        tier=int(tier),
        status=status,
    )


def make_row(index: int, seats: Iterable[Seat]) -> Row:
    return Row(index=int(index), seats=tuple(seats))


def make_section(
    section_id: str,
    rows: Iterable[Row],
    *,
    origin: tuple[float, float] = (0.0, 0.0),
    label: str | None = None,
) -> Section:
    return Section(
        id=section_id,
        label=label or section_id,
        origin_x=float(origin[0]),
        origin_y=float(origin[1]),
        scale=1.0,
        rows=tuple(rows),
    )


def make_layout(sections: Iterable[Section], *, layout_id: str = "test-venue") -> Layout:
    return Layout(id=layout_id, label="Test Venue", width=1000, height=800, sections=tuple(sections))


def single_row_layout(statuses: Iterable[str], *, prefix: str = "A", tier: int = 1) -> Layout:
    """One section, one row; seat i (1-based) sits at column i."""
    seats = [
        make_seat(f"{prefix}{col}", col, y=100.0, tier=tier, status=status)
        for col, status in enumerate(statuses, start=1)
    ]
    return make_layout([make_section("orch", [make_row(0, seats)])])


def layout_document(**overrides) -> dict:
    doc = {
        "id": "venue-1",
        "label": "Test Venue",
        "canvasExtent": {"width": 1000, "height": 800},
        "sections": [
            {
                "id": "orch",
                "label": "Orchestra",
                "originOffset": {"x": 10, "y": 20, "scale": 1},
                "rows": [
                    {
                        "index": 0,
                        "entities": [
                            {"id": "A1", "column": 1, "x": 100, "y": 200, "tier": 1, "status": "available"},
                            {"id": "A2", "column": 2, "x": 120, "y": 200, "tier": 1, "status": "available"},
                            {"id": "A3", "column": 3, "x": 140, "y": 200, "tier": 1, "status": "sold"},
                        ],
                    },
                    {
                        "index": 1,
                        "entities": [
                            {"id": "B1", "column": 1, "x": 100, "y": 220, "tier": 2, "status": "available"},
                        ],
                    },
                ],
            }
        ],
    }
    doc.update(overrides)
    return doc
