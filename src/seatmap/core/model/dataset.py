from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .layout import Layout, Row, Seat, Section


@dataclass(frozen=True, slots=True)
class SeatRecord:
    seat: Seat
    section: Section
    row: Row
    x: float
    y: float

    @property
    def id(self) -> str:
        return self.seat.id


class SeatDataset:
    """Flattened seats of one layout with world positions precomputed.

    Records keep layout order (section, row, insertion); ``xs``/``ys``
    are parallel float arrays used by culling and hit testing.
    """

    def __init__(self, records: list[SeatRecord]) -> None:
        self.records: tuple[SeatRecord, ...] = tuple(records)
        self.xs = np.fromiter((r.x for r in self.records), dtype=np.float64, count=len(self.records))
        self.ys = np.fromiter((r.y for r in self.records), dtype=np.float64, count=len(self.records))
        self._index_by_id = {r.id: i for i, r in enumerate(self.records)}

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def index_of(self, seat_id: str) -> int | None:
        return self._index_by_id.get(seat_id)

    def get(self, seat_id: str | None) -> SeatRecord | None:
        if seat_id is None:
            return None
        idx = self._index_by_id.get(seat_id)
        if idx is None:
            return None
        return self.records[idx]


EMPTY_DATASET = SeatDataset([])


def build_dataset(layout: Layout) -> SeatDataset:
    records: list[SeatRecord] = []
    for section in layout.sections:
        for row in section.rows:
            for seat in row.seats:
                records.append(
                    SeatRecord(
                        seat=seat,
                        section=section,
                        row=row,
                        x=seat.x + section.origin_x,
                        y=seat.y + section.origin_y,
                    )
                )
    return SeatDataset(records)
