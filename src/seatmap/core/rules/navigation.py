from __future__ import annotations

from typing import Literal

from ..model.dataset import SeatDataset


Direction = Literal["up", "down", "left", "right"]


def next_seat_id(dataset: SeatDataset, focused_id: str | None, direction: Direction) -> str | None:
    """Seat id that keyboard focus moves to, or None when there is nowhere to go.

    Left/right step one column within the row; up/down move to the row
    whose index is one lower/higher in the same section, same column.
    """
    current = dataset.get(focused_id)
    if current is None:
        return None
    column = current.seat.column

    if direction in ("left", "right"):
        target_col = column - 1 if direction == "left" else column + 1
        for seat in current.row.seats:
            if seat.column == target_col:
                return seat.id
        return None

    if direction in ("up", "down"):
        target_index = current.row.index - 1 if direction == "up" else current.row.index + 1
        for row in current.section.rows:
            if row.index != target_index:
                continue
            for seat in row.seats:
                if seat.column == column:
                    return seat.id
            return None
        return None

    raise ValueError(f"Unknown direction={direction!r}")
