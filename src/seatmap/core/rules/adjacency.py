from __future__ import annotations

from typing import Container, Mapping

from ..model.layout import Layout
from ..model.tiers import PriceTier, price_for_tier
from .selection import SelectedSeat


def find_adjacent(
    layout: Layout | None,
    count: int,
    selected_ids: Container[str],
    price_tiers: Mapping[int, PriceTier],
) -> list[SelectedSeat]:
    """First run of ``count`` available, unselected seats with consecutive columns.

    Sections and rows are scanned in layout order; inside a row the
    candidate seats are sorted by column and the earliest window wins.
    Adjacency never crosses rows or gaps in column numbering. Returns an
    empty list when no row holds such a run; partial runs are never
    returned.
    """
    if layout is None or count <= 0:
        return []

    for section in layout.sections:
        for row in section.rows:
            free = sorted(
                (
                    seat
                    for seat in row.seats
                    if seat.status == "available" and seat.id not in selected_ids
                ),
                key=lambda seat: seat.column,
            )
            if len(free) < count:
                continue
            start = _first_consecutive_window(free, count)
            if start is None:
                continue
            return [
                SelectedSeat(
                    seat=seat,
                    section=section,
                    row=row,
                    price=price_for_tier(price_tiers, seat.tier),
                )
                for seat in free[start:start + count]
            ]
    return []


def _first_consecutive_window(seats, count: int) -> int | None:
    run_start = 0
    for i in range(1, len(seats) + 1):
        if i - run_start >= count:
            return run_start
        if i < len(seats) and seats[i].column != seats[i - 1].column + 1:
            run_start = i
    return None
