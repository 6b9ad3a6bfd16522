from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Mapping

from ..model.layout import Row, Seat, Section
from ..model.tiers import DEFAULT_PRICE_TIERS, PriceTier, price_for_tier


logger = logging.getLogger(__name__)

DEFAULT_MAX_SELECTABLE = 8

SelectionListener = Callable[[tuple["SelectedSeat", ...]], None]


@dataclass(frozen=True, slots=True)
class SelectedSeat:
    seat: Seat
    section: Section
    row: Row
    price: float


class SelectionStore:
    """Ordered, capacity-bounded set of selected seats.

    Every mutation goes through ``select_seat``, ``deselect_seat`` and
    ``clear_selection``. Blocked attempts (already selected, at capacity,
    seat not available, unknown id) leave the state untouched and return
    ``False``; they never raise.
    """

    def __init__(
        self,
        price_tiers: Mapping[int, PriceTier] | None = None,
        max_selectable: int = DEFAULT_MAX_SELECTABLE,
    ) -> None:
        if max_selectable < 1:
            raise ValueError("max_selectable must be >= 1")
        self.price_tiers: Mapping[int, PriceTier] = dict(price_tiers or DEFAULT_PRICE_TIERS)
        self.max_selectable = int(max_selectable)
        self._entries: list[SelectedSeat] = []
        self._ids: set[str] = set()
        self._listeners: list[SelectionListener] = []

    @property
    def entries(self) -> tuple[SelectedSeat, ...]:
        return tuple(self._entries)

    def selected_ids(self) -> frozenset[str]:
        return frozenset(self._ids)

    def __len__(self) -> int:
        return len(self._entries)

    def is_selected(self, seat_id: str) -> bool:
        return seat_id in self._ids

    def can_select_more(self) -> bool:
        return len(self._entries) < self.max_selectable

    def get_total_price(self) -> float:
        return sum(entry.price for entry in self._entries)

    def select_seat(self, seat: Seat, section: Section, row: Row) -> bool:
        if seat.id in self._ids:
            return False
        if not self.can_select_more():
            logger.debug("selection full (%s), ignoring %s", self.max_selectable, seat.id)
            return False
        if seat.status != "available":
            logger.debug("seat %s is %s, ignoring", seat.id, seat.status)
            return False
        price = price_for_tier(self.price_tiers, seat.tier)
        self._entries.append(SelectedSeat(seat=seat, section=section, row=row, price=price))
        self._ids.add(seat.id)
        self._notify()
        return True

    def deselect_seat(self, seat_id: str) -> bool:
        if seat_id not in self._ids:
            return False
        self._entries = [entry for entry in self._entries if entry.seat.id != seat_id]
        self._ids.discard(seat_id)
        self._notify()
        return True

    def clear_selection(self) -> None:
        had_entries = bool(self._entries)
        self._entries = []
        self._ids.clear()
        if had_entries:
            self._notify()

    def add_listener(self, listener: SelectionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def _notify(self) -> None:
        snapshot = self.entries
        for listener in list(self._listeners):
            listener(snapshot)
