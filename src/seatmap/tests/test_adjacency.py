from seatmap.core.model.tiers import DEFAULT_PRICE_TIERS
from seatmap.core.rules.adjacency import find_adjacent
from seatmap.testing.layouts import make_layout, make_row, make_seat, make_section, single_row_layout


def _ids(result) -> list[str]:
    return [entry.seat.id for entry in result]


def _find(layout, count, selected=()):
    return find_adjacent(layout, count, set(selected), DEFAULT_PRICE_TIERS)


def test_first_window_in_row_wins() -> None:
    layout = single_row_layout(["available"] * 3)
    assert _ids(_find(layout, 2)) == ["A1", "A2"]


def test_selected_seat_breaks_runs() -> None:
    layout = single_row_layout(["available"] * 3)
    assert _find(layout, 3, selected={"A2"}) == []
    assert _find(layout, 2, selected={"A2"}) == []


def test_result_is_consecutive_available_and_unselected() -> None:
    layout = single_row_layout(["available", "sold", "available", "available", "available", "available"])
    result = _find(layout, 3, selected={"A3"})
    assert _ids(result) == ["A4", "A5", "A6"]
    columns = [entry.seat.column for entry in result]
    assert columns == list(range(columns[0], columns[0] + 3))
    assert all(entry.seat.status == "available" for entry in result)


def test_gaps_in_column_numbers_are_not_adjacent() -> None:
    seats = [make_seat("S1", 1), make_seat("S3", 3), make_seat("S4", 4)]
    layout = make_layout([make_section("s", [make_row(0, seats)])])
    assert _ids(_find(layout, 2)) == ["S3", "S4"]
    assert _find(layout, 3) == []


def test_columns_are_sorted_before_scanning() -> None:
    seats = [make_seat("C3", 3), make_seat("C1", 1), make_seat("C2", 2)]
    layout = make_layout([make_section("s", [make_row(0, seats)])])
    assert _ids(_find(layout, 3)) == ["C1", "C2", "C3"]


def test_runs_never_span_rows() -> None:
    row_a = make_row(0, [make_seat("A1", 1), make_seat("A2", 2, status="sold")])
    row_b = make_row(1, [make_seat("B2", 2), make_seat("B3", 3)])
    layout = make_layout([make_section("s", [row_a, row_b])])
    assert _ids(_find(layout, 2)) == ["B2", "B3"]


def test_sections_are_searched_in_order() -> None:
    first = make_section("first", [make_row(0, [make_seat("F1", 1)])])
    second = make_section("second", [make_row(0, [make_seat("S1", 1), make_seat("S2", 2)])])
    third = make_section("third", [make_row(0, [make_seat("T1", 1), make_seat("T2", 2)])])
    layout = make_layout([first, second, third])
    result = _find(layout, 2)
    assert _ids(result) == ["S1", "S2"]
    assert {entry.section.id for entry in result} == {"second"}


def test_prices_come_from_tier_table() -> None:
    layout = single_row_layout(["available"] * 2, tier=3)
    assert [entry.price for entry in _find(layout, 2)] == [75, 75]


def test_non_positive_count_or_missing_layout_is_empty() -> None:
    layout = single_row_layout(["available"] * 3)
    assert _find(layout, 0) == []
    assert _find(layout, -2) == []
    assert _find(None, 2) == []


def test_count_larger_than_any_row_is_empty() -> None:
    layout = single_row_layout(["available"] * 3)
    assert _find(layout, 4) == []
