import unittest

import pytest

from sort_engine import (
    apply_sorts,
    clear_sorts,
    compare_cells,
    compare_dates,
    compare_money,
    compare_numeric,
    compare_strings,
    sort_indicator,
    sort_summary,
    toggle_sort,
    with_id_tiebreaker,
)
from table_model import Cell, CellKind, ColumnSpec, RowMeta, SortDir, SortEntry, TableState


def _state(columns, rows):
    """``columns`` is a list of ``(title, kind)``; the first column holds ids."""
    specs = [ColumnSpec(title, kind) for title, kind in columns]
    cell_rows = [
        [Cell(v, kind) for v, (_, kind) in zip(row, columns)]
        for row in rows
    ]
    metas = []
    for i, row in enumerate(rows):
        try:
            metas.append(RowMeta(int(row[0])))
        except (TypeError, ValueError):
            metas.append(RowMeta(i))
    return TableState(name="t", specs=specs, cell_rows=cell_rows, rows=metas)


def _column(state, col):
    return [row[col].value for row in state.cell_rows]


ID = ("id", CellKind.NUMERIC)
NAME = ("name", CellKind.TEXT)


class ToggleSortTests(unittest.TestCase):
    def test_three_toggles_cycle_back_to_unsorted(self):
        state = _state([ID, NAME], [["1", "a"]])
        toggle_sort(state, 1)
        self.assertEqual(state.sorts, [SortEntry(1, SortDir.ASC)])
        toggle_sort(state, 1)
        self.assertEqual(state.sorts, [SortEntry(1, SortDir.DESC)])
        toggle_sort(state, 1)
        self.assertEqual(state.sorts, [])

    def test_new_columns_join_at_the_lowest_priority(self):
        state = _state([ID, NAME, ("city", CellKind.TEXT)], [["1", "a", "x"]])
        toggle_sort(state, 2)
        toggle_sort(state, 1)
        toggle_sort(state, 2)
        self.assertEqual(state.sorts, [SortEntry(2, SortDir.DESC), SortEntry(1, SortDir.ASC)])

    def test_clear_sorts(self):
        state = _state([ID, NAME], [["1", "a"]])
        toggle_sort(state, 1)
        clear_sorts(state)
        self.assertEqual(state.sorts, [])

    def test_id_tiebreaker_is_added_once(self):
        self.assertEqual(with_id_tiebreaker([SortEntry(1)]), [SortEntry(1), SortEntry(0)])
        self.assertEqual(with_id_tiebreaker([SortEntry(0, SortDir.DESC)]), [SortEntry(0, SortDir.DESC)])

    def test_indicators_show_priority_only_for_multiple_keys(self):
        self.assertEqual(sort_indicator([SortEntry(1)], 1), "▲")
        self.assertEqual(sort_indicator([SortEntry(1, SortDir.DESC)], 1), "▼")
        two = [SortEntry(2, SortDir.DESC), SortEntry(1)]
        self.assertEqual(sort_indicator(two, 2), "▼1")
        self.assertEqual(sort_indicator(two, 1), "▲2")
        self.assertEqual(sort_indicator(two, 0), "")

    def test_sort_summary_lists_titles_in_priority_order(self):
        state = _state([ID, NAME, ("city", CellKind.TEXT)], [["1", "a", "x"]])
        state.sorts = [SortEntry(2, SortDir.DESC), SortEntry(1)]
        self.assertEqual(sort_summary(state), "city▼, name▲")


class ApplySortsTests(unittest.TestCase):
    def test_empty_values_sort_last_in_both_directions(self):
        rows = [["1", "b"], ["2", ""], ["3", "a"], ["4", None]]
        state = _state([ID, NAME], rows)
        state.sorts = [SortEntry(1)]
        apply_sorts(state)
        self.assertEqual(_column(state, 0), ["3", "1", "2", "4"])

        state.sorts = [SortEntry(1, SortDir.DESC)]
        apply_sorts(state)
        self.assertEqual(_column(state, 0), ["1", "3", "2", "4"])

    def test_rows_with_equal_keys_keep_their_order(self):
        label = ("label", CellKind.TEXT)
        rows = [["7", "b", "1"], ["7", "a", "2"], ["7", "b", "3"], ["7", "a", "4"]]
        state = _state([ID, NAME, label], rows)
        state.sorts = [SortEntry(1)]
        apply_sorts(state)
        self.assertEqual(_column(state, 2), ["2", "4", "1", "3"])

    def test_ties_fall_back_to_id_order(self):
        rows = [["3", "x"], ["1", "x"], ["2", "x"]]
        state = _state([ID, NAME], rows)
        state.sorts = [SortEntry(1)]
        apply_sorts(state)
        self.assertEqual(_column(state, 0), ["1", "2", "3"])

    def test_clearing_sorts_restores_id_order(self):
        rows = [["1", "c"], ["2", "a"], ["3", "b"]]
        state = _state([ID, NAME], rows)
        state.sorts = [SortEntry(1)]
        apply_sorts(state)
        clear_sorts(state)
        apply_sorts(state)
        self.assertEqual(_column(state, 0), ["1", "2", "3"])

    def test_ids_compare_numerically(self):
        rows = [["10", "a"], ["9", "b"], ["100", "c"]]
        state = _state([ID, NAME], rows)
        apply_sorts(state)
        self.assertEqual(_column(state, 0), ["9", "10", "100"])

    def test_money_sorts_by_amount(self):
        cost = ("cost", CellKind.MONEY)
        rows = [["1", "$950.00"], ["2", "$1,200.00"], ["3", "$12.50"]]
        state = _state([ID, cost], rows)
        state.sorts = [SortEntry(1)]
        apply_sorts(state)
        self.assertEqual(_column(state, 1), ["$12.50", "$950.00", "$1,200.00"])

    def test_dates_sort_descending(self):
        due = ("due", CellKind.DATE)
        rows = [["1", "2024-01-05"], ["2", "2023-12-31"], ["3", "2024-03-01"]]
        state = _state([ID, due], rows)
        state.sorts = [SortEntry(1, SortDir.DESC)]
        apply_sorts(state)
        self.assertEqual(_column(state, 1), ["2024-03-01", "2024-01-05", "2023-12-31"])

    def test_secondary_key_breaks_primary_ties(self):
        city = ("city", CellKind.TEXT)
        rows = [["1", "b", "y"], ["2", "a", "z"], ["3", "b", "x"]]
        state = _state([ID, NAME, city], rows)
        state.sorts = [SortEntry(1), SortEntry(2, SortDir.DESC)]
        apply_sorts(state)
        self.assertEqual(_column(state, 0), ["2", "1", "3"])

    def test_cursor_and_row_metadata_follow_their_row(self):
        rows = [["1", "c"], ["2", "b"], ["3", "a"]]
        state = _state([ID, NAME], rows)
        state.row_cursor = 2
        state.sorts = [SortEntry(1)]
        apply_sorts(state)
        self.assertEqual(state.row_cursor, 0)
        self.assertEqual([m.id for m in state.rows], [3, 2, 1])


@pytest.mark.parametrize(
    "fn, a, b, expected",
    [
        (compare_strings, "apple", "Banana", -1),
        (compare_strings, "Same", "same", 0),
        (compare_money, "$1,200.00", "$950.00", 1),
        (compare_money, "-$5.00", "$1.00", -1),
        (compare_money, "n/a", "$1.00", 1),
        (compare_dates, "2024-01-05", "2023-12-31", 1),
        (compare_dates, "not a date", "2024-01-01", 1),
        (compare_numeric, "10", "9", 1),
        (compare_numeric, "2.5", "2.50", 0),
        (compare_numeric, "abc", "9", 1),
    ],
)
def test_comparators(fn, a, b, expected):
    assert fn(a, b) == expected


def test_compare_cells_dispatches_on_kind():
    assert compare_cells(CellKind.TEXT, "10", "9") == -1
    assert compare_cells(CellKind.REFERENCE, "10", "9") == 1
    assert compare_cells(CellKind.DRILLDOWN, "10", "9") == 1
    assert compare_cells(CellKind.NOTES, "x", "x") == 0


@pytest.mark.parametrize(
    "kind, values",
    [
        (CellKind.MONEY, ["$950.00", "n/a", "$1,200.00", "-$5.00", "$12.50"]),
        (CellKind.DATE, ["2024-01-05", "soon", "2023-12-31", "2024-01-04"]),
        (CellKind.NUMERIC, ["10", "9", "abc", "2.5", "100"]),
        (CellKind.TEXT, ["pear", "Apple", "banana", "10", "9"]),
    ],
)
def test_sorted_rows_agree_with_the_pairwise_comparison(kind, values):
    rows = [[str(i + 1), v] for i, v in enumerate(values)]
    state = _state([("id", CellKind.NUMERIC), ("v", kind)], rows)
    state.sorts = [SortEntry(1)]

    apply_sorts(state)

    ordered = _column(state, 1)
    for a, b in zip(ordered, ordered[1:]):
        assert compare_cells(kind, a, b) <= 0
