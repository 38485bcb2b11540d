import pytest

from table_model import Cell, ColumnSpec, RowMeta, TableState, selected_cell, selected_row_meta


def _state(cell_rows, rows=None, row_cursor=0):
    specs = [ColumnSpec("id"), ColumnSpec("name"), ColumnSpec("cost")]
    return TableState(name="t", specs=specs, cell_rows=cell_rows, rows=rows or [], row_cursor=row_cursor)


ROWS = [
    [Cell("1"), Cell("rent"), Cell("1200")],
    [Cell("2"), Cell("water")],  # short row
]


def test_selected_cell_on_the_cursor_row():
    state = _state(ROWS, row_cursor=1)
    assert selected_cell(state, 1).text == "water"


@pytest.mark.parametrize(
    "cell_rows, row_cursor, col",
    [
        ([], 0, 0),
        (ROWS, -1, 0),
        (ROWS, 2, 0),
        (ROWS, 1, 2),  # past the end of a short row
        (ROWS, 0, -1),
    ],
)
def test_selected_cell_out_of_range_is_none(cell_rows, row_cursor, col):
    assert selected_cell(_state(cell_rows, row_cursor=row_cursor), col) is None


def test_selected_row_meta():
    metas = [RowMeta(7), RowMeta(9)]
    assert selected_row_meta(_state(ROWS, metas, row_cursor=1)).id == 9


@pytest.mark.parametrize("row_cursor", [-1, 2, 5])
def test_selected_row_meta_out_of_range_is_none(row_cursor):
    metas = [RowMeta(7), RowMeta(9)]
    assert selected_row_meta(_state(ROWS, metas, row_cursor=row_cursor)) is None


def test_selected_row_meta_without_rows_is_none():
    assert selected_row_meta(_state([])) is None
