import logging
from functools import cmp_to_key

import pandas as pd

from money import parse_cents
from table_model import DATE_FORMAT, CellKind, SortDir, SortEntry

logger = logging.getLogger(__name__)

# identifier column; always the implicit last sort key
ID_COLUMN = 0

def toggle_sort(state, col: int):
    """Cycle ``col`` through ascending -> descending -> removed.

    A column not yet in the stack is appended as ascending, at the lowest
    priority.
    """
    for i, entry in enumerate(state.sorts):
        if entry.col == col:
            if entry.dir == SortDir.ASC:
                state.sorts[i] = SortEntry(col, SortDir.DESC)
            else:
                del state.sorts[i]
            return
    state.sorts.append(SortEntry(col, SortDir.ASC))


def clear_sorts(state):
    state.sorts = []


def with_id_tiebreaker(sorts) -> list:
    if any(e.col == ID_COLUMN for e in sorts):
        return list(sorts)
    return list(sorts) + [SortEntry(ID_COLUMN, SortDir.ASC)]


def compare_strings(a: str, b: str) -> int:
    la, lb = a.lower(), b.lower()
    return (la > lb) - (la < lb)


def _cmp(x, y) -> int:
    return (x > y) - (x < y)


def _parse_dates(values):
    parsed = pd.to_datetime(pd.Series(values, dtype="object"), format=DATE_FORMAT, errors="coerce")
    return [None if pd.isna(v) else v for v in parsed]


def _parse_numbers(values):
    parsed = pd.to_numeric(pd.Series(values, dtype="object"), errors="coerce")
    return [None if pd.isna(v) else float(v) for v in parsed]


def _parse_money(values):
    return [parse_cents(v) for v in values]


PARSERS = {
    CellKind.MONEY: _parse_money,
    CellKind.DATE: _parse_dates,
    CellKind.NUMERIC: _parse_numbers,
    CellKind.REFERENCE: _parse_numbers,
    CellKind.DRILLDOWN: _parse_numbers,
}


def _parse_column(kind, values):
    """Parsed sort keys for a column of texts, or None for kinds compared as text."""
    parser = PARSERS.get(kind)
    return parser(values) if parser else None


def _compare_texts(a: str, b: str, pa=None, pb=None) -> int:
    # falls back to text when either side failed to parse
    if a == b:
        return 0
    if pa is None or pb is None:
        return compare_strings(a, b)
    return _cmp(pa, pb)


def compare_cells(kind, a: str, b: str) -> int:
    """Three-way comparison of two non-empty cell texts by column kind."""
    parsed = _parse_column(kind, [a, b])
    if parsed is None:
        return _compare_texts(a, b)
    return _compare_texts(a, b, parsed[0], parsed[1])


def compare_money(a: str, b: str) -> int:
    return compare_cells(CellKind.MONEY, a, b)


def compare_dates(a: str, b: str) -> int:
    return compare_cells(CellKind.DATE, a, b)


def compare_numeric(a: str, b: str) -> int:
    return compare_cells(CellKind.NUMERIC, a, b)


def cell_value_at(state, row: int, col: int) -> str:
    if row < 0 or row >= len(state.cell_rows):
        return ""
    cells = state.cell_rows[row]
    if col < 0 or col >= len(cells):
        return ""
    return cells[col].text


def _column_kind(state, col: int):
    if 0 <= col < len(state.specs):
        return state.specs[col].kind
    return CellKind.TEXT


def _sort_keys(state, sorts):
    keys = []
    n = len(state.cell_rows)
    for entry in sorts:
        texts = [cell_value_at(state, r, entry.col) for r in range(n)]
        parsed = _parse_column(_column_kind(state, entry.col), texts)
        keys.append((entry, texts, parsed))
    return keys


def apply_sorts(state):
    """Stable multi-key sort of the rows in place.

    Empty cells always go last, whatever the direction. ``rows`` (the row
    metadata) is reordered along with ``cell_rows`` and the cursor stays on
    the row it was on.
    """
    if len(state.cell_rows) <= 1:
        return

    sorts = with_id_tiebreaker(state.sorts)
    keys = _sort_keys(state, sorts)
    logger.debug("sorting %s rows by %s", len(state.cell_rows), [(e.col, e.dir.value) for e in sorts])

    def compare(a, b):
        for entry, texts, parsed in keys:
            va, vb = texts[a], texts[b]
            if not va and not vb:
                continue
            if not va:
                return 1
            if not vb:
                return -1
            if parsed is None:
                c = _compare_texts(va, vb)
            else:
                c = _compare_texts(va, vb, parsed[a], parsed[b])
            if c == 0:
                continue
            return -c if entry.dir == SortDir.DESC else c
        return 0

    order = sorted(range(len(state.cell_rows)), key=cmp_to_key(compare))
    _reorder(state, order)


def _reorder(state, order):
    cursor_row = state.row_cursor
    state.cell_rows = [state.cell_rows[i] for i in order]
    if len(state.rows) == len(order):
        state.rows = [state.rows[i] for i in order]
    if 0 <= cursor_row < len(order):
        state.row_cursor = order.index(cursor_row)


def sort_indicator(sorts, col: int) -> str:
    """``▲``/``▼`` for a sorted column, with its priority when several keys are active."""
    for i, entry in enumerate(sorts):
        if entry.col == col:
            arrow = "▼" if entry.dir == SortDir.DESC else "▲"
            if len(sorts) == 1:
                return arrow
            return f"{arrow}{i + 1}"
    return ""


def sort_summary(state) -> str:
    parts = []
    for entry in state.sorts:
        if 0 <= entry.col < len(state.specs):
            arrow = "▼" if entry.dir == SortDir.DESC else "▲"
            parts.append(f"{state.specs[entry.col].title}{arrow}")
    return ", ".join(parts)
