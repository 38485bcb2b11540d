import logging

import pandas as pd

from column_visibility import first_visible_col, next_visible_col
from money import format_cents
from row_filter import apply_row_filter
from sort_engine import apply_sorts
from table_model import (
    DATE_FORMAT,
    Align,
    Cell,
    CellKind,
    ColumnSpec,
    RowMeta,
    SortEntry,
    TableState,
    selected_row_meta,
)
from viewport import update_viewport

logger = logging.getLogger(__name__)

ID_TITLE = "id"
REFERENCE_SUFFIX = "_id"
NOTES_MIN_LENGTH = 40
DEFAULT_MONEY_COLUMNS = ("amount", "cost", "price", "total", "budget")


def _is_id(name) -> bool:
    return str(name).strip().lower() == ID_TITLE


def _is_money_name(name, money_columns) -> bool:
    lowered = str(name).strip().lower()
    return any(hint.lower() in lowered for hint in money_columns)


def _format_number(v) -> str:
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def _column_kind(name, series, money_columns) -> CellKind:
    dtype = series.dtype
    if _is_id(name):
        return CellKind.NUMERIC
    if pd.api.types.is_datetime64_any_dtype(dtype):
        return CellKind.DATE
    if pd.api.types.is_bool_dtype(dtype):
        return CellKind.TEXT
    if _is_money_name(name, money_columns):
        return CellKind.MONEY
    if pd.api.types.is_numeric_dtype(dtype):
        if str(name).lower().endswith(REFERENCE_SUFFIX):
            return CellKind.REFERENCE
        return CellKind.NUMERIC
    lengths = series.dropna().astype(str).str.len()
    if len(lengths) and lengths.max() > NOTES_MIN_LENGTH:
        return CellKind.NOTES
    return CellKind.TEXT


def column_spec_for(name, series, money_columns=DEFAULT_MONEY_COLUMNS) -> ColumnSpec:
    title = str(name)
    kind = _column_kind(name, series, money_columns)
    if _is_id(name):
        return ColumnSpec(title, CellKind.NUMERIC, min=2, max=8, align=Align.RIGHT)
    if kind == CellKind.DATE:
        return ColumnSpec(title, kind, min=10, max=10)
    if kind == CellKind.MONEY:
        return ColumnSpec(title, kind, min=8, max=14, align=Align.RIGHT)
    if kind == CellKind.REFERENCE:
        link = title[: -len(REFERENCE_SUFFIX)] or title
        return ColumnSpec(title, kind, min=4, max=10, align=Align.RIGHT, link=link)
    if kind == CellKind.NUMERIC:
        return ColumnSpec(title, kind, min=4, max=12, align=Align.RIGHT)
    if kind == CellKind.NOTES:
        return ColumnSpec(title, kind, min=8, max=60, flex=True)
    return ColumnSpec(title, kind, min=6, max=40, flex=True)


def cell_text(value, kind: CellKind):
    """Display text for one frame value; None for pandas nulls."""
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    if kind == CellKind.DATE:
        return pd.Timestamp(value).strftime(DATE_FORMAT)
    if kind == CellKind.MONEY and pd.api.types.is_number(value) and not pd.api.types.is_bool(value):
        return format_cents(int(round(value * 100)))
    if pd.api.types.is_float(value):
        return _format_number(float(value))
    return str(value)


def with_id_column(df: pd.DataFrame) -> pd.DataFrame:
    """``df`` with an identifier column first, numbered from 1 when it has none."""
    id_cols = [c for c in df.columns if _is_id(c)]
    if id_cols:
        col = id_cols[0]
        return df[[col] + [c for c in df.columns if c != col]]
    out = df.copy()
    out.insert(0, ID_TITLE, range(1, len(df) + 1))
    return out


def _row_id(value, position: int) -> int:
    try:
        if pd.isna(value):
            return position
        return int(value)
    except (TypeError, ValueError):
        return position


def _build(df: pd.DataFrame, money_columns):
    df = with_id_column(df)
    specs = [column_spec_for(name, df[name], money_columns) for name in df.columns]
    cell_rows = []
    rows = []
    for position, values in enumerate(df.itertuples(index=False, name=None), start=1):
        cell_rows.append([Cell(cell_text(v, spec.kind), spec.kind) for v, spec in zip(values, specs)])
        rows.append(RowMeta(_row_id(values[0], position)))
    for row in cell_rows:
        for spec, cell in zip(specs, row):
            if spec.kind == CellKind.REFERENCE and not cell.is_null:
                cell.link_id = _row_id(cell.value, 0) or None
    return specs, cell_rows, rows


def table_from_frame(df: pd.DataFrame, name: str = "", money_columns=DEFAULT_MONEY_COLUMNS) -> TableState:
    specs, cell_rows, rows = _build(df, money_columns)
    state = TableState(
        name=name, specs=specs, cell_rows=cell_rows, rows=rows,
        full_cell_rows=list(cell_rows), full_rows=list(rows),
    )
    apply_sorts(state)
    logger.debug("table %r: %s columns, %s rows", name, len(specs), len(cell_rows))
    return state


def reload_table(state: TableState, df: pd.DataFrame, term_width: int, separator: str, fill: bool = False,
                 money_columns=DEFAULT_MONEY_COLUMNS) -> TableState:
    """Swap in fresh rows, keeping hidden columns, sorts, pins and the cursor row by title/id.

    Then re-filter, re-sort, re-project, re-clamp and re-window, in that order.
    """
    old_titles = [s.title for s in state.specs]
    hidden_titles = [old_titles[i] for i in state.hidden if i < len(old_titles)]
    sort_titles = [(old_titles[e.col], e.dir) for e in state.sorts if e.col < len(old_titles)]
    pin_titles = [(old_titles[c], v) for c, v in state.pins.items() if c < len(old_titles)]
    cursor_title = old_titles[state.col_cursor] if 0 <= state.col_cursor < len(old_titles) else None
    cursor_meta = selected_row_meta(state)
    cursor_id = cursor_meta.id if cursor_meta is not None else None

    specs, cell_rows, rows = _build(df, money_columns)
    index = {spec.title: i for i, spec in enumerate(specs)}
    state.specs = specs
    state.cell_rows = cell_rows
    state.rows = rows
    state.full_cell_rows = list(cell_rows)
    state.full_rows = list(rows)
    state.hidden = [index[t] for t in hidden_titles if t in index]
    state.sorts = [SortEntry(index[t], d) for t, d in sort_titles if t in index]
    state.pins = {index[t]: list(v) for t, v in pin_titles if t in index}
    if len(state.hidden) >= len(specs):
        state.hidden = state.hidden[:-1] if specs else []
    state.col_cursor = index.get(cursor_title, state.col_cursor)
    state.row_cursor = 0

    # 1. re-filter and re-sort
    apply_row_filter(state)
    if cursor_id is not None:
        for i, meta in enumerate(state.rows):
            if meta.id == cursor_id:
                state.row_cursor = i
                break
    # 2. re-project: the cursor must sit on a visible column
    state.clamp_cursor()
    if state.is_hidden(state.col_cursor):
        nxt = next_visible_col(state, state.col_cursor, True)
        if nxt == state.col_cursor:
            nxt = next_visible_col(state, state.col_cursor, False)
        state.col_cursor = nxt if not state.is_hidden(nxt) else first_visible_col(state)
    # 3. re-clamp and 4. re-window
    update_viewport(state, term_width, separator, fill=fill)
    return state
