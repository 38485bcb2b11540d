import dataclasses
import logging

from sort_engine import apply_sorts
from table_model import selected_cell, selected_row_meta

logger = logging.getLogger(__name__)

# empty cells pin under their own key so they never collide with real text
NULL_PIN = "\x00null"
NULL_PIN_MARK = "∅"


def pin_key(cell) -> str:
    if cell is None or cell.is_null:
        return NULL_PIN
    return cell.text.lower()


def _normalize(value: str) -> str:
    if value == NULL_PIN:
        return value
    return value.strip().lower()


def has_pins(state) -> bool:
    return bool(state.pins)


def toggle_pin(state, col: int, value: str) -> bool:
    """Pin ``value`` on ``col``, or unpin it if it already is.

    Returns True when the value ended up pinned. A column whose last value
    is unpinned is dropped from the pin set.
    """
    key = _normalize(value)
    values = state.pins.get(col)
    if values is None:
        state.pins[col] = [key]
        return True
    if key in values:
        values.remove(key)
        if not values:
            del state.pins[col]
        return False
    values.append(key)
    return True


def clear_pins(state):
    state.pins = {}
    state.filter_active = False
    state.filter_inverted = False


def clear_column_pins(state, col: int) -> bool:
    removed = state.pins.pop(col, None) is not None
    if not state.pins:
        state.filter_active = False
        state.filter_inverted = False
    return removed


def matches_pins(row, pins) -> bool:
    """Every pinned column must hold one of its pinned values."""
    for col, values in pins.items():
        if col >= len(row):
            return False
        if pin_key(row[col]) not in values:
            return False
    return True


def apply_row_filter(state):
    """Rebuild the shown rows from the full data, then re-sort them.

    With the filter active only matching rows stay (only the others when
    inverted). With pins but no active filter every row stays and the ones
    that would go are dimmed. While any pin exists, widths are measured on
    the full data so columns keep their size as rows come and go.
    """
    if state.full_cell_rows is None:
        state.full_cell_rows = list(state.cell_rows)
        state.full_rows = list(state.rows)
    full_cells = state.full_cell_rows
    full_meta = state.full_rows or []
    with_meta = len(full_meta) == len(full_cells)

    cursor = selected_row_meta(state)
    cursor_id = cursor.id if cursor is not None else None

    cells, metas = [], []
    for i, row in enumerate(full_cells):
        dimmed = False
        if state.pins:
            hit = matches_pins(row, state.pins) != state.filter_inverted
            if state.filter_active and not hit:
                continue
            dimmed = not hit
        cells.append(row)
        if with_meta:
            metas.append(dataclasses.replace(full_meta[i], dimmed=dimmed))

    state.cell_rows = cells
    state.rows = metas
    state.width_rows = full_cells if state.pins else None
    state.row_cursor = 0
    if cursor_id is not None:
        for i, meta in enumerate(metas):
            if meta.id == cursor_id:
                state.row_cursor = i
                break
    apply_sorts(state)
    state.clamp_cursor()
    logger.debug(
        "filter %s%s: %s of %s rows shown",
        "on" if state.filter_active else "preview",
        " inverted" if state.filter_inverted else "",
        len(cells),
        len(full_cells),
    )


def toggle_pin_at_cursor(state):
    """Pin the value under the cursor. None when there is no cell there."""
    cell = selected_cell(state, state.col_cursor)
    if cell is None:
        return None
    pinned = toggle_pin(state, state.col_cursor, pin_key(cell))
    apply_row_filter(state)
    return pinned


def toggle_filter(state) -> bool:
    # with no pins this only arms the filter for the next pin
    state.filter_active = not state.filter_active
    apply_row_filter(state)
    return state.filter_active


def toggle_invert(state) -> bool:
    state.filter_inverted = not state.filter_inverted
    apply_row_filter(state)
    return state.filter_inverted


def pin_summary(state) -> str:
    """``Status: plan, active · Vendor: bob's``"""
    parts = []
    for col, values in state.pins.items():
        title = state.specs[col].title if 0 <= col < len(state.specs) else ""
        shown = [NULL_PIN_MARK if v == NULL_PIN else v for v in values]
        parts.append(f"{title}: {', '.join(shown)}")
    return " · ".join(parts)
