import logging
from dataclasses import dataclass, field

from table_model import SortEntry

logger = logging.getLogger(__name__)

NOT_VISIBLE = -1


@dataclass
class VisibilityResult:
    ok: bool
    message: str = ""


@dataclass
class Projection:
    specs: list = field(default_factory=list)
    cell_rows: list = field(default_factory=list)
    col_cursor: int = NOT_VISIBLE
    sorts: list = field(default_factory=list)
    vis_to_full: list = field(default_factory=list)


def visible_count(state) -> int:
    return sum(1 for i in range(len(state.specs)) if not state.is_hidden(i))


def next_visible_col(state, current: int, forward: bool) -> int:
    """Nearest visible column past ``current``; clamps at the edge, never wraps."""
    n = len(state.specs)
    if n == 0:
        return 0
    step = 1 if forward else -1
    i = current + step
    while 0 <= i < n:
        if not state.is_hidden(i):
            return i
        i += step
    return current


def first_visible_col(state) -> int:
    for i in range(len(state.specs)):
        if not state.is_hidden(i):
            return i
    return 0


def last_visible_col(state) -> int:
    for i in range(len(state.specs) - 1, -1, -1):
        if not state.is_hidden(i):
            return i
    return 0


def hidden_column_names(state) -> list[str]:
    return [spec.title for i, spec in enumerate(state.specs) if state.is_hidden(i)]


def hide_column(state, col=None) -> VisibilityResult:
    """Push ``col`` (default: the cursor column) onto the hide stack.

    Refuses to hide the last visible column. When the cursor sat on the
    hidden column it moves to the next visible one, rightward first.
    """
    if col is None:
        col = state.col_cursor
    if col < 0 or col >= len(state.specs):
        return VisibilityResult(False, "No column selected.")
    if state.is_hidden(col):
        return VisibilityResult(True)
    if visible_count(state) <= 1:
        logger.info("refused to hide last visible column %r", state.specs[col].title)
        return VisibilityResult(False, "Cannot hide the last visible column.")

    state.hidden.append(col)
    if state.col_cursor == col:
        nxt = next_visible_col(state, col, True)
        if nxt == col:
            nxt = next_visible_col(state, col, False)
        state.col_cursor = nxt
    title = state.specs[col].title
    return VisibilityResult(True, f"Hidden: {title}. Press C to show all.")


def unhide_column(state, col: int) -> bool:
    if col in state.hidden:
        state.hidden.remove(col)
        return True
    return False


def show_all_columns(state) -> bool:
    changed = bool(state.hidden)
    state.hidden.clear()
    return changed


def visible_projection(state) -> Projection:
    """Visible-only specs and cells, with cursor and sorts remapped.

    Sort entries on hidden columns are dropped. ``col_cursor`` is
    ``NOT_VISIBLE`` when the real cursor sits on a hidden column.
    """
    proj = Projection()
    full_to_vis = {}
    for i, spec in enumerate(state.specs):
        if state.is_hidden(i):
            continue
        full_to_vis[i] = len(proj.vis_to_full)
        proj.vis_to_full.append(i)
        proj.specs.append(spec)

    proj.col_cursor = full_to_vis.get(state.col_cursor, NOT_VISIBLE)

    proj.cell_rows = project_rows(state.cell_rows, proj.vis_to_full)

    for entry in state.sorts:
        if entry.col in full_to_vis:
            proj.sorts.append(SortEntry(full_to_vis[entry.col], entry.dir))
    return proj


def project_rows(rows, vis_to_full) -> list:
    return [[row[fi] for fi in vis_to_full if fi < len(row)] for row in rows]
