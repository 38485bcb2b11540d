import logging
from dataclasses import dataclass, field

from column_visibility import NOT_VISIBLE, project_rows, visible_projection
from column_widths import column_widths, display_width
from table_model import SortEntry

logger = logging.getLogger(__name__)

# "◀ " / " ▶" gutter reserved when columns are off-screen
SCROLL_INDICATOR_WIDTH = 2


@dataclass
class TableViewport:
    start: int = 0
    end: int = 0
    has_left: bool = False
    has_right: bool = False
    specs: list = field(default_factory=list)
    cells: list = field(default_factory=list)
    widths: list = field(default_factory=list)
    cursor: int = NOT_VISIBLE
    sorts: list = field(default_factory=list)
    vis_to_full: list = field(default_factory=list)  # viewport index -> full index
    all_vis_to_full: list = field(default_factory=list)  # whole visible projection


def ensure_cursor_visible(state, vis_cursor: int, vis_count: int):
    """Clamp ``state.view_offset`` so the cursor column can land in a window.

    Only the lower bound is exact here; ``viewport_range`` does the precise
    fitting once widths are known.
    """
    if vis_count <= 0:
        state.view_offset = 0
        return
    if state.view_offset > vis_cursor:
        state.view_offset = vis_cursor
    if state.view_offset > vis_count - 1:
        state.view_offset = vis_count - 1
    if state.view_offset < 0:
        state.view_offset = 0


def _fill_from(widths, sep_width, budget, start):
    n = len(widths)
    end = start
    for e in range(start, n):
        col_w = widths[e]
        if e > start:
            col_w += sep_width
        if budget - col_w < 0 and e > start:
            break
        budget -= col_w
        end = e + 1
    has_right = end < n
    # the right indicator needs room too; give up the last column for it
    if has_right and budget < SCROLL_INDICATOR_WIDTH and end > start + 1:
        end -= 1
    return end, has_right


def viewport_range(widths, sep_width: int, term_width: int, view_offset: int, vis_cursor: int):
    """Columns ``[start, end)`` that fit in ``term_width`` starting at ``view_offset``.

    Returns ``(start, end, has_left, has_right)``. When the cursor lies right
    of the greedy window the window slides right one column at a time until
    it is included.
    """
    n = len(widths)
    if n == 0 or term_width <= 0:
        return 0, 0, False, False
    view_offset = max(0, min(view_offset, n - 1))

    total = sum(widths) + (n - 1) * sep_width
    if total <= term_width:
        return 0, n, False, False

    start = view_offset
    if vis_cursor != NOT_VISIBLE and 0 <= vis_cursor < start:
        start = vis_cursor
    has_left = start > 0
    budget = term_width - (SCROLL_INDICATOR_WIDTH if has_left else 0)
    end, has_right = _fill_from(widths, sep_width, budget, start)

    while vis_cursor >= end and end < n:
        start += 1
        has_left = True
        end, has_right = _fill_from(
            widths, sep_width, term_width - SCROLL_INDICATOR_WIDTH, start
        )
        if vis_cursor < end:
            break
    return start, end, has_left, has_right


def slice_viewport(items, start: int, end: int) -> list:
    if start >= len(items):
        return []
    return list(items[start:min(end, len(items))])


def slice_viewport_rows(rows, start: int, end: int) -> list:
    return [slice_viewport(row, start, end) for row in rows]


def viewport_sorts(sorts, start: int) -> list:
    if start == 0:
        return list(sorts)
    return [SortEntry(s.col - start, s.dir) for s in sorts]


def visible_range(total: int, height: int, cursor: int):
    """Row window of ``height`` rows keeping ``cursor`` near the middle."""
    if height <= 0 or total <= 0:
        return 0, 0
    if total <= height:
        return 0, total
    cursor = max(0, min(cursor, total - 1))
    start = max(0, cursor - height // 2)
    end = start + height
    if end > total:
        end = total
        start = max(0, end - height)
    return start, end


def _width_cells(state, proj):
    if state.width_rows is None:
        return proj.cell_rows
    return project_rows(state.width_rows, proj.vis_to_full)


def compute_table_viewport(state, term_width: int, separator: str, fill: bool = False) -> TableViewport:
    vp = TableViewport()
    proj = visible_projection(state)
    if not proj.specs:
        return vp

    sep_w = display_width(separator)
    width_cells = _width_cells(state, proj)
    full_widths = column_widths(
        proj.specs, proj.cell_rows, term_width, sep_w, fill=fill, width_rows=width_cells
    )

    start, end, has_left, has_right = viewport_range(
        full_widths, sep_w, term_width, state.view_offset, proj.col_cursor
    )
    vp.start, vp.end = start, end
    vp.has_left, vp.has_right = has_left, has_right
    vp.specs = slice_viewport(proj.specs, start, end)
    vp.cells = slice_viewport_rows(proj.cell_rows, start, end)
    vp.sorts = viewport_sorts(proj.sorts, start)
    vp.vis_to_full = slice_viewport(proj.vis_to_full, start, end)
    vp.all_vis_to_full = proj.vis_to_full

    vp.cursor = proj.col_cursor - start
    if proj.col_cursor < start or proj.col_cursor >= end:
        vp.cursor = NOT_VISIBLE

    # widths re-fitted to the window so a narrow slice can use the slack
    vp.widths = column_widths(
        vp.specs,
        vp.cells,
        term_width,
        sep_w,
        fill=fill,
        width_rows=slice_viewport_rows(width_cells, start, end),
    )
    return vp


def update_viewport(state, term_width: int, separator: str, fill: bool = False):
    """Re-clamp then re-window the persisted scroll offset after a cursor move or resize."""
    proj = visible_projection(state)
    if not proj.specs or proj.col_cursor == NOT_VISIBLE:
        state.view_offset = 0
        return
    sep_w = display_width(separator)
    full_widths = column_widths(
        proj.specs,
        proj.cell_rows,
        term_width,
        sep_w,
        fill=fill,
        width_rows=_width_cells(state, proj),
    )
    ensure_cursor_visible(state, proj.col_cursor, len(proj.specs))
    start, _, _, _ = viewport_range(
        full_widths, sep_w, term_width, state.view_offset, proj.col_cursor
    )
    if start != state.view_offset:
        logger.debug("view offset %s -> %s", state.view_offset, start)
    state.view_offset = start
