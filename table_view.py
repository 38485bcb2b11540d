import dataclasses
from dataclasses import dataclass, field

from collapsed_stacks import (
    LADLE_EDGE_WIDTH,
    compute_collapsed_stacks,
    gap_separators,
    ladle_chrome,
    render_collapsed_stacks,
    render_ladle_bottom,
    render_stack_connector,
)
from column_widths import DRILLDOWN_ARROW, LINK_ARROW, display_width, truncate
from money import compact_money_cells
from sort_engine import sort_indicator
from table_model import Align, CellKind
from viewport import compute_table_viewport, visible_range

NULL_MARK = "—"
DIVIDER_SEP = "─┼─"
EMPTY_MESSAGE = "No entries yet."


@dataclass
class RenderedTable:
    """Plain text lines plus where things landed, for the curses pane to colour."""

    lines: list = field(default_factory=list)
    header_line: int = -1
    first_row_line: int = -1
    row_start: int = 0  # index of the first data row drawn
    row_count: int = 0
    cursor_line: int = -1
    col_offsets: list = field(default_factory=list)  # x of each drawn column
    widths: list = field(default_factory=list)
    cursor_col: int = -1  # drawn column under the cursor, -1 when off-screen


def format_cell(value: str, width: int, align=Align.LEFT) -> str:
    if width < 1:
        return ""
    text = truncate(value, width)
    pad = width - display_width(text)
    if pad <= 0:
        return text
    if align == Align.RIGHT:
        return " " * pad + text
    return text + " " * pad


def format_header_cell(title: str, indicator: str, width: int) -> str:
    """Title left, sort indicator right, inside ``width``."""
    if not indicator:
        return format_cell(title, width)
    title_w = display_width(title)
    ind_w = display_width(indicator)
    gap = width - title_w - ind_w
    if gap < 0:
        available = width - ind_w
        if available < 1:
            return format_cell(title, width)
        title = truncate(title, available, tail="")
        gap = width - display_width(title) - ind_w
    return title + " " * gap + indicator


def join_cells(cells, separators) -> str:
    """Join with per-gap separators, reusing the last one if the list runs short."""
    out = []
    for i, c in enumerate(cells):
        if i > 0:
            if i - 1 < len(separators):
                out.append(separators[i - 1])
            elif separators:
                out.append(separators[-1])
        out.append(c)
    return "".join(out)


def header_title(spec) -> str:
    if spec.link is not None:
        return f"{spec.title} {LINK_ARROW}"
    if spec.kind == CellKind.DRILLDOWN:
        return f"{spec.title} {DRILLDOWN_ARROW}"
    return spec.title


def render_header_row(specs, widths, separators, sorts, has_left=False, has_right=False) -> str:
    cells = []
    last = len(specs) - 1
    for i, spec in enumerate(specs):
        title = header_title(spec)
        if i == 0 and has_left:
            title = "◀ " + title
        if i == last and has_right:
            title = title + " ▶"
        width = widths[i] if i < len(widths) else 1
        cells.append(format_header_cell(title, sort_indicator(sorts, i), width))
    return join_cells(cells, separators)


def render_divider(widths, gap_count: int) -> str:
    parts = ["─" * max(1, w) for w in widths]
    return join_cells(parts, [DIVIDER_SEP] * gap_count)


def render_row(specs, row, widths, separators) -> str:
    cells = []
    for i, spec in enumerate(specs):
        width = widths[i] if i < len(widths) else 1
        value = row[i].text if i < len(row) else ""
        if not value:
            cells.append(format_cell(NULL_MARK, width, spec.align))
        else:
            cells.append(format_cell(value, width, spec.align))
    return join_cells(cells, separators)


def render_rows(specs, rows, widths, plain_seps, collapsed_seps, cursor: int, height: int):
    """Windowed data lines around ``cursor``; returns ``(lines, start)``.

    The collapsed ``⋯`` separators only appear on the first, middle and
    last drawn rows.
    """
    total = len(rows)
    if total == 0:
        return [], 0
    if height <= 0:
        height = total
    start, end = visible_range(total, height, cursor)
    mid = start + (end - start) // 2
    lines = []
    for i in range(start, end):
        seps = collapsed_seps if i in (start, mid, end - 1) else plain_seps
        lines.append(render_row(specs, rows[i], widths, seps))
    return lines, start


def display_state(state, compact: bool):
    """Copy of ``state`` whose money cells are abbreviated, or ``state`` itself."""
    if not compact:
        return state
    width_rows = state.width_rows
    if width_rows is not None:
        width_rows = compact_money_cells(width_rows)
    return dataclasses.replace(
        state, cell_rows=compact_money_cells(state.cell_rows), width_rows=width_rows
    )


def _pad_to(text: str, width: int) -> str:
    gap = width - display_width(text)
    return text + " " * gap if gap > 0 else text


def _edges(state):
    vis = [i for i in range(len(state.specs)) if not state.is_hidden(i)]
    if not vis:
        return False, False
    return vis[0] > 0, vis[-1] < len(state.specs) - 1


def content_width(state, term_width: int) -> int:
    """Width left for columns once the ladle borders for edge stacks are reserved."""
    has_leading, has_trailing = _edges(state)
    return max(1, term_width - ladle_chrome(has_leading, has_trailing).width)


def render_table(state, term_width: int, height: int, separator: str = " │ ", fill: bool = False) -> RenderedTable:
    """Header, divider, data rows and collapsed-column stacks for ``state``.

    ``height`` bounds the whole block; rows give way to the stack lines.
    """
    out = RenderedTable()
    if not state.specs or term_width <= 0:
        return out

    sep_w = display_width(separator)
    has_leading, has_trailing = _edges(state)
    vp = compute_table_viewport(state, content_width(state, term_width), separator, fill=fill)
    if not vp.all_vis_to_full:
        return out
    window_has_first = vp.start == 0
    window_has_last = vp.end == len(vp.all_vis_to_full)
    draw_lead = has_leading and window_has_first
    draw_trail = has_trailing and window_has_last
    chrome = ladle_chrome(has_leading, has_trailing, drawn=(draw_lead, draw_trail))

    plain_seps, collapsed_seps = gap_separators(vp.vis_to_full, separator)
    header = render_header_row(vp.specs, vp.widths, collapsed_seps, vp.sorts, vp.has_left, vp.has_right)
    divider = render_divider(vp.widths, len(plain_seps))

    lead_from = 0 if window_has_first else vp.vis_to_full[0]
    trail_to = None if window_has_last else vp.vis_to_full[-1] + 1
    stacks = compute_collapsed_stacks(state, vp.vis_to_full, vp.widths, sep_w, lead_from, trail_to)
    stack_lines = render_collapsed_stacks(stacks)
    connector = render_stack_connector(stacks)

    col_space = sum(vp.widths) + max(0, len(vp.widths) - 1) * sep_w
    left_width = LADLE_EDGE_WIDTH if has_leading else 0
    bottom = render_ladle_bottom(stacks, draw_lead, draw_trail, left_width, col_space)
    spacer = (draw_lead or draw_trail) and bool(stack_lines) and not connector

    stack_chrome = len(stack_lines) + (1 if connector or spacer else 0) + (1 if bottom else 0)
    row_height = 0
    if height > 0:
        row_height = max(1, height - 2 - stack_chrome)

    rows, row_start = render_rows(
        vp.specs, vp.cells, vp.widths, plain_seps, collapsed_seps, state.row_cursor, row_height
    )

    def framed(text):
        body = _pad_to(text, col_space) if chrome.right else text
        return chrome.left + body + chrome.right

    lines = [framed(header), framed(divider)]
    out.header_line = 0
    if rows:
        out.first_row_line = len(lines)
        lines.extend(framed(r) for r in rows)
    else:
        lines.append(framed(EMPTY_MESSAGE))
    if connector:
        lines.append(framed(connector))
    elif spacer:
        lines.append(framed(" " * col_space))
    lines.extend(framed(s) for s in stack_lines)
    if bottom:
        lines.append(bottom)
    # narrow terminals: chrome and the empty message must not spill past the edge
    lines = [truncate(line, term_width, tail="") for line in lines]

    if height > 0 and len(lines) > height:
        lines = lines[:height]
    out.lines = lines
    out.row_start = row_start
    out.row_count = len(rows)
    if rows and row_start <= state.row_cursor < row_start + len(rows):
        out.cursor_line = out.first_row_line + state.row_cursor - row_start
    x = len(chrome.left)
    for i, w in enumerate(vp.widths):
        out.col_offsets.append(x)
        x += w + sep_w
    out.widths = list(vp.widths)
    out.cursor_col = vp.cursor
    return out


def render_hidden_badges(state) -> str:
    """Hidden column names split around the cursor, ``◀``/``▶`` slots always reserved."""
    left, right = [], []
    for i, spec in enumerate(state.specs):
        if not state.is_hidden(i):
            continue
        if i < state.col_cursor:
            left.append(spec.title)
        else:
            right.append(spec.title)
    if not left and not right:
        return ""

    left_marker = "◀ " if left else "  "
    right_marker = " ▶" if right else "  "
    parts = []
    for i, name in enumerate(left):
        if i == 0:
            name = left_marker + name
        if not right and i == len(left) - 1:
            name += right_marker
        parts.append(name)
    for i, name in enumerate(right):
        if not left and i == 0:
            name = left_marker + name
        if i == len(right) - 1:
            name += right_marker
        parts.append(name)
    return " · ".join(parts)
