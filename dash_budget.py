import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from column_widths import display_width, truncate
from table_model import Align

logger = logging.getLogger(__name__)

SECTION_GAP = 3
ROW_INDENT = 2
MIN_FIRST_COL = 6
CURSOR_MARK = "▸ "


@dataclass
class DashCell:
    text: str
    align: Align = Align.LEFT


@dataclass
class DashRow:
    cells: list = field(default_factory=list)
    target: Optional[tuple] = None  # (column, row id) to jump to; None = not navigable


@dataclass
class DashSection:
    title: str
    rows: list = field(default_factory=list)
    # named sub-groups; sub_counts[i] rows of ``rows`` belong to sub_titles[i]
    sub_titles: list = field(default_factory=list)
    sub_counts: list = field(default_factory=list)

    def overhead(self) -> int:
        """Lines the section needs besides its data rows."""
        if len(self.sub_counts) <= 1:
            return 1
        n = sum(1 for c in self.sub_counts if c > 0)
        if n <= 1:
            return 1
        return n + (n - 1)


def distribute_proportional(counts, avail: int) -> list[int]:
    """Split ``avail`` lines over buckets of ``counts`` rows.

    Every non-empty bucket gets one line first, the rest goes out in
    proportion to each bucket's rows beyond that first one, and rounding
    leftovers go to whichever bucket is furthest from its full count.
    """
    counts = np.asarray(counts, dtype=np.int64)
    if counts.size == 0:
        return []
    avail = max(0, int(avail))
    total = int(counts.sum())
    if avail >= total:
        return counts.tolist()

    result = np.zeros_like(counts)
    non_empty = np.flatnonzero(counts > 0)[:avail]
    result[non_empty] = 1
    remaining = avail - len(non_empty)

    excess = total - len(non_empty)
    if excess > 0 and remaining > 0:
        extra = np.clip(counts - 1, 0, None)
        result += extra * remaining // excess

    allocated = int(result.sum())
    while allocated < avail:
        gap = counts - result
        best = int(np.argmax(gap))
        if gap[best] <= 0:
            break
        result[best] += 1
        allocated += 1
    return result.tolist()


def distribute_dash_rows(sections, avail: int) -> list[int]:
    return distribute_proportional([len(s.rows) for s in sections], avail)


def distribute_sub_limits(sub_counts, limit: int) -> list[int]:
    return distribute_proportional(sub_counts, limit)


def fixed_lines(sections, footer_lines: int = 0) -> int:
    """Headers, blanks between sections, and the footer block (blank + rule + title + lines)."""
    fixed = 0
    for i, s in enumerate(sections):
        fixed += s.overhead()
        if i > 0:
            fixed += 1
    if footer_lines > 0:
        if sections:
            fixed += 1
        fixed += 2 + footer_lines
    return fixed


def cap_slice(items, max_len: int) -> list:
    if max_len < 0:
        max_len = 0
    return list(items[:max_len])


def truncate_to_width(text: str, max_w: int) -> str:
    return truncate(text, max_w)


def render_mini_table(rows, col_gap: int, max_width: int, cursor: int = -1) -> list[str]:
    """Aligned lines for ``rows``; the first column gives way when the line would overflow ``max_width``."""
    if not rows:
        return []
    n_cols = max(len(r.cells) for r in rows)
    widths = [0] * n_cols
    for r in rows:
        for i, c in enumerate(r.cells):
            widths[i] = max(widths[i], display_width(c.text))

    if max_width > 0 and n_cols > 0:
        total = ROW_INDENT + sum(widths) + col_gap * (n_cols - 1)
        overflow = total - max_width
        if overflow > 0:
            widths[0] = max(MIN_FIRST_COL, widths[0] - overflow)

    gap = " " * col_gap
    lines = []
    for idx, r in enumerate(rows):
        parts = []
        for i, c in enumerate(r.cells):
            text = c.text
            if display_width(text) > widths[i]:
                text = truncate_to_width(text, widths[i])
            pad = max(0, widths[i] - display_width(text))
            if c.align == Align.RIGHT:
                parts.append(" " * pad + text)
            else:
                parts.append(text + " " * pad)
        prefix = CURSOR_MARK if idx == cursor else " " * ROW_INDENT
        lines.append(prefix + gap.join(parts))
    return lines


def _render_sub_groups(section, limit, cursor, max_width):
    sub_limits = distribute_sub_limits(section.sub_counts, limit)
    lines = []
    shown = []
    offset = 0
    rendered = 0
    for title, count, sub_n in zip(section.sub_titles, section.sub_counts, sub_limits):
        if sub_n == 0:
            offset += count
            continue
        if rendered:
            lines.append("")
        lines.append(title)
        sub_rows = cap_slice(section.rows[offset:offset + count], sub_n)
        local = cursor if 0 <= cursor < sub_n else -1
        lines.extend(render_mini_table(sub_rows, SECTION_GAP, max_width, local))
        shown.extend(sub_rows)
        cursor -= sub_n
        offset += count
        rendered += 1
    return lines, shown


def render_dashboard(sections, budget: int, max_width: int, cursor: int = -1, footer_title: str = "", footer=()):
    """Fit non-empty ``sections`` and an optional footer into ``budget`` lines.

    Returns ``(lines, rows)`` where ``rows`` are the data rows that made it
    on screen, in display order, for cursor navigation.
    """
    sections = [s for s in sections if s.rows]
    footer = list(footer)
    if not sections and not footer:
        return [], []

    fixed = fixed_lines(sections, len(footer))
    avail = max(budget - fixed, len(sections))
    limits = distribute_dash_rows(sections, avail)
    if sum(len(s.rows) for s in sections) > avail:
        logger.debug("dashboard trimmed to %s data lines of %s budget", avail, budget)

    blocks = []
    shown = []
    for section, limit in zip(sections, limits):
        if section.sub_counts:
            body, rows = _render_sub_groups(section, limit, cursor, max_width)
        else:
            rows = cap_slice(section.rows, limit)
            local = cursor if 0 <= cursor < len(rows) else -1
            body = [section.title] + render_mini_table(rows, SECTION_GAP, max_width, local)
        cursor -= len(rows)
        shown.extend(rows)
        blocks.append(body)

    if footer:
        rule = "─" * max(0, max_width)
        if max_width > ROW_INDENT:
            footer = [truncate(f, max_width - ROW_INDENT) for f in footer]
        blocks.append([rule, footer_title] + [" " * ROW_INDENT + f for f in footer])

    lines = []
    for i, block in enumerate(blocks):
        if i:
            lines.append("")
        lines.extend(block)
    return lines, shown
