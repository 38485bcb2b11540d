import logging

from wcwidth import wcwidth

from table_model import CellKind

logger = logging.getLogger(__name__)

LINK_ARROW = "→"  # cross-reference into another table
DRILLDOWN_ARROW = "↘"  # opens a sub-table
ELLIPSIS = "…"


def char_width(ch: str) -> int:
    w = wcwidth(ch)
    if w is None or w < 0:
        return 0
    return w


def display_width(text: str) -> int:
    """Number of terminal cells ``text`` occupies."""
    if not text:
        return 0
    return sum(char_width(ch) for ch in text)


def truncate(text: str, width: int, tail: str = ELLIPSIS) -> str:
    if width <= 0:
        return ""
    if display_width(text) <= width:
        return text
    tail_w = display_width(tail)
    if tail_w > width:
        tail, tail_w = "", 0
    budget = width - tail_w
    out = []
    used = 0
    for ch in text:
        cw = char_width(ch)
        if used + cw > budget:
            break
        out.append(ch)
        used += cw
    return "".join(out) + tail


def header_title_width(spec) -> int:
    """Header width including the link/drilldown arrow suffix.

    Sort indicators render inside the existing width, so toggling a sort never
    changes the layout.
    """
    w = display_width(spec.title)
    if spec.link is not None:
        w += 1 + display_width(LINK_ARROW)
    elif spec.kind == CellKind.DRILLDOWN:
        w += 1 + display_width(DRILLDOWN_ARROW)
    return w


def natural_widths(specs, rows) -> list[int]:
    """Content-driven width per column, floored by ``min`` but not capped by ``max``."""
    widths = []
    for i, spec in enumerate(specs):
        w = header_title_width(spec)
        for fv in spec.fixed_values:
            w = max(w, display_width(fv))
        for row in rows:
            if i >= len(row):
                continue
            value = row[i].text
            if value:
                w = max(w, display_width(value))
        widths.append(max(w, spec.min))
    return widths


def widen_truncated(widths: list[int], natural: list[int], extra: int) -> int:
    """Give ``extra`` cells back to columns narrower than their natural width.

    The most truncated column is served first, one cell at a time. Mutates
    ``widths`` and returns whatever could not be used.
    """
    while extra > 0:
        best = -1
        best_gap = 0
        for i, w in enumerate(widths):
            gap = natural[i] - w
            if gap > best_gap:
                best_gap = gap
                best = i
        if best < 0:
            break
        widths[best] += 1
        extra -= 1
    return extra


def distribute(widths, specs, indices, amount: int, grow: bool) -> int:
    """Round-robin ``amount`` cells over ``indices``.

    Growing stops at each column's max, shrinking at its min. Returns the
    part of ``amount`` that could not be placed.
    """
    if amount <= 0 or not indices:
        return max(0, amount)
    while amount > 0:
        changed = False
        for idx in indices:
            if idx >= len(widths):
                continue
            spec = specs[idx]
            if grow:
                if spec.max > 0 and widths[idx] >= spec.max:
                    continue
                widths[idx] += 1
            else:
                if widths[idx] <= max(1, spec.min):
                    continue
                widths[idx] -= 1
            amount -= 1
            changed = True
            if amount == 0:
                break
        if not changed:
            break
    return amount


def flex_columns(specs) -> list[int]:
    return [i for i, spec in enumerate(specs) if spec.flex]


def _grow_into(widths, specs, extra: int):
    flex = flex_columns(specs) or list(range(len(specs)))
    distribute(widths, specs, flex, extra, grow=True)


def column_widths(
    specs,
    rows,
    width: int,
    separator_width: int,
    fill: bool = False,
    width_rows=None,
) -> list[int]:
    """Fit the columns into ``width`` terminal cells.

    Natural widths are used as-is when they fit. Otherwise every column is
    capped at its max, the space left over goes back to truncated columns,
    and any remaining deficit shrinks non-flex columns before flex ones,
    never below a column's min. ``width_rows`` (when given) replaces ``rows``
    for measuring, so a filtered view keeps the widths of the full data.
    """
    count = len(specs)
    if count == 0:
        return []
    available = width - separator_width * (count - 1)
    if available < count:
        available = count

    if count == 1:
        return [available]

    natural = natural_widths(specs, rows if width_rows is None else width_rows)

    if sum(natural) <= available:
        widths = list(natural)
        if fill:
            _grow_into(widths, specs, available - sum(widths))
        return widths

    widths = []
    for spec, w in zip(specs, natural):
        if spec.max > 0 and w > spec.max:
            w = max(spec.max, spec.min)
        widths.append(w)

    total = sum(widths)
    if total <= available:
        extra = widen_truncated(widths, natural, available - total)
        if fill and extra > 0:
            _grow_into(widths, specs, extra)
        return widths

    deficit = total - available
    flex = flex_columns(specs)
    rigid = [i for i in range(count) if i not in flex]
    for group in (rigid, flex):
        deficit = distribute(widths, specs, group, deficit, grow=False)
    if deficit > 0:
        logger.debug("column minimums exceed width %s by %s cells", width, deficit)
    return widths
