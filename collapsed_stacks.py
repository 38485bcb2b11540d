import logging
from dataclasses import dataclass, field

from column_widths import display_width, truncate

logger = logging.getLogger(__name__)

COLLAPSED_MARK = "⋯"
LADLE_SIDE = "│"
# corner glyph plus one blank, per edge
LADLE_EDGE_WIDTH = 2


@dataclass
class StackEntry:
    name: str
    full_index: int
    hide_order: int


@dataclass
class CollapsedStack:
    entries: list = field(default_factory=list)  # depth 0 = closest to the data
    offset: int = 0  # character column of the pill's left edge
    width: int = 0
    edge: bool = False  # leading/trailing; drawn with the ladle instead of a connector
    leading: bool = False
    merged: bool = False


@dataclass
class LadleChrome:
    left: str = ""
    right: str = ""
    width: int = 0


def collapsed_separator(normal_sep: str) -> str:
    if not normal_sep:
        return COLLAPSED_MARK
    mid = len(normal_sep) // 2
    return normal_sep[:mid] + COLLAPSED_MARK + normal_sep[mid + 1:]


def gap_separators(vis_to_full, normal_sep: str):
    """One separator per gap, plain and with ``⋯`` where hidden columns sit between."""
    n = len(vis_to_full)
    if n <= 1:
        return [], []
    marked = collapsed_separator(normal_sep)
    plain = [normal_sep] * (n - 1)
    collapsed = []
    for i in range(n - 1):
        if vis_to_full[i + 1] > vis_to_full[i] + 1:
            collapsed.append(marked)
        else:
            collapsed.append(normal_sep)
    return plain, collapsed


def ladle_chrome(has_leading: bool, has_trailing: bool, drawn: tuple = (True, True)) -> LadleChrome:
    """Border strings for edge stacks.

    ``drawn`` says whether each reserved side actually gets its border; a
    side that is reserved but not drawn stays blank so the table does not
    shift sideways while scrolling.
    """
    chrome = LadleChrome()
    if has_leading:
        chrome.left = LADLE_SIDE + " " if drawn[0] else "  "
        chrome.width += LADLE_EDGE_WIDTH
    if has_trailing:
        chrome.right = " " + LADLE_SIDE if drawn[1] else "  "
        chrome.width += LADLE_EDGE_WIDTH
    return chrome


def collect_hidden_entries(state, lo: int, hi: int, nearest_first_from_right: bool = True) -> list:
    indices = range(hi - 1, lo - 1, -1) if nearest_first_from_right else range(lo, hi)
    return [
        StackEntry(state.specs[i].title, i, state.hide_order(i))
        for i in indices
        if state.is_hidden(i)
    ]


def max_entry_width(entries) -> int:
    return max((display_width(e.name) for e in entries), default=0)


def _merge(stacks, total_width):
    merged = []
    for s in stacks:
        if merged:
            last = merged[-1]
            if s.offset < last.offset + last.width:
                end = max(last.offset + last.width, s.offset + s.width)
                if not last.merged:
                    last.entries = sorted(last.entries, key=lambda e: e.hide_order)
                    last.merged = True
                last.entries = last.entries + sorted(s.entries, key=lambda e: e.hide_order)
                last.width = min(end - last.offset, total_width)
                last.edge = last.edge or s.edge
                logger.debug("merged collapsed stacks at offset %s", last.offset)
                continue
        merged.append(s)
    return merged


def compute_collapsed_stacks(state, vis_to_full, widths, sep_width: int, lead_from: int = 0, trail_to=None) -> list:
    """Position one stack per run of hidden columns around the shown columns.

    ``vis_to_full`` maps each shown column to its full index. Hidden columns
    in ``[lead_from, first shown)`` form the leading stack and those in
    ``(last shown, trail_to)`` the trailing one. Stacks that overlap after
    being clamped to the column space merge into one.
    """
    n = len(vis_to_full)
    if n == 0:
        return []
    if trail_to is None:
        trail_to = len(state.specs)

    stacks = []
    if vis_to_full[0] > lead_from:
        entries = collect_hidden_entries(state, lead_from, vis_to_full[0])
        if entries:
            stacks.append(
                CollapsedStack(entries, 0, max_entry_width(entries) + 2, edge=True, leading=True)
            )

    offset = 0
    for i in range(n):
        if i > 0:
            lo = vis_to_full[i - 1] + 1
            hi = vis_to_full[i]
            if hi > lo:
                entries = collect_hidden_entries(state, lo, hi)
                if entries:
                    w = max_entry_width(entries) + 2
                    center = offset + sep_width // 2
                    stacks.append(CollapsedStack(entries, max(0, center - w // 2), w))
            offset += sep_width
        if i < len(widths):
            offset += widths[i]

    last = vis_to_full[-1]
    if last + 1 < trail_to:
        entries = collect_hidden_entries(state, last + 1, trail_to, nearest_first_from_right=False)
        if entries:
            w = max_entry_width(entries) + 2
            stacks.append(CollapsedStack(entries, max(0, offset - w), w, edge=True))

    total_width = sum(widths) + max(0, len(widths) - 1) * sep_width
    for s in stacks:
        s.width = min(s.width, total_width)
        if s.offset + s.width > total_width:
            s.offset = total_width - s.width
        s.offset = max(0, s.offset)

    return _merge(stacks, total_width)


def _pill(name: str, width: int) -> str:
    if width <= 2:
        return truncate(name, width, tail="")
    inner = width - 2
    name = truncate(name, inner)
    pad = inner - display_width(name)
    left = pad // 2
    return "(" + " " * left + name + " " * (pad - left) + ")"


def render_stack_line(stacks, depth: int) -> str:
    pills = []
    for s in stacks:
        if depth < len(s.entries):
            pills.append((s.offset, _pill(s.entries[depth].name, s.width), s.width))
    pills.sort(key=lambda p: p[0])
    out = []
    cursor = 0
    for off, text, w in pills:
        if off > cursor:
            out.append(" " * (off - cursor))
            cursor = off
        out.append(text)
        cursor += w
    return "".join(out)


def render_collapsed_stacks(stacks) -> list[str]:
    """One line per stack depth, pills placed at each stack's offset."""
    if not stacks:
        return []
    depth = max(len(s.entries) for s in stacks)
    return [render_stack_line(stacks, d) for d in range(depth)]


def render_stack_connector(stacks) -> str:
    """A ``│`` under the centre of each gap stack; edge stacks use the ladle."""
    out = []
    cursor = 0
    found = False
    for s in stacks:
        if s.edge:
            continue
        found = True
        center = s.offset + s.width // 2
        if center > cursor:
            out.append(" " * (center - cursor))
            cursor = center
        out.append(LADLE_SIDE)
        cursor += 1
    return "".join(out) if found else ""


def render_ladle_bottom(stacks, has_leading: bool, has_trailing: bool, left_width: int, col_space_width: int) -> str:
    """Base of the ladle: ``╰───`` under leading stacks, ``───╯`` under trailing ones."""
    if not has_leading and not has_trailing:
        return ""
    right_width = LADLE_EDGE_WIDTH if has_trailing else 0
    full_width = left_width + col_space_width + right_width

    if has_leading and has_trailing:
        if full_width < 2:
            return ""
        return "╰" + "─" * (full_width - 2) + "╯"

    if has_leading:
        lead = next((s for s in stacks if s.leading), None)
        if lead is None or lead.width <= 0:
            return ""
        return "╰" + "─" * (1 + lead.width)

    trail = next((s for s in stacks if s.edge and not s.leading), None)
    if trail is None:
        return ""
    start = left_width + trail.offset
    return " " * start + "─" * (col_space_width - trail.offset + 1) + "╯"
