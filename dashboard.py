import pandas as pd

from column_finder import jump_to_column
from dash_budget import DashCell, DashRow, DashSection, render_dashboard
from money import format_cents, parse_cents
from table_model import DATE_FORMAT, Align, CellKind

MAX_DATE_ROWS = 10
MAX_AMOUNT_ROWS = 5
FOOTER_TITLE = "Totals"


def days_text(days: int) -> str:
    if days == 0:
        return "today"
    if days < 0:
        return f"{-days}d overdue"
    return f"in {days}d"


def _first_col(state, kind):
    for i, spec in enumerate(state.specs):
        if spec.kind == kind:
            return i
    return None


def _label_col(state) -> int:
    for i, spec in enumerate(state.specs):
        if i > 0 and spec.kind in (CellKind.TEXT, CellKind.NOTES):
            return i
    return 0


def _column_texts(state, col):
    return [row[col].text if col < len(row) else "" for row in state.cell_rows]


def _label(state, r, label_col) -> str:
    row = state.cell_rows[r]
    text = row[label_col].text if label_col < len(row) else ""
    if not text and r < len(state.rows):
        return f"#{state.rows[r].id}"
    return text


def date_section(state, now):
    """Overdue / Upcoming rows for the first date column, soonest first."""
    col = _first_col(state, CellKind.DATE)
    if col is None or not state.cell_rows:
        return None
    parsed = pd.to_datetime(pd.Series(_column_texts(state, col), dtype="object"), format=DATE_FORMAT, errors="coerce")
    today = pd.Timestamp(now).normalize()
    label_col = _label_col(state)

    overdue, upcoming = [], []
    for r, when in enumerate(parsed):
        if pd.isna(when):
            continue
        days = int((when - today).days)
        (overdue if days < 0 else upcoming).append((days, r))
    overdue.sort()
    upcoming.sort()
    overdue = overdue[:MAX_DATE_ROWS]
    upcoming = upcoming[: MAX_DATE_ROWS - len(overdue)]

    def to_row(days, r):
        return DashRow(
            [
                DashCell(_label(state, r, label_col)),
                DashCell(state.cell_rows[r][col].text),
                DashCell(days_text(days), Align.RIGHT),
            ],
            target=(col, state.rows[r].id if r < len(state.rows) else None),
        )

    rows = [to_row(d, r) for d, r in overdue] + [to_row(d, r) for d, r in upcoming]
    if not rows:
        return None
    titles, counts = [], []
    if overdue:
        titles.append("Overdue")
        counts.append(len(overdue))
    if upcoming:
        titles.append("Upcoming")
        counts.append(len(upcoming))
    return DashSection("Dates", rows, titles, counts)


def amount_section(state):
    col = _first_col(state, CellKind.MONEY)
    if col is None:
        return None
    label_col = _label_col(state)
    amounts = []
    for r, text in enumerate(_column_texts(state, col)):
        cents = parse_cents(text)
        if cents is not None:
            amounts.append((-cents, r))
    amounts.sort()
    rows = [
        DashRow(
            [DashCell(_label(state, r, label_col)), DashCell(format_cents(-neg), Align.RIGHT)],
            target=(col, state.rows[r].id if r < len(state.rows) else None),
        )
        for neg, r in amounts[:MAX_AMOUNT_ROWS]
    ]
    return DashSection(f"Largest {state.specs[col].title}", rows) if rows else None


def column_section(state):
    rows = []
    for i, spec in enumerate(state.specs):
        empty = sum(1 for text in _column_texts(state, i) if not text)
        title = spec.title + (" (hidden)" if state.is_hidden(i) else "")
        rows.append(
            DashRow(
                [DashCell(title), DashCell(spec.kind.value), DashCell(f"{empty} empty", Align.RIGHT)],
                target=(i, None),
            )
        )
    return DashSection("Columns", rows) if rows else None


def money_totals(state) -> list[str]:
    lines = []
    for i, spec in enumerate(state.specs):
        if spec.kind != CellKind.MONEY:
            continue
        values = [parse_cents(t) for t in _column_texts(state, i)]
        values = [v for v in values if v is not None]
        if values:
            lines.append(f"{spec.title}: {format_cents(sum(values))} over {len(values)} rows")
    return lines


def build_sections(state, now=None):
    now = pd.Timestamp.now() if now is None else now
    sections = [date_section(state, now), amount_section(state), column_section(state)]
    return [s for s in sections if s is not None], money_totals(state)


class Dashboard:
    """Summary of the active table; ``j``/``k`` pick a row, Enter jumps to it."""

    def __init__(self, state, now=None):
        self.state = state
        self.cursor = 0
        self.sections, self.footer = build_sections(state, now)
        self.shown = []

    def render(self, budget: int, width: int) -> list[str]:
        head = [f"Summary: {self.state.name}" if self.state.name else "Summary", ""]
        lines, self.shown = render_dashboard(
            self.sections,
            max(0, budget - len(head)),
            width,
            self.cursor,
            FOOTER_TITLE,
            self.footer,
        )
        if self.cursor >= len(self.shown):
            self.cursor = max(0, len(self.shown) - 1)
        if not lines:
            lines = ["Nothing to summarize."]
        return (head + lines)[: max(0, budget)] if budget > 0 else head + lines

    def move(self, delta: int):
        if not self.shown:
            self.cursor = 0
            return
        self.cursor = max(0, min(len(self.shown) - 1, self.cursor + delta))

    def jump(self) -> bool:
        """Move the table cursor to the selected row's column (and row)."""
        if not (0 <= self.cursor < len(self.shown)):
            return False
        target = self.shown[self.cursor].target
        if target is None:
            return False
        col, row_id = target
        jump_to_column(self.state, col)
        if row_id is not None:
            for i, meta in enumerate(self.state.rows):
                if meta.id == row_id:
                    self.state.row_cursor = i
                    break
        return True
