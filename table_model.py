from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class CellKind(Enum):
    TEXT = "text"
    MONEY = "money"
    DATE = "date"
    NUMERIC = "numeric"  # identifiers and plain numbers
    NOTES = "notes"
    REFERENCE = "reference"  # foreign key into another table
    DRILLDOWN = "drilldown"  # count that opens a sub-table


class Align(Enum):
    LEFT = "left"
    RIGHT = "right"


class SortDir(Enum):
    ASC = "asc"
    DESC = "desc"


DATE_FORMAT = "%Y-%m-%d"


@dataclass
class ColumnSpec:
    title: str
    kind: CellKind = CellKind.TEXT
    min: int = 1
    max: int = 0  # 0 = uncapped
    flex: bool = False
    align: Align = Align.LEFT
    fixed_values: tuple = ()
    link: Optional[str] = None  # name of the referenced table, if any


@dataclass
class Cell:
    value: Optional[str] = None
    kind: CellKind = CellKind.TEXT
    link_id: Optional[int] = None

    @property
    def text(self) -> str:
        return "" if self.value is None else self.value.strip()

    @property
    def is_null(self) -> bool:
        return self.text == ""


@dataclass
class RowMeta:
    id: int
    deleted: bool = False
    dimmed: bool = False  # would be dropped by the pinned filter


@dataclass(frozen=True)
class SortEntry:
    col: int
    dir: SortDir = SortDir.ASC


@dataclass
class TableState:
    """Everything one table view owns between key presses.

    ``hidden`` is the hide stack: full column indices in the order they were
    hidden, oldest first. A column's hide order is its 1-based position in
    that list (0 = visible).
    """

    name: str = ""
    specs: list = field(default_factory=list)
    cell_rows: list = field(default_factory=list)
    rows: list = field(default_factory=list)
    row_cursor: int = 0
    col_cursor: int = 0
    view_offset: int = 0
    sorts: list = field(default_factory=list)
    hidden: list = field(default_factory=list)
    # unfiltered rows used for width measurement; None = use cell_rows
    width_rows: Optional[list] = None
    # every loaded row in file order; the shown rows are filtered from these
    full_cell_rows: Optional[list] = None
    full_rows: Optional[list] = None
    # column -> pinned values (lowercased), in pin order
    pins: dict = field(default_factory=dict)
    filter_active: bool = False
    filter_inverted: bool = False

    def hide_order(self, col: int) -> int:
        try:
            return self.hidden.index(col) + 1
        except ValueError:
            return 0

    def is_hidden(self, col: int) -> bool:
        return col in self.hidden

    @property
    def column_count(self) -> int:
        return len(self.specs)

    @property
    def row_count(self) -> int:
        return len(self.cell_rows)

    def clamp_cursor(self):
        if self.cell_rows:
            self.row_cursor = max(0, min(self.row_cursor, len(self.cell_rows) - 1))
        else:
            self.row_cursor = 0
        if self.specs:
            self.col_cursor = max(0, min(self.col_cursor, len(self.specs) - 1))
        else:
            self.col_cursor = 0


def selected_cell(state: TableState, col: int) -> Optional[Cell]:
    """Cell at ``col`` of the cursor row, or None when either is out of range."""
    cursor = state.row_cursor
    if cursor < 0 or cursor >= len(state.cell_rows):
        return None
    row = state.cell_rows[cursor]
    if col < 0 or col >= len(row):
        return None
    return row[col]


def selected_row_meta(state: TableState) -> Optional[RowMeta]:
    if not state.rows:
        return None
    cursor = state.row_cursor
    if cursor < 0 or cursor >= len(state.rows):
        return None
    return state.rows[cursor]
