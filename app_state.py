import pandas as pd

from config_paths import default_config
from frame_table import reload_table, table_from_frame
from table_model import TableState
from table_view import content_width, display_state
from viewport import update_viewport


class AppState:
    """Loaded sheets plus one table view per sheet."""

    def __init__(self, sheets, file_path=None, config=None):
        self.file_path = file_path
        self.config = dict(default_config())
        if config:
            self.config.update(config)

        self.sheets: dict[str, pd.DataFrame] = {}
        self.sheet_order: list[str] = []
        self.active_sheet: str | None = None
        self.compact_money: bool = bool(self.config["compact_money"])

        self._tables: dict[str, TableState] = {}
        self._init_sheets(sheets)

    def _init_sheets(self, sheets):
        if isinstance(sheets, pd.DataFrame):
            sheets = {"Sheet1": sheets}
        cleaned = {}
        for name, value in (sheets or {}).items():
            if isinstance(value, pd.DataFrame):
                cleaned[str(name)] = value
        if not cleaned:
            cleaned = {"Sheet1": pd.DataFrame()}
        self.sheets = cleaned
        self.sheet_order = list(cleaned.keys())
        self.active_sheet = self.sheet_order[0]

    @property
    def remember_view_state(self) -> bool:
        return bool(self.config["remember_view_state"])

    @property
    def separator(self) -> str:
        return self.config["separator"]

    @property
    def fill(self) -> bool:
        return bool(self.config["fill_width"])

    @property
    def df(self) -> pd.DataFrame:
        return self.sheets[self.active_sheet]

    @property
    def table(self) -> TableState:
        name = self.active_sheet
        if name not in self._tables:
            self._tables[name] = self._build_table(name)
        return self._tables[name]

    def view_table(self) -> TableState:
        """The active table as drawn: money cells abbreviated when compact mode is on."""
        return display_state(self.table, self.compact_money)

    def refresh_viewport(self, term_width: int):
        """Re-clamp and re-window the active table after a move, a resize or a hide."""
        table = self.table
        table.clamp_cursor()
        view = self.view_table()
        update_viewport(view, content_width(view, term_width), self.separator, fill=self.fill)
        table.view_offset = view.view_offset

    def _build_table(self, name: str) -> TableState:
        return table_from_frame(self.sheets[name], name=name, money_columns=self.config["money_columns"])

    def reload(self, df: pd.DataFrame, term_width: int):
        """Replace the active sheet's data, keeping its view state."""
        self.sheets[self.active_sheet] = df
        reload_table(
            self.table,
            df,
            term_width,
            self.separator,
            fill=self.fill,
            money_columns=self.config["money_columns"],
        )
        self.refresh_viewport(term_width)

    def toggle_compact_money(self) -> bool:
        self.compact_money = not self.compact_money
        return self.compact_money

    def has_sheets(self) -> bool:
        return len(self.sheet_order) > 1

    def get_sheet_names(self) -> list[str]:
        return list(self.sheet_order)

    def get_active_sheet_name(self) -> str | None:
        return self.active_sheet

    def set_active_sheet(self, name: str) -> bool:
        if name not in self.sheets:
            return False
        if name != self.active_sheet and not self.remember_view_state:
            self._tables.pop(self.active_sheet, None)
            self._tables.pop(name, None)
        self.active_sheet = name
        return True

    def switch_sheet(self, delta: int) -> str | None:
        if len(self.sheet_order) <= 1:
            return None
        idx = self.sheet_order.index(self.active_sheet)
        new_name = self.sheet_order[(idx + delta) % len(self.sheet_order)]
        self.set_active_sheet(new_name)
        return new_name
