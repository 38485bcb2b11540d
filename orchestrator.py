import curses
import logging
import time

from column_prompt import ColumnPrompt
from column_visibility import hide_column, show_all_columns
from dashboard import Dashboard
from grid_pane import GridPane
from navigation import NavigationController
from overlay import OverlayView
from row_filter import (
    apply_row_filter,
    clear_column_pins,
    clear_pins,
    has_pins,
    pin_summary,
    toggle_filter,
    toggle_invert,
    toggle_pin_at_cursor,
)
from screen_layout import ScreenLayout
from sort_engine import apply_sorts, clear_sorts, sort_summary, toggle_sort
from status_bar import render_status
from table_view import render_hidden_badges

logger = logging.getLogger(__name__)

HELP_LINES = [
    " tabfit keys",
    "",
    "  h / l, ←/→     previous / next visible column",
    "  j / k, ↓/↑     next / previous row",
    "  g / G          first / last row",
    "  Ctrl+D/Ctrl+U  jump down / up a tenth of the rows",
    "  ^ / $          first / last visible column",
    "  s              sort by column: asc → desc → off",
    "  S              clear all sorts",
    "  c              hide column",
    "  C              show all columns",
    "  n              pin the value under the cursor (preview dims the rest)",
    "  N              filter to pinned rows on / off",
    "  !              invert the filter",
    "  Ctrl+N         clear all pins",
    "  /              find column by name (shows it if hidden)",
    "  m              compact money ($1.2k)",
    "  D              summary dashboard (j/k, Enter jumps)",
    "  [ / ]          previous / next sheet",
    "  r              reload file",
    "  ?              this help",
    "  q, Ctrl+C      quit",
]

HINT = " ? help  s sort  c hide  C show all  n pin  N filter  / find  D summary  q quit"


def _filter_label(table):
    if not has_pins(table):
        return "filter armed" if table.filter_active else ""
    mode = "filter" if table.filter_active else "pins"
    if table.filter_inverted:
        mode += " !"
    return f"{mode} {pin_summary(table)}"


class Orchestrator:
    def __init__(self, stdscr, app_state, loader=None):
        self.stdscr = stdscr
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        curses.raw()
        self.stdscr.nodelay(False)
        self.stdscr.timeout(100)

        self.state = app_state
        self.loader = loader
        self.layout = ScreenLayout(stdscr)
        self.grid = GridPane()
        self.nav = NavigationController(lambda: self.state.table)
        self.overlay = OverlayView(self.layout)
        self.column_prompt = ColumnPrompt(lambda: self.state.table, self._set_status)
        self.dashboard = None
        self.exit_requested = False

        # ---- status ----
        self.status_msg = None
        self.status_msg_until = 0

        self.state.refresh_viewport(self._table_width())

    # ---------------- helpers ----------------

    def _set_status(self, msg, seconds=3):
        self.status_msg = msg
        self.status_msg_until = time.time() + seconds

    def _table_width(self):
        return max(0, self.layout.W - 1)

    def _resize(self):
        self.layout = ScreenLayout(self.stdscr)
        self.overlay.layout = self.layout
        if self.overlay.visible:
            mode = self.overlay.mode
            if mode == "help":
                self.overlay.open_help(HELP_LINES)
            elif mode == "dashboard" and self.dashboard is not None:
                self.overlay.open_dashboard(self.dashboard.render)
        logger.debug("resized to %sx%s", self.layout.W, self.layout.H)

    # ---------------- UI ----------------

    def _status_context(self):
        table = self.state.table
        return {
            "status_msg": self.status_msg,
            "status_until": self.status_msg_until,
            "mode": "SUMMARY" if self.overlay.mode == "dashboard" else "TABLE",
            "file_path": self.state.file_path,
            "sheet": self.state.get_active_sheet_name(),
            "sheet_count": len(self.state.get_sheet_names()),
            "row_cursor": table.row_cursor,
            "total_rows": table.row_count,
            "sort_summary": sort_summary(table),
            "filter": _filter_label(table),
            "compact": self.state.compact_money,
            "hidden_badges": render_hidden_badges(table),
        }

    def redraw(self):
        if not self.overlay.visible:
            self.grid.draw(
                self.layout.table_win,
                self.state.view_table(),
                separator=self.state.separator,
                fill=self.state.fill,
            )

        sw = self.layout.status_win
        sw.erase()
        _, w = sw.getmaxyx()
        try:
            sw.addnstr(0, 0, render_status(self._status_context(), w - 1), w - 1, curses.A_REVERSE)
        except curses.error:
            pass
        sw.refresh()

        cw = self.layout.cmd_win
        cw.erase()
        if self.column_prompt.active:
            try:
                curses.curs_set(1)
            except curses.error:
                pass
            self.column_prompt.draw(cw)
        else:
            try:
                curses.curs_set(0)
                cw.addnstr(0, 0, HINT, max(0, self.layout.W - 1), curses.A_DIM)
            except curses.error:
                pass
            cw.refresh()

        if self.overlay.visible:
            self.overlay.draw()

    # ---------------- actions ----------------

    def _toggle_sort(self):
        table = self.state.table
        toggle_sort(table, table.col_cursor)
        apply_sorts(table)
        summary = sort_summary(table)
        self._set_status(f"Sort: {summary}" if summary else "Sort cleared", 2)

    def _clear_sorts(self):
        table = self.state.table
        clear_sorts(table)
        apply_sorts(table)
        self._set_status("Sort cleared", 2)

    def _hide_column(self):
        table = self.state.table
        col = table.col_cursor
        result = hide_column(table)
        if result.ok and clear_column_pins(table, col):
            apply_row_filter(table)
        if result.message:
            self._set_status(result.message, 3)

    def _toggle_pin(self):
        pinned = toggle_pin_at_cursor(self.state.table)
        if pinned is None:
            return
        self._set_status("Pinned" if pinned else "Unpinned", 2)

    def _toggle_filter(self):
        table = self.state.table
        on = toggle_filter(table)
        if not on:
            self._set_status("Filter off (preview)" if has_pins(table) else "Filter off", 2)
        elif has_pins(table):
            self._set_status(f"Filter: {pin_summary(table)}", 3)
        else:
            self._set_status("Filter armed: pin a value with n", 3)

    def _toggle_invert(self):
        inverted = toggle_invert(self.state.table)
        self._set_status("Filter inverted" if inverted else "Filter not inverted", 2)

    def _clear_pins(self):
        table = self.state.table
        if not has_pins(table) and not table.filter_active:
            return
        clear_pins(table)
        apply_row_filter(table)
        self._set_status("Pins cleared", 2)

    def _show_all(self):
        if show_all_columns(self.state.table):
            self._set_status("All columns shown", 2)

    def _switch_sheet(self, delta):
        name = self.state.switch_sheet(delta)
        if name is None:
            self._set_status("Only one sheet", 2)
        else:
            self._set_status(f"Sheet: {name}", 2)

    def _open_dashboard(self):
        self.dashboard = Dashboard(self.state.table)
        self.overlay.open_dashboard(self.dashboard.render)

    def _reload(self):
        if self.loader is None:
            self._set_status("Nothing to reload", 2)
            return
        try:
            sheets = self.loader()
        except (OSError, ValueError) as e:
            logger.warning("reload of %s failed: %s", self.state.file_path, e)
            self._set_status(f"Reload failed: {e}"[: self.layout.W - 2], 4)
            return
        name = self.state.get_active_sheet_name()
        df = sheets.get(name) if isinstance(sheets, dict) else None
        if df is None:
            self._set_status(f"Sheet {name} no longer in file", 3)
            return
        self.state.reload(df, self._table_width())
        self._set_status("Reloaded", 2)

    def _toggle_money(self):
        on = self.state.toggle_compact_money()
        self._set_status("Compact money on" if on else "Compact money off", 2)

    def _handle_dashboard_key(self, ch):
        if ch in (ord("j"), curses.KEY_DOWN):
            self.dashboard.move(1)
        elif ch in (ord("k"), curses.KEY_UP):
            self.dashboard.move(-1)
        elif ch in (10, 13, curses.KEY_ENTER):
            if self.dashboard.jump():
                self.overlay.close()
                self.dashboard = None
        else:
            self.overlay.handle_key(ch)
            if not self.overlay.visible:
                self.dashboard = None

    def handle_table_key(self, ch):
        keymap = {
            ord("h"): self.nav.move_left,
            curses.KEY_LEFT: self.nav.move_left,
            ord("l"): self.nav.move_right,
            curses.KEY_RIGHT: self.nav.move_right,
            ord("j"): self.nav.move_down,
            curses.KEY_DOWN: self.nav.move_down,
            ord("k"): self.nav.move_up,
            curses.KEY_UP: self.nav.move_up,
            ord("g"): self.nav.jump_top,
            ord("G"): self.nav.jump_bottom,
            4: lambda: self.nav.jump_rows_percent(0.1, "down"),  # Ctrl+D
            21: lambda: self.nav.jump_rows_percent(0.1, "up"),  # Ctrl+U
            ord("^"): self.nav.jump_first_col,
            ord("$"): self.nav.jump_last_col,
            ord("s"): self._toggle_sort,
            ord("S"): self._clear_sorts,
            ord("c"): self._hide_column,
            ord("C"): self._show_all,
            ord("n"): self._toggle_pin,
            ord("N"): self._toggle_filter,
            ord("!"): self._toggle_invert,
            14: self._clear_pins,  # Ctrl+N
            ord("/"): self.column_prompt.start,
            ord("m"): self._toggle_money,
            ord("D"): self._open_dashboard,
            ord("["): lambda: self._switch_sheet(-1),
            ord("]"): lambda: self._switch_sheet(1),
            ord("r"): self._reload,
            ord("?"): lambda: self.overlay.open_help(HELP_LINES),
        }
        action = keymap.get(ch)
        if action is None:
            return False
        action()
        return True

    # ---------------- main loop ----------------

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()
        self.redraw()

        while not self.exit_requested:
            ch = self.stdscr.getch()

            if ch == 3:  # Ctrl+C
                break

            if ch == curses.KEY_RESIZE:
                self._resize()
            elif ch == -1:
                pass
            elif self.overlay.visible:
                if self.overlay.mode == "dashboard" and self.dashboard is not None:
                    self._handle_dashboard_key(ch)
                else:
                    self.overlay.handle_key(ch)
            elif self.column_prompt.active:
                self.column_prompt.handle_key(ch)
            elif ch == ord("q"):
                break
            else:
                self.handle_table_key(ch)

            self.state.refresh_viewport(self._table_width())
            self.redraw()
