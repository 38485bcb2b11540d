import curses

from table_model import selected_row_meta
from table_view import render_table


class GridPane:
    """Draws the active table into a curses window and highlights the cursor."""

    PAIR_CELL_TEXT = 1
    PAIR_CHROME = 2

    def __init__(self):
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(self.PAIR_CELL_TEXT, curses.COLOR_WHITE, -1)
            curses.init_pair(self.PAIR_CHROME, curses.COLOR_CYAN, -1)
        except curses.error:
            pass

        self.last_render = None

    @staticmethod
    def _attr(pair):
        try:
            return curses.color_pair(pair)
        except curses.error:
            return 0

    def render(self, table, win, separator=" │ ", fill=False):
        h, w = win.getmaxyx()
        # keep the last column free; writing there scrolls some terminals
        self.last_render = render_table(table, max(0, w - 1), h, separator, fill=fill)
        return self.last_render

    def draw(self, win, table, separator=" │ ", fill=False):
        win.erase()
        try:
            win.bkgd(" ", self._attr(self.PAIR_CELL_TEXT))
        except curses.error:
            pass
        h, w = win.getmaxyx()
        rendered = self.render(table, win, separator, fill)

        chrome = self._attr(self.PAIR_CHROME)
        for y, line in enumerate(rendered.lines[:h]):
            attr = curses.A_BOLD if y == rendered.header_line else 0
            if rendered.first_row_line < 0 or y < rendered.first_row_line or y >= rendered.first_row_line + rendered.row_count:
                if y != rendered.header_line:
                    attr = chrome
            elif _is_dim(table, rendered.row_start + y - rendered.first_row_line):
                attr = curses.A_DIM
            try:
                win.addnstr(y, 0, line, max(0, w - 1), attr)
            except curses.error:
                pass

        self._highlight_cursor(win, rendered, table)
        win.refresh()

    def _highlight_cursor(self, win, rendered, table):
        col = rendered.cursor_col
        if col < 0 or col >= len(rendered.col_offsets):
            return
        x = rendered.col_offsets[col]
        width = rendered.widths[col]
        try:
            win.chgat(rendered.header_line, x, width, curses.A_BOLD | curses.A_UNDERLINE)
            if rendered.cursor_line >= 0:
                attr = curses.A_REVERSE
                meta = selected_row_meta(table)
                if meta is not None and (meta.deleted or meta.dimmed):
                    attr |= curses.A_DIM
                win.chgat(rendered.cursor_line, x, width, attr)
        except curses.error:
            pass


def _is_dim(table, row):
    if row < 0 or row >= len(table.rows):
        return False
    meta = table.rows[row]
    return meta.deleted or meta.dimmed
