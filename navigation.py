from column_visibility import first_visible_col, last_visible_col, next_visible_col


class NavigationController:
    """Cursor moves on the active table; hidden columns are skipped."""

    def __init__(self, get_table):
        self._get_table = get_table

    @property
    def table(self):
        return self._get_table()

    def move_left(self):
        t = self.table
        t.col_cursor = next_visible_col(t, t.col_cursor, False)

    def move_right(self):
        t = self.table
        t.col_cursor = next_visible_col(t, t.col_cursor, True)

    def move_down(self, count=1):
        t = self.table
        if t.row_count == 0:
            return
        t.row_cursor = min(t.row_count - 1, t.row_cursor + count)

    def move_up(self, count=1):
        t = self.table
        t.row_cursor = max(0, t.row_cursor - count)

    def jump_top(self):
        self.table.row_cursor = 0

    def jump_bottom(self):
        t = self.table
        t.row_cursor = max(0, t.row_count - 1)

    def jump_rows_percent(self, pct, direction):
        t = self.table
        total = t.row_count
        if total == 0:
            return
        jump = max(1, int(total * pct))
        if direction == "down":
            t.row_cursor = min(total - 1, t.row_cursor + jump)
        else:
            t.row_cursor = max(0, t.row_cursor - jump)

    def jump_first_col(self):
        t = self.table
        t.col_cursor = first_visible_col(t)
        t.view_offset = 0

    def jump_last_col(self):
        t = self.table
        t.col_cursor = last_visible_col(t)
