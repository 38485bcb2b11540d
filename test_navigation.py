import unittest

from navigation import NavigationController
from table_model import Cell, ColumnSpec, TableState


def _state(cols=5, rows=20):
    specs = [ColumnSpec(f"c{i}") for i in range(cols)]
    cell_rows = [[Cell(str(r)) for _ in range(cols)] for r in range(rows)]
    return TableState(name="t", specs=specs, cell_rows=cell_rows)


class NavigationTests(unittest.TestCase):
    def setUp(self):
        self.state = _state()
        self.nav = NavigationController(lambda: self.state)

    def test_horizontal_moves_skip_hidden_columns(self):
        self.state.hidden = [1, 2]
        self.nav.move_right()
        self.assertEqual(self.state.col_cursor, 3)
        self.nav.move_left()
        self.assertEqual(self.state.col_cursor, 0)

    def test_horizontal_moves_stop_at_the_edges(self):
        self.nav.move_left()
        self.assertEqual(self.state.col_cursor, 0)
        self.state.col_cursor = 4
        self.nav.move_right()
        self.assertEqual(self.state.col_cursor, 4)

    def test_vertical_moves_are_clamped(self):
        self.nav.move_up()
        self.assertEqual(self.state.row_cursor, 0)
        self.nav.move_down(50)
        self.assertEqual(self.state.row_cursor, 19)

    def test_top_and_bottom(self):
        self.nav.jump_bottom()
        self.assertEqual(self.state.row_cursor, 19)
        self.nav.jump_top()
        self.assertEqual(self.state.row_cursor, 0)

    def test_percent_jumps(self):
        self.nav.jump_rows_percent(0.1, "down")
        self.assertEqual(self.state.row_cursor, 2)
        self.nav.jump_rows_percent(0.5, "up")
        self.assertEqual(self.state.row_cursor, 0)

    def test_first_and_last_visible_column(self):
        self.state.hidden = [0, 4]
        self.state.view_offset = 2
        self.nav.jump_last_col()
        self.assertEqual(self.state.col_cursor, 3)
        self.nav.jump_first_col()
        self.assertEqual(self.state.col_cursor, 1)
        self.assertEqual(self.state.view_offset, 0)

    def test_empty_table_does_not_move(self):
        self.state = _state(rows=0)
        self.nav.move_down()
        self.nav.jump_rows_percent(0.1, "down")
        self.nav.jump_bottom()
        self.assertEqual(self.state.row_cursor, 0)


if __name__ == "__main__":
    unittest.main()
