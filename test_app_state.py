import unittest

import pandas as pd

from app_state import AppState
from column_visibility import hide_column


def _sheets():
    return {
        "bills": pd.DataFrame({"name": ["a", "b"], "cost": [1200.0, 5.0]}),
        "people": pd.DataFrame({"who": ["x", "y", "z"]}),
    }


class AppStateSheetTests(unittest.TestCase):
    def test_single_frame_becomes_one_sheet(self):
        state = AppState(pd.DataFrame({"a": [1]}))
        self.assertEqual(state.get_sheet_names(), ["Sheet1"])
        self.assertFalse(state.has_sheets())
        self.assertIsNone(state.switch_sheet(1))

    def test_non_frames_are_ignored(self):
        state = AppState({"bad": "nope", "good": pd.DataFrame({"a": [1]})})
        self.assertEqual(state.get_sheet_names(), ["good"])

    def test_switch_sheet_wraps_around(self):
        state = AppState(_sheets())
        self.assertEqual(state.switch_sheet(1), "people")
        self.assertEqual(state.switch_sheet(1), "bills")
        self.assertEqual(state.switch_sheet(-1), "people")
        self.assertEqual(state.get_active_sheet_name(), "people")

    def test_unknown_sheet_is_refused(self):
        state = AppState(_sheets())
        self.assertFalse(state.set_active_sheet("missing"))
        self.assertEqual(state.get_active_sheet_name(), "bills")

    def test_view_state_is_remembered_per_sheet(self):
        state = AppState(_sheets())
        hide_column(state.table, 1)
        state.switch_sheet(1)
        self.assertEqual(state.table.name, "people")
        state.switch_sheet(1)
        self.assertEqual(state.table.hidden, [1])

    def test_view_state_resets_when_not_remembered(self):
        state = AppState(_sheets(), config={"remember_view_state": False})
        hide_column(state.table, 1)
        state.switch_sheet(1)
        state.switch_sheet(1)
        self.assertEqual(state.table.hidden, [])


class AppStateViewTests(unittest.TestCase):
    def test_compact_money_only_changes_the_drawn_copy(self):
        state = AppState(_sheets())
        self.assertTrue(state.toggle_compact_money())

        view = state.view_table()

        self.assertEqual(view.cell_rows[0][2].value, "$1.2k")
        self.assertEqual(state.table.cell_rows[0][2].value, "$1,200.00")

    def test_config_drives_separator_and_fill(self):
        state = AppState(_sheets(), config={"separator": " | ", "fill_width": True})
        self.assertEqual(state.separator, " | ")
        self.assertTrue(state.fill)

    def test_refresh_viewport_scrolls_to_the_cursor(self):
        df = pd.DataFrame({f"col{i}": ["x" * 30] for i in range(8)})
        state = AppState(df)
        state.table.col_cursor = 8

        state.refresh_viewport(40)

        self.assertGreater(state.table.view_offset, 0)

        state.table.col_cursor = 0
        state.refresh_viewport(40)
        self.assertEqual(state.table.view_offset, 0)

    def test_reload_keeps_hidden_columns(self):
        state = AppState(_sheets(), file_path="bills.csv")
        hide_column(state.table, 1)

        state.reload(pd.DataFrame({"name": ["a", "b", "c"], "cost": [1.0, 2.0, 3.0]}), 80)

        self.assertEqual(state.table.hidden, [1])
        self.assertEqual(state.table.row_count, 3)
        self.assertEqual(len(state.df), 3)


if __name__ == "__main__":
    unittest.main()
