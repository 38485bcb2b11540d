import time

from column_widths import display_width
from status_bar import render_status


def _context(**overrides):
    ctx = {
        "status_msg": None,
        "status_until": 0,
        "mode": "TABLE",
        "file_path": "/tmp/data/bills.csv",
        "sheet": "bills",
        "sheet_count": 1,
        "row_cursor": 4,
        "total_rows": 10,
        "sort_summary": "",
        "compact": False,
        "hidden_badges": "",
    }
    ctx.update(overrides)
    return ctx


def test_plain_status_line():
    assert render_status(_context(), 40).rstrip() == " TABLE | bills.csv | row 5/10"


def test_everything_shown():
    ctx = _context(sheet_count=2, sort_summary="name▲", compact=True, hidden_badges="◀ cost")
    line = render_status(ctx, 100).rstrip()
    assert line == " TABLE | bills.csv | [bills] | row 5/10 | sort name▲ | $k | ◀ cost"


def test_transient_message_wins_until_it_expires():
    ctx = _context(status_msg="Sort cleared", status_until=time.time() + 60)
    assert render_status(ctx, 30).rstrip() == " Sort cleared"

    ctx["status_until"] = time.time() - 1
    assert render_status(ctx, 30).startswith(" TABLE")


def test_empty_table_shows_row_zero():
    assert "row 0/0" in render_status(_context(total_rows=0, row_cursor=0), 60)


def test_output_fills_the_width_exactly():
    for width in (10, 25, 80):
        assert display_width(render_status(_context(hidden_badges="◀ a · b ▶"), width)) == width


def test_filter_state_follows_the_sort():
    ctx = _context(sort_summary="cost▼", filter="filter status: plan")
    line = render_status(ctx, 100).rstrip()
    assert line == " TABLE | bills.csv | row 5/10 | sort cost▼ | filter status: plan"
