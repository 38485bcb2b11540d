import curses
from types import SimpleNamespace

import pytest

import overlay
from overlay import OverlayView


class DummyWin:
    def __init__(self, h, w):
        self._h = h
        self._w = w
        self.lines = {}
        self.boxed = False

    def getmaxyx(self):
        return self._h, self._w

    def leaveok(self, flag):
        pass

    def erase(self):
        self.lines.clear()

    def box(self):
        self.boxed = True

    def addnstr(self, y, x, text, n, attr=0):
        self.lines[y] = (x, text[:n])

    def refresh(self):
        pass


@pytest.fixture
def view(monkeypatch):
    monkeypatch.setattr(overlay.curses, "newwin", lambda h, w, y, x: DummyWin(h, w))
    layout = SimpleNamespace(W=40, overlay_geometry=lambda mode: (10, 0))
    return OverlayView(layout)


def test_help_scrolls_within_its_lines(view):
    view.open_help([f"line {i}" for i in range(25)])

    view.handle_key(ord("j"))
    assert view.scroll == 1
    view.handle_key(curses.KEY_END)
    assert view.scroll == 15
    view.handle_key(ord("j"))
    assert view.scroll == 15
    view.handle_key(21)  # Ctrl+U
    assert view.scroll == 10
    view.handle_key(curses.KEY_HOME)
    assert view.scroll == 0


def test_leader_jumps_to_either_end(view):
    view.open_help([str(i) for i in range(25)])
    view.handle_key(ord(","))
    view.handle_key(ord("j"))
    assert view.scroll == 15
    view.handle_key(ord(","))
    view.handle_key(ord("k"))
    assert view.scroll == 0


@pytest.mark.parametrize("key", [27, ord("q"), ord("?"), ord("D")])
def test_close_keys(view, key):
    view.open_help(["x"])
    view.handle_key(key)
    assert not view.visible
    assert view.mode is None


def test_dashboard_is_rendered_to_the_box_size(view):
    calls = []

    def render(rows, cols):
        calls.append((rows, cols))
        return ["Summary", "", "Dates"]

    view.open_dashboard(render)
    view.draw()

    assert calls == [(8, 36)]
    assert view.win.boxed
    assert view.win.lines[1] == (2, "Summary")
    assert view.win.lines[3] == (2, "Dates")


def test_help_draws_from_the_scroll_offset(view):
    view.open_help([f"line {i}" for i in range(25)])
    view.handle_key(ord("j"))
    view.draw()
    assert view.win.lines[0][1].startswith("line 1")
    assert sorted(view.win.lines) == list(range(10))
