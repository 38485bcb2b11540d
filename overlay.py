import curses
from typing import Callable, List, Optional

CLOSE_KEYS = (27, ord("q"), ord("?"), ord("D"))
LEADER = ord(",")


class OverlayView:
    """Modal box over the table: the help text, or the dashboard re-rendered to fit."""

    def __init__(self, layout):
        self.layout = layout
        self.visible = False
        self.lines: List[str] = []
        self.scroll = 0
        self.win = None
        self.leader_pending = False
        self.mode: Optional[str] = None
        self.render_fn: Optional[Callable[[int, int], List[str]]] = None

    def open_help(self, lines: List[str]):
        self._open(list(lines), "help")

    def open_dashboard(self, render_fn: Callable[[int, int], List[str]]):
        self.render_fn = render_fn
        self._open([], "dashboard")

    def _open(self, lines: List[str], mode: str):
        self.mode = mode
        self.lines = lines
        self.scroll = 0
        self.leader_pending = False

        height, top = self.layout.overlay_geometry(mode)
        self.win = curses.newwin(height, self.layout.W, top, 0)
        self.win.leaveok(True)
        self.visible = True

    def close(self):
        self.visible = False
        self.win = None
        self.mode = None
        self.render_fn = None
        self.lines = []
        self.scroll = 0
        self.leader_pending = False

    def content_size(self):
        """Lines and columns available inside the box."""
        if self.win is None:
            return 0, 0
        h, w = self.win.getmaxyx()
        if self.mode == "help":
            return max(0, h), max(0, w - 1)
        return max(0, h - 2), max(0, w - 4)

    def _scroll_to(self, target: int):
        rows, _ = self.content_size()
        self.scroll = max(0, min(target, len(self.lines) - rows))

    def handle_key(self, ch):
        if not self.visible or self.win is None or ch == -1:
            return

        rows, _ = self.content_size()
        half = max(1, rows // 2)
        bottom = len(self.lines)

        if self.leader_pending:
            # ,j / ,k jump to either end; anything else just drops the leader
            self.leader_pending = False
            if ch in (ord("j"), curses.KEY_DOWN):
                self._scroll_to(bottom)
            elif ch in (ord("k"), curses.KEY_UP):
                self._scroll_to(0)
            return

        if ch in CLOSE_KEYS:
            self.close()
            return
        if ch == LEADER:
            self.leader_pending = True
            return

        moves = {
            ord("j"): self.scroll + 1,
            curses.KEY_DOWN: self.scroll + 1,
            ord("k"): self.scroll - 1,
            curses.KEY_UP: self.scroll - 1,
            curses.KEY_NPAGE: self.scroll + half,
            4: self.scroll + half,  # Ctrl+D
            curses.KEY_PPAGE: self.scroll - half,
            21: self.scroll - half,  # Ctrl+U
            curses.KEY_HOME: 0,
            curses.KEY_END: bottom,
        }
        if ch in moves:
            self._scroll_to(moves[ch])

    def draw(self):
        if not self.visible or self.win is None:
            return
        win = self.win
        win.erase()
        _, w = win.getmaxyx()
        rows, cols = self.content_size()

        if self.mode == "help":
            top, left = 0, 0
        else:
            win.box()
            top, left = 1, 2
            if self.render_fn is not None:
                # the dashboard fits itself to the box, so it never scrolls
                self.lines = self.render_fn(rows, cols)
                self.scroll = 0

        for i, line in enumerate(self.lines[self.scroll:self.scroll + rows]):
            if self.mode == "help":
                line = line.ljust(cols)
            try:
                win.addnstr(top + i, left, line, cols)
            except curses.error:
                pass
        win.refresh()
