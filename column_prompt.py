import curses
from typing import Callable

from column_finder import jump_to_column, rank_columns


class ColumnPrompt:
    """``/`` prompt: type part of a column title, Enter jumps there (un-hiding it)."""

    PROMPT = "/"

    def __init__(self, get_table: Callable, set_status_cb: Callable[[str, int], None]):
        self._get_table = get_table
        self._set_status = set_status_cb

        self.active = False
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0
        self.choice = 0  # index into the current matches

    # ---------- public API ----------
    def start(self):
        self.active = True
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0
        self.choice = 0

    def matches(self) -> list[int]:
        return rank_columns(self._get_table(), self.buffer)

    def handle_key(self, ch):
        if not self.active:
            return

        if ch in (10, 13, curses.KEY_ENTER):
            self._handle_enter()
            return

        if ch == 27:  # Esc
            self._reset()
            return

        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if self.cursor > 0:
                self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
                self.cursor -= 1
                self.choice = 0
            return

        if ch in (curses.KEY_DOWN, 14):  # Down / Ctrl+N
            self.choice = min(self.choice + 1, max(0, len(self.matches()) - 1))
            return

        if ch in (curses.KEY_UP, 16):  # Up / Ctrl+P
            self.choice = max(0, self.choice - 1)
            return

        if ch == curses.KEY_LEFT:
            self.cursor = max(0, self.cursor - 1)
            return

        if ch == curses.KEY_RIGHT:
            self.cursor = min(len(self.buffer), self.cursor + 1)
            return

        if ch == curses.KEY_HOME:
            self.cursor = 0
            return

        if ch == curses.KEY_END:
            self.cursor = len(self.buffer)
            return

        if 32 <= ch <= 126:
            self.buffer = self.buffer[: self.cursor] + chr(ch) + self.buffer[self.cursor :]
            self.cursor += 1
            self.choice = 0
            return

    def hint(self) -> str:
        """Current candidate, as shown to the right of the query."""
        table = self._get_table()
        found = self.matches()
        if not found:
            return "no match"
        idx = found[min(self.choice, len(found) - 1)]
        title = table.specs[idx].title
        if table.is_hidden(idx):
            title += " (hidden)"
        return f"→ {title}  [{min(self.choice, len(found) - 1) + 1}/{len(found)}]"

    def draw(self, win):
        if not self.active:
            return

        prompt = self.PROMPT
        hint = "  " + self.hint()
        h, w = win.getmaxyx()
        text_w = max(1, w - len(prompt) - len(hint) - 1)

        if self.cursor < self.hscroll:
            self.hscroll = self.cursor
        elif self.cursor > self.hscroll + text_w:
            self.hscroll = self.cursor - text_w

        start = self.hscroll
        end = start + text_w
        visible = self.buffer[start:end]

        try:
            win.addnstr(0, 0, prompt, len(prompt))
            win.addnstr(0, len(prompt), visible, text_w)
            win.addnstr(0, len(prompt) + len(visible), hint, max(0, w - len(prompt) - len(visible) - 1), curses.A_DIM)
            win.move(0, len(prompt) + (self.cursor - self.hscroll))
        except curses.error:
            pass
        win.refresh()

    # ---------- internals ----------
    def _handle_enter(self):
        found = self.matches()
        if not found:
            self._set_status(f"No column matches: {self.buffer.strip()}", 3)
            return
        table = self._get_table()
        idx = found[min(self.choice, len(found) - 1)]
        jump_to_column(table, idx)
        self._set_status(f"Column: {table.specs[idx].title}", 2)
        self._reset()

    def _reset(self):
        self.active = False
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0
        self.choice = 0
