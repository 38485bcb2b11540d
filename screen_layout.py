import curses


class ScreenLayout:
    def __init__(self, stdscr):
        self.stdscr = stdscr
        self.H, self.W = stdscr.getmaxyx()

        # layout: table (main), status bar (1 line), prompt/hint line (1 line), optional overlay
        self.status_h = 1
        self.cmd_h = 1

        self.table_h = max(1, self.H - self.status_h - self.cmd_h)

        self.table_win = curses.newwin(self.table_h, self.W, 0, 0)
        # grid pane must never own cursor
        self.table_win.leaveok(True)

        self.status_win = curses.newwin(self.status_h, self.W, self.table_h, 0)
        # do not let status bar steal cursor
        self.status_win.leaveok(True)

        self.cmd_win = curses.newwin(self.cmd_h, self.W, self.table_h + self.status_h, 0)

    def overlay_geometry(self, mode: str):
        """``(height, y)`` of the overlay: help takes the whole screen, the dashboard the table area."""
        if mode == "help":
            return max(3, self.H), 0
        return max(3, self.table_h), 0
