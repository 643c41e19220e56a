import curses
import sys
from contextlib import contextmanager
from datetime import timedelta
from typing import Dict, Iterator, List, Optional, TextIO, Tuple

from .durations import format_duration
from .errors import SystemFault

STATUS_ROW = 2
HELP_ROW = 3
PAUSED_TEXT = "PAUSED"
HELP_TEXT = "Press space to resume, q to quit"

ENTER_ALT_SCREEN = "\x1b[?1049h"
LEAVE_ALT_SCREEN = "\x1b[?1049l"


def remaining_line(remaining: timedelta) -> str:
    return f"Remaining time: {format_duration(remaining)}"


class FrameRenderer:
    """Terminal capabilities used by the timer loop.

    Subclasses provide the primitives; the composed frame operations below
    group them into begin/end batches so a frame never shows half drawn.
    """

    def enter(self) -> None:
        raise NotImplementedError

    def leave(self) -> None:
        raise NotImplementedError

    def begin_update(self) -> None:
        raise NotImplementedError

    def end_update(self) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def clear_line(self, row: int) -> None:
        raise NotImplementedError

    def move_to(self, col: int, row: int) -> None:
        raise NotImplementedError

    def write(self, text: str) -> None:
        raise NotImplementedError

    def draw_remaining(self, remaining: timedelta) -> None:
        self.begin_update()
        self.clear()
        self.move_to(0, 0)
        self.write(remaining_line(remaining))
        self.end_update()

    def draw_paused_banner(self) -> None:
        self.begin_update()
        for row, text in ((STATUS_ROW, PAUSED_TEXT), (HELP_ROW, HELP_TEXT)):
            self.clear_line(row)
            self.move_to(0, row)
            self.write(text)
        self.end_update()

    def clear_paused_banner(self) -> None:
        self.begin_update()
        self.clear_line(STATUS_ROW)
        self.clear_line(HELP_ROW)
        self.end_update()


@contextmanager
def _terminal_io(title: str) -> Iterator[None]:
    try:
        yield
    except (curses.error, OSError, ValueError) as err:
        raise SystemFault(title) from err


class CursesRenderer(FrameRenderer):
    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.stdscr = None
        self._cursor: Tuple[int, int] = (0, 0)

    def enter(self) -> None:
        with _terminal_io("Failed to enter alternate screen"):
            self.stdscr = curses.initscr()
            self.stream.write(ENTER_ALT_SCREEN)
            self.stream.flush()
            curses.noecho()
            curses.raw()
            self.stdscr.keypad(True)
            self.stdscr.nodelay(True)
            try:
                curses.curs_set(0)
            except curses.error:
                pass

    def leave(self) -> None:
        stdscr, self.stdscr = self.stdscr, None
        if stdscr is None:
            return
        with _terminal_io("Failed to restore the terminal"):
            try:
                stdscr.keypad(False)
                curses.noraw()
                curses.echo()
                try:
                    curses.curs_set(1)
                except curses.error:
                    pass
            finally:
                curses.endwin()
                self.stream.write(LEAVE_ALT_SCREEN)
                self.stream.flush()

    def _size(self) -> Tuple[int, int]:
        rows, cols = self.stdscr.getmaxyx()
        return rows, cols

    def begin_update(self) -> None:
        # Drawing only touches the curses virtual screen until end_update.
        pass

    def end_update(self) -> None:
        with _terminal_io("Failed to write to the terminal"):
            self.stdscr.noutrefresh()
            curses.doupdate()

    def clear(self) -> None:
        with _terminal_io("Failed to write to the terminal"):
            self.stdscr.erase()

    def clear_line(self, row: int) -> None:
        rows, _cols = self._size()
        if not 0 <= row < rows:
            return
        with _terminal_io("Failed to write to the terminal"):
            self.stdscr.move(row, 0)
            self.stdscr.clrtoeol()

    def move_to(self, col: int, row: int) -> None:
        self._cursor = (col, row)

    def write(self, text: str) -> None:
        col, row = self._cursor
        rows, cols = self._size()
        if not (0 <= row < rows and 0 <= col < cols - 1):
            return
        text = text[: cols - 1 - col]
        with _terminal_io("Failed to write to the terminal"):
            self.stdscr.addstr(row, col, text)
        self._cursor = (col + len(text), row)


class LineRenderer(FrameRenderer):
    """Single-line output for terminals without full-screen support."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self._pending: List[str] = []
        self._width = 0
        self._used = False

    def enter(self) -> None:
        pass

    def leave(self) -> None:
        if not self._used:
            return
        with _terminal_io("Failed to restore the terminal"):
            self.stream.write("\n")
            self.stream.flush()

    def begin_update(self) -> None:
        self._pending = []

    def end_update(self) -> None:
        with _terminal_io("Failed to write to the terminal"):
            self.stream.write("".join(self._pending))
            self.stream.flush()
        self._pending = []
        self._used = True

    def clear(self) -> None:
        self._pending.append("\r" + " " * self._width + "\r")
        self._width = 0

    def clear_line(self, row: int) -> None:
        # Every row shares the one output line.
        self.clear()

    def move_to(self, col: int, row: int) -> None:
        pass

    def write(self, text: str) -> None:
        self._pending.append(text)
        self._width += len(text)


class BufferRenderer(FrameRenderer):
    """Keeps the frame in memory; used where there is no terminal to draw on."""

    def __init__(self) -> None:
        self.ops: List[tuple] = []
        self.screen: Dict[int, str] = {}
        self.active = False
        self.batches = 0
        self._cursor: Tuple[int, int] = (0, 0)

    def enter(self) -> None:
        self.ops.append(("enter",))
        self.active = True

    def leave(self) -> None:
        self.ops.append(("leave",))
        self.active = False

    def begin_update(self) -> None:
        self.ops.append(("begin",))

    def end_update(self) -> None:
        self.ops.append(("end",))
        self.batches += 1

    def clear(self) -> None:
        self.ops.append(("clear",))
        self.screen.clear()

    def clear_line(self, row: int) -> None:
        self.ops.append(("clear_line", row))
        self.screen.pop(row, None)

    def move_to(self, col: int, row: int) -> None:
        self.ops.append(("move_to", col, row))
        self._cursor = (col, row)

    def write(self, text: str) -> None:
        self.ops.append(("write", text))
        col, row = self._cursor
        line = self.screen.get(row, "").ljust(col)
        self.screen[row] = line[:col] + text + line[col + len(text):]
        self._cursor = (col + len(text), row)

    def lines(self) -> List[str]:
        if not self.screen:
            return []
        return [self.screen.get(row, "") for row in range(max(self.screen) + 1)]
