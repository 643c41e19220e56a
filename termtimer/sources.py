import curses
import logging
import select
import sys
import time
from collections import deque
from typing import Iterable, List, Optional

from .errors import SystemFault
from .events import Event, Ignored, KeyPress, StreamClosed

logger = logging.getLogger(__name__)

KEY_CTRL_C = 3
KEY_ESC = 27


def decode_key(ch: int) -> Event:
    if ch == KEY_CTRL_C:
        return KeyPress("c", ctrl=True)
    if ch == KEY_ESC:
        return KeyPress("esc")
    if ch == curses.KEY_RESIZE:
        return Ignored()
    if 1 <= ch <= 26:
        return KeyPress(chr(ch + 96), ctrl=True)
    if 32 <= ch <= 126:
        return KeyPress(chr(ch))
    return Ignored()


class EventSource:
    def next_event(self, timeout: float) -> Optional[Event]:
        """Return the next input event, or None once timeout seconds pass."""
        raise NotImplementedError


class CursesEventSource(EventSource):
    """Keys from the screen a CursesRenderer has entered."""

    def __init__(self, renderer, stdin=None) -> None:
        self.renderer = renderer
        self.stdin = stdin if stdin is not None else sys.stdin

    @property
    def stdscr(self):
        return self.renderer.stdscr

    def _read_key(self) -> Optional[Event]:
        try:
            ch = self.stdscr.getch()
        except curses.error as err:
            raise SystemFault("Failed to read the terminal events") from err
        if ch == -1:
            return None
        event = decode_key(ch)
        logger.debug("key %r decoded as %r", ch, event)
        return event

    def _wait(self, timeout: float) -> bool:
        try:
            ready, _, _ = select.select([self.stdin], [], [], max(0.0, timeout))
        except (OSError, ValueError) as err:
            raise SystemFault("Failed to read the terminal events") from err
        return bool(ready)

    def next_event(self, timeout: float) -> Optional[Event]:
        event = self._read_key()
        if event is not None:
            return event
        if not self._wait(timeout):
            return None
        event = self._read_key()
        if event is None:
            # Readable with nothing to decode means the input hit end of file.
            return StreamClosed()
        return event


class SleepEventSource(EventSource):
    """No keyboard; only the clock and Ctrl+C drive the timer."""

    def next_event(self, timeout: float) -> Optional[Event]:
        time.sleep(max(0.0, timeout))
        return None


class ScriptedEventSource(EventSource):
    """Replays a fixed list of events; None entries stand for a timeout."""

    def __init__(self, events: Iterable[Optional[Event]], clock=None) -> None:
        self._events = deque(events)
        self.clock = clock
        self.timeouts: List[float] = []

    def next_event(self, timeout: float) -> Optional[Event]:
        self.timeouts.append(timeout)
        if not self._events:
            return StreamClosed()
        event = self._events.popleft()
        if event is None and self.clock is not None:
            self.clock.advance(timeout)
        if isinstance(event, BaseException):
            raise event
        return event
