import logging
import time
from typing import Callable

from .events import Interrupt, Tick
from .screen import FrameRenderer
from .session import TimerSession
from .sources import EventSource

logger = logging.getLogger(__name__)


def run_timer(
    session: TimerSession,
    renderer: FrameRenderer,
    events: EventSource,
    clock: Callable[[], float] = time.monotonic,
) -> TimerSession:
    """Drive session until it finishes or the user stops it.

    Each iteration waits for whichever comes first, the next input event or
    the tick deadline, and handles exactly that one. Once the deadline has
    passed the tick is handled before any further input is read, so at most
    one key is handled between a due tick and its decrement. The terminal is
    released on every exit path.
    """
    period = session.tick.total_seconds()
    logger.info("Starting countdown of %s", session.initial)
    try:
        try:
            renderer.enter()
            if not session.done:
                renderer.draw_remaining(session.remaining)
        except KeyboardInterrupt:
            session.stop()
        deadline = clock() + period

        while not session.done:
            try:
                now = clock()
                event = None if now >= deadline else events.next_event(deadline - now)
                if event is None:
                    event = Tick()
                    deadline = clock() + period
                session.handle(event, renderer)
            except KeyboardInterrupt:
                session.handle(Interrupt(), renderer)
    finally:
        renderer.leave()
    logger.info("Timer ended as %s", session.state.value)
    return session
