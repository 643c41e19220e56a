import logging
from datetime import timedelta
from enum import Enum

from .durations import SECOND, ZERO, format_duration
from .events import Command, Event, classify
from .screen import FrameRenderer

logger = logging.getLogger(__name__)


class TimerState(Enum):
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"
    STOPPED_BY_USER = "stopped_by_user"


TERMINAL_STATES = (TimerState.FINISHED, TimerState.STOPPED_BY_USER)


class TimerSession:
    """Countdown state mutated one event at a time by the timer loop."""

    def __init__(self, duration: timedelta, tick: timedelta = SECOND) -> None:
        if duration < ZERO:
            raise ValueError("duration must not be negative")
        if tick <= ZERO:
            raise ValueError("tick must be positive")
        self._initial = duration
        self.tick = tick
        self.remaining = duration
        self.paused = False
        self.paused_message_shown = False
        self.state = TimerState.FINISHED if duration == ZERO else TimerState.RUNNING

    @property
    def initial(self) -> timedelta:
        return self._initial

    @property
    def elapsed(self) -> timedelta:
        return self._initial - self.remaining

    @property
    def done(self) -> bool:
        return self.state in TERMINAL_STATES

    def handle(self, event: Event, renderer: FrameRenderer) -> TimerState:
        if self.done:
            return self.state

        command = classify(event)
        if command is Command.TICK:
            self._on_tick(renderer)
        elif command is Command.PAUSE:
            self._toggle_pause(renderer)
        elif command is Command.QUIT:
            self.stop()
        elif command is Command.CLOSE:
            logger.info("Input stream closed, finishing")
            self.state = TimerState.FINISHED
        return self.state

    def stop(self) -> TimerState:
        if not self.done:
            logger.info("Stopped by user with %s remaining", format_duration(self.remaining))
            self.state = TimerState.STOPPED_BY_USER
        return self.state

    def _on_tick(self, renderer: FrameRenderer) -> None:
        if self.paused:
            if not self.paused_message_shown:
                renderer.draw_paused_banner()
                self.paused_message_shown = True
            return

        self.remaining = max(ZERO, self.remaining - self.tick)
        if self.remaining == ZERO:
            logger.info("Countdown of %s finished", format_duration(self._initial))
            self.state = TimerState.FINISHED
            return
        renderer.draw_remaining(self.remaining)

    def _toggle_pause(self, renderer: FrameRenderer) -> None:
        if self.paused:
            if self.paused_message_shown:
                renderer.clear_paused_banner()
            self.paused = False
            self.paused_message_shown = False
            self.state = TimerState.RUNNING
            logger.debug("Resumed with %s remaining", self.remaining)
            return

        self.paused = True
        self.state = TimerState.PAUSED
        renderer.draw_paused_banner()
        self.paused_message_shown = True
        logger.debug("Paused with %s remaining", self.remaining)

    def summary(self) -> str:
        if self.state is TimerState.STOPPED_BY_USER:
            return (
                f"Timer stopped by user at {format_duration(self.remaining)}. "
                f"Elapsed: {format_duration(self.elapsed)}."
            )
        if self.state is TimerState.FINISHED:
            return "Timer finished!"
        return f"Remaining time: {format_duration(self.remaining)}"
