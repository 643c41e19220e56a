from dataclasses import dataclass
from enum import Enum
from typing import Union

QUIT_KEYS = ("q", "Q", "esc")
PAUSE_KEYS = (" ", "p", "P")
INTERRUPT_CHORD = "c"


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class KeyPress:
    code: str
    ctrl: bool = False


@dataclass(frozen=True)
class Ignored:
    pass


@dataclass(frozen=True)
class StreamClosed:
    pass


@dataclass(frozen=True)
class Interrupt:
    pass


Event = Union[Tick, KeyPress, Ignored, StreamClosed, Interrupt]


class Command(Enum):
    TICK = "tick"
    PAUSE = "pause"
    QUIT = "quit"
    CLOSE = "close"
    NONE = "none"


def classify(event: Event) -> Command:
    if isinstance(event, Tick):
        return Command.TICK
    if isinstance(event, Interrupt):
        return Command.QUIT
    if isinstance(event, StreamClosed):
        return Command.CLOSE
    if isinstance(event, KeyPress):
        if event.ctrl:
            if event.code.lower() == INTERRUPT_CHORD:
                return Command.QUIT
            return Command.NONE
        if event.code in QUIT_KEYS:
            return Command.QUIT
        if event.code in PAUSE_KEYS:
            return Command.PAUSE
    return Command.NONE
