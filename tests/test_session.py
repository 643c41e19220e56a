"""Tests for the countdown state machine."""

from __future__ import annotations

from datetime import timedelta

import pytest

from termtimer.durations import ZERO, parse_duration
from termtimer.events import Ignored, Interrupt, KeyPress, StreamClosed, Tick
from termtimer.screen import HELP_TEXT, PAUSED_TEXT, BufferRenderer
from termtimer.session import TimerSession, TimerState

PAUSE = KeyPress(" ")
QUIT = KeyPress("q")


def _session(text: str) -> TimerSession:
    return TimerSession(parse_duration(text))


def test_new_session_is_running() -> None:
    session = _session("10")
    assert session.state is TimerState.RUNNING
    assert session.remaining == session.initial == timedelta(seconds=10)
    assert not session.paused
    assert not session.paused_message_shown


def test_zero_duration_is_finished_immediately() -> None:
    assert _session("0").state is TimerState.FINISHED


def test_negative_duration_rejected() -> None:
    with pytest.raises(ValueError):
        TimerSession(timedelta(seconds=-1))


def test_initial_is_read_only() -> None:
    session = _session("10")
    with pytest.raises(AttributeError):
        session.initial = timedelta(seconds=3)  # type: ignore[misc]


def test_tick_decrements_and_redraws(renderer: BufferRenderer) -> None:
    session = _session("5")
    assert session.handle(Tick(), renderer) is TimerState.RUNNING
    assert session.remaining == timedelta(seconds=4)
    assert renderer.lines() == ["Remaining time: 4s"]


def test_frame_is_one_synchronized_batch(renderer: BufferRenderer) -> None:
    session = _session("5")
    session.handle(Tick(), renderer)
    assert renderer.ops == [
        ("begin",),
        ("clear",),
        ("move_to", 0, 0),
        ("write", "Remaining time: 4s"),
        ("end",),
    ]


def test_reaching_zero_finishes(renderer: BufferRenderer) -> None:
    session = _session("3")
    for _ in range(3):
        session.handle(Tick(), renderer)
    assert session.state is TimerState.FINISHED
    assert session.remaining == ZERO
    assert session.summary() == "Timer finished!"


def test_fractional_duration_never_goes_negative(renderer: BufferRenderer) -> None:
    session = _session("1.500")
    session.handle(Tick(), renderer)
    assert session.remaining == timedelta(milliseconds=500)
    session.handle(Tick(), renderer)
    assert session.remaining == ZERO
    assert session.state is TimerState.FINISHED


def test_pause_freezes_remaining(renderer: BufferRenderer) -> None:
    session = _session("10")
    session.handle(Tick(), renderer)
    assert session.handle(PAUSE, renderer) is TimerState.PAUSED
    for _ in range(5):
        session.handle(Tick(), renderer)
    assert session.remaining == timedelta(seconds=9)
    assert session.paused

    assert session.handle(PAUSE, renderer) is TimerState.RUNNING
    session.handle(Tick(), renderer)
    assert session.remaining == timedelta(seconds=8)


def test_pause_banner_drawn_once(renderer: BufferRenderer) -> None:
    session = _session("10")
    session.handle(Tick(), renderer)
    session.handle(PAUSE, renderer)
    session.handle(Tick(), renderer)
    session.handle(Tick(), renderer)
    assert renderer.ops.count(("write", PAUSED_TEXT)) == 1
    assert renderer.lines() == ["Remaining time: 9s", "", PAUSED_TEXT, HELP_TEXT]
    assert session.paused_message_shown


def test_paused_tick_redraws_missing_banner(renderer: BufferRenderer) -> None:
    session = _session("10")
    session.handle(PAUSE, renderer)
    session.paused_message_shown = False
    session.handle(Tick(), renderer)
    assert renderer.ops.count(("write", PAUSED_TEXT)) == 2
    assert session.paused_message_shown


def test_resume_clears_banner(renderer: BufferRenderer) -> None:
    session = _session("10")
    session.handle(Tick(), renderer)
    session.handle(PAUSE, renderer)
    session.handle(PAUSE, renderer)
    assert renderer.lines() == ["Remaining time: 9s"]
    assert not session.paused_message_shown
    assert ("clear_line", 2) in renderer.ops
    assert ("clear_line", 3) in renderer.ops


def test_double_pause_before_tick_is_a_no_op(renderer: BufferRenderer) -> None:
    session = _session("10")
    session.handle(PAUSE, renderer)
    session.handle(PAUSE, renderer)
    assert session.state is TimerState.RUNNING
    assert session.remaining == timedelta(seconds=10)
    assert not session.paused


@pytest.mark.parametrize("event", [QUIT, KeyPress("Q"), KeyPress("esc"), KeyPress("c", ctrl=True), Interrupt()])
def test_quit_and_interrupt_stop(event, renderer: BufferRenderer) -> None:
    session = _session("10")
    session.handle(Tick(), renderer)
    session.handle(Tick(), renderer)
    assert session.handle(event, renderer) is TimerState.STOPPED_BY_USER
    assert session.elapsed == session.initial - session.remaining == timedelta(seconds=2)


def test_quit_while_paused(renderer: BufferRenderer) -> None:
    session = _session("1:00")
    session.handle(Tick(), renderer)
    session.handle(PAUSE, renderer)
    session.handle(QUIT, renderer)
    assert session.state is TimerState.STOPPED_BY_USER
    assert session.summary() == "Timer stopped by user at 59s. Elapsed: 1s."


def test_stream_closed_finishes(renderer: BufferRenderer) -> None:
    session = _session("10")
    session.handle(PAUSE, renderer)
    assert session.handle(StreamClosed(), renderer) is TimerState.FINISHED
    assert session.summary() == "Timer finished!"


@pytest.mark.parametrize("event", [Ignored(), KeyPress("x"), KeyPress("z", ctrl=True)])
def test_other_events_are_ignored(event, renderer: BufferRenderer) -> None:
    session = _session("10")
    assert session.handle(event, renderer) is TimerState.RUNNING
    assert session.remaining == timedelta(seconds=10)
    assert renderer.ops == []


def test_events_after_stop_are_ignored(renderer: BufferRenderer) -> None:
    session = _session("10")
    session.handle(QUIT, renderer)
    session.handle(Tick(), renderer)
    session.handle(PAUSE, renderer)
    assert session.state is TimerState.STOPPED_BY_USER
    assert session.remaining == timedelta(seconds=10)
    assert renderer.ops == []


def test_custom_tick_period(renderer: BufferRenderer) -> None:
    session = TimerSession(timedelta(seconds=1), tick=timedelta(milliseconds=250))
    session.handle(Tick(), renderer)
    assert session.remaining == timedelta(milliseconds=750)


def test_stop_keeps_a_finished_state() -> None:
    session = _session("10")
    assert session.stop() is TimerState.STOPPED_BY_USER
    finished = _session("0")
    assert finished.stop() is TimerState.FINISHED
