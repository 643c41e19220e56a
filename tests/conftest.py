from __future__ import annotations

import pytest

from termtimer.screen import BufferRenderer


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def renderer() -> BufferRenderer:
    return BufferRenderer()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's TERMTIMER_* settings out of the tests."""
    for name in ("TERMTIMER_LOG_FILE", "TERMTIMER_LOG_LEVEL", "TERMTIMER_TICK_SECONDS"):
        monkeypatch.delenv(name, raising=False)
