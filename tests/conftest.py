"""Shared test fixtures."""

from __future__ import annotations

import pytest

from pomodoro_cycle.timer import ManualScheduler, Phase, PomodoroTimer


def make_settings(
    focus: float | None = 0,
    short_break: float | None = 0,
    long_break: float | None = 0,
    interval: int | None = None,
) -> dict:
    """Build a settings mapping in the camelCase shape a settings store hands over."""
    return {
        "focus": {"duration": focus},
        "shortBreak": {"duration": short_break},
        "longBreak": {"duration": long_break, "interval": interval},
    }


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def make_timer(scheduler):
    """Create a timer on virtual time."""

    def _make(settings: dict, phase: Phase = Phase.FOCUS) -> PomodoroTimer:
        return PomodoroTimer(settings, phase, scheduler=scheduler)

    return _make
