"""Pomodoro timer: phase policy, countdown clock and state machine."""

from pomodoro_cycle.timer.clock import AsyncioScheduler, Countdown, ManualScheduler, Scheduler
from pomodoro_cycle.timer.errors import InvalidPhaseError, InvalidSettingsError, PomodoroError
from pomodoro_cycle.timer.events import TIMER_EXPIRED, ExpiryNotifier
from pomodoro_cycle.timer.phase import Phase, next_phase
from pomodoro_cycle.timer.pomodoro import PomodoroTimer, TimerState

__all__ = [
    "AsyncioScheduler",
    "Countdown",
    "ManualScheduler",
    "Scheduler",
    "InvalidPhaseError",
    "InvalidSettingsError",
    "PomodoroError",
    "TIMER_EXPIRED",
    "ExpiryNotifier",
    "Phase",
    "next_phase",
    "PomodoroTimer",
    "TimerState",
]
