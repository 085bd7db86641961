"""Pomodoro timer state machine with live-read settings."""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable

from pomodoro_cycle.timer.clock import AsyncioScheduler, Countdown, Scheduler
from pomodoro_cycle.timer.events import ExpiryCallback, ExpiryNotifier
from pomodoro_cycle.timer.phase import (
    Phase,
    coerce_phase,
    next_phase,
    phase_duration_seconds,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimerState:
    """Point-in-time view of the timer."""
    phase: Phase
    pomodoro_count: int
    completed: bool
    running: bool
    time_remaining: float

    @property
    def time_remaining_display(self) -> str:
        """Format time remaining as MM:SS."""
        minutes, seconds = divmod(int(math.ceil(self.time_remaining)), 60)
        return f"{minutes:02d}:{seconds:02d}"


class PomodoroTimer:
    """Cycles Focus, short break and long break phases.

    The settings object is kept by reference and read whenever a duration or
    the long break interval is needed, so changes made by its owner show up
    in ``next_phase`` immediately and in durations from the next session on.

    Usage:
        timer = PomodoroTimer(settings, Phase.FOCUS)
        timer.subscribe(lambda phase: print(f"{phase.label} complete!"))

        timer.start()         # runs the initial Focus session
        await timer.expired()
        timer.next_phase      # Phase.SHORT_BREAK
        timer.start()         # advances to the short break
    """

    def __init__(
        self,
        settings: Any,
        initial_phase: Phase | str = Phase.FOCUS,
        *,
        scheduler: Scheduler | None = None,
    ):
        self.settings = settings
        self._phase = coerce_phase(initial_phase)
        self._pomodoro_count = 0
        self._completed = False
        # Seconds left in the current session while stopped. None until the
        # initial session's duration is first needed.
        self._remaining: float | None = None

        self._countdown = Countdown(scheduler or AsyncioScheduler())
        self._notifier = ExpiryNotifier()

    # ----- Read-only state -----
    @property
    def phase(self) -> Phase:
        return self._phase

    @phase.setter
    def phase(self, value: Phase | str) -> None:
        # Manual override: discards the current session and the pomodoro count.
        phase = coerce_phase(value)
        remaining = phase_duration_seconds(self.settings, phase)

        self._countdown.cancel()
        self._completed = False
        self._pomodoro_count = 0
        self._phase = phase
        self._remaining = remaining
        logger.info(f"Pomodoro phase set: {phase.value}")

    @property
    def next_phase(self) -> Phase:
        """Phase entered by the next advancing :meth:`start`."""
        return next_phase(self._phase, self._pomodoros_before_current(), self.settings)

    @property
    def pomodoro_count(self) -> int:
        """Focus sessions completed since the last long break or reset."""
        return self._pomodoro_count

    @property
    def is_running(self) -> bool:
        return self._countdown.armed

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def time_remaining(self) -> float:
        """Seconds left in the current session."""
        if self._countdown.armed:
            return self._countdown.remaining()
        if self._remaining is None:
            return phase_duration_seconds(self.settings, self._phase)
        return self._remaining

    @property
    def state(self) -> TimerState:
        return TimerState(
            phase=self._phase,
            pomodoro_count=self._pomodoro_count,
            completed=self._completed,
            running=self.is_running,
            time_remaining=self.time_remaining,
        )

    # ----- Notifications -----
    def subscribe(self, callback: ExpiryCallback) -> Callable[[], None]:
        """Call ``callback(phase)`` whenever a countdown runs out."""
        return self._notifier.subscribe(callback)

    def unsubscribe(self, callback: ExpiryCallback) -> bool:
        return self._notifier.unsubscribe(callback)

    async def expired(self) -> Phase:
        """Wait for the next natural expiry and return the phase that completed."""
        future: asyncio.Future[Phase] = asyncio.get_running_loop().create_future()

        def on_expire(phase: Phase) -> None:
            if not future.done():
                future.set_result(phase)

        unsubscribe = self.subscribe(on_expire)
        try:
            return await future
        finally:
            unsubscribe()

    # ----- Control -----
    def start(self) -> None:
        """Start the current session, advancing first if the last one completed."""
        if self._countdown.armed:
            return

        target = self.next_phase if self._completed else self._phase
        if self._completed or self._remaining is None:
            remaining = phase_duration_seconds(self.settings, target)
        else:
            remaining = self._remaining

        # State is only committed once the countdown is armed.
        self._countdown.arm(remaining, self._expire)
        if self._completed:
            self._advance(target)
        self._remaining = remaining
        logger.info(
            f"Pomodoro timer started: {self._phase.value} ({self._remaining:.0f}s)"
        )

    def stop(self) -> None:
        """Stop the countdown, keeping the remaining time for a later resume."""
        if not self._countdown.armed:
            return

        self._remaining = self._countdown.cancel()
        logger.info(
            f"Pomodoro timer stopped: {self._phase.value} ({self._remaining:.0f}s left)"
        )

    def start_cycle(self) -> None:
        """Restart the cycle from a fresh Focus session."""
        self.phase = Phase.FOCUS
        self.start()

    def get_summary(self) -> dict:
        """Get a summary of the current state."""
        state = self.state
        return {
            "phase": state.phase.value,
            "next_phase": self.next_phase.value,
            "is_running": state.running,
            "completed": state.completed,
            "time_remaining": state.time_remaining_display,
            "pomodoro_count": state.pomodoro_count,
        }

    # ----- Internals -----
    def _pomodoros_before_current(self) -> int:
        # A completed Focus session is already counted; the policy counts the
        # session being finished itself.
        if self._phase is Phase.FOCUS and self._completed:
            return self._pomodoro_count - 1
        return self._pomodoro_count

    def _advance(self, target: Phase) -> None:
        if target is Phase.LONG_BREAK:
            self._pomodoro_count = 0
        logger.info(f"Pomodoro phase change: {self._phase.value} -> {target.value}")
        self._phase = target
        self._completed = False

    def _expire(self) -> None:
        completed_phase = self._phase
        self._completed = True
        self._remaining = 0.0
        if completed_phase is Phase.FOCUS:
            self._pomodoro_count += 1

        logger.info(
            f"Pomodoro phase complete: {completed_phase.value} "
            f"(pomodoros: {self._pomodoro_count})"
        )
        self._notifier.emit(completed_phase)
