"""Scheduling primitives and the single-shot countdown used by the timer."""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
import time
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    """Minimal clock capability the countdown needs."""

    def now(self) -> float:
        """Current time in seconds on a monotonic scale."""
        ...

    def arm(self, delay_seconds: float, callback: Callable[[], None]) -> Any:
        """Schedule ``callback`` once after ``delay_seconds`` and return a handle."""
        ...

    def cancel(self, handle: Any) -> None:
        """Cancel a handle returned by :meth:`arm`."""
        ...


class AsyncioScheduler:
    """Scheduler backed by the asyncio event loop.

    The loop is bound on first use, so the scheduler can be created before
    the loop starts running.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        if self._loop is None:
            try:
                self._loop = asyncio.get_running_loop()
            except RuntimeError:
                return time.monotonic()
        return self._loop.time()

    def arm(self, delay_seconds: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._get_loop().call_later(max(0.0, delay_seconds), callback)

    def cancel(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()


class _ManualHandle:
    __slots__ = ("deadline", "callback", "cancelled")

    def __init__(self, deadline: float, callback: Callable[[], None]):
        self.deadline = deadline
        self.callback = callback
        self.cancelled = False


class ManualScheduler:
    """Virtual-time scheduler; time only moves when :meth:`advance` is called.

    Usage:
        scheduler = ManualScheduler()
        timer = PomodoroTimer(settings, Phase.FOCUS, scheduler=scheduler)
        timer.start()
        scheduler.advance(25 * 60)  # fires the expiry
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._queue: list[tuple[float, int, _ManualHandle]] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self._now

    def arm(self, delay_seconds: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle(self._now + max(0.0, delay_seconds), callback)
        heapq.heappush(self._queue, (handle.deadline, next(self._sequence), handle))
        return handle

    def cancel(self, handle: _ManualHandle) -> None:
        handle.cancelled = True

    @property
    def pending(self) -> int:
        """Number of callbacks still waiting to fire."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def advance(self, seconds: float = 0.0) -> int:
        """Move time forward, firing due callbacks in deadline order.

        Callbacks armed while advancing also fire if they fall due before the
        target time. Returns the number of callbacks fired.
        """
        if seconds < 0:
            raise ValueError("Cannot move time backwards")

        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            deadline, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = deadline
            handle.callback()
            fired += 1
        self._now = target
        return fired


class Countdown:
    """Single outstanding countdown over a :class:`Scheduler`."""

    def __init__(self, scheduler: Scheduler):
        self._scheduler = scheduler
        self._handle: Any = None
        self._token: object | None = None
        self._end: float | None = None

    @property
    def armed(self) -> bool:
        return self._token is not None

    def arm(self, seconds: float, on_expire: Callable[[], None]) -> None:
        """Start counting down ``seconds`` and call ``on_expire`` at zero."""
        if self.armed:
            raise RuntimeError("Countdown is already armed")

        seconds = max(0.0, seconds)
        token = object()
        # Nothing is recorded until the scheduler accepts the callback; the end
        # time is read from the clock that arming bound.
        handle = self._scheduler.arm(seconds, lambda: self._fire(token, on_expire))
        self._handle = handle
        self._token = token
        self._end = self._scheduler.now() + seconds
        logger.debug(f"Countdown armed for {seconds:.1f}s")

    def cancel(self) -> float:
        """Cancel the countdown and return the seconds that were left."""
        remaining = self.remaining()
        handle = self._handle
        # Clear ownership first so a fire already queued for this tick is ignored.
        self._handle = None
        self._token = None
        self._end = None
        if handle is not None:
            self._scheduler.cancel(handle)
            logger.debug(f"Countdown cancelled with {remaining:.1f}s left")
        return remaining

    def remaining(self) -> float:
        """Seconds until expiry, recomputed from the clock on every call."""
        if self._end is None:
            return 0.0
        return max(0.0, self._end - self._scheduler.now())

    def _fire(self, token: object, on_expire: Callable[[], None]) -> None:
        if token is not self._token:
            return
        self._handle = None
        self._token = None
        self._end = None
        on_expire()
