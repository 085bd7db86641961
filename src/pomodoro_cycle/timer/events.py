"""Subscription interface for timer expiry notifications."""

from __future__ import annotations

import logging
from collections.abc import Callable

from pomodoro_cycle.timer.phase import Phase

logger = logging.getLogger(__name__)

TIMER_EXPIRED = "timer:expire"

ExpiryCallback = Callable[[Phase], None]


class ExpiryNotifier:
    """Fans an expiry event out to every subscriber, synchronously.

    Each callback receives the phase whose countdown just reached zero.
    A failing subscriber is logged and does not stop delivery to the rest.
    """

    event = TIMER_EXPIRED

    def __init__(self) -> None:
        self._subscribers: list[ExpiryCallback] = []

    def __len__(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: ExpiryCallback) -> Callable[[], None]:
        """Register ``callback`` and return a function that removes it again."""
        self._subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: ExpiryCallback) -> bool:
        """Remove ``callback``; returns False if it was not subscribed."""
        try:
            self._subscribers.remove(callback)
        except ValueError:
            return False
        return True

    def emit(self, phase: Phase) -> None:
        # Copy so callbacks may unsubscribe themselves while being notified.
        for callback in list(self._subscribers):
            try:
                callback(phase)
            except Exception as e:
                logger.error(f"Error in {self.event} callback: {e}")
