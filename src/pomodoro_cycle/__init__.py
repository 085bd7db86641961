"""Pomodoro Cycle - phase-cycling countdown timer for the Pomodoro technique."""

__version__ = "0.1.0"
