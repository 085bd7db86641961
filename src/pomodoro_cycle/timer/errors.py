"""Exceptions raised by the Pomodoro timer."""


class PomodoroError(Exception):
    """Base exception for the Pomodoro timer."""


class InvalidPhaseError(PomodoroError, ValueError):
    """Raised when a value is not one of the timer phases."""


class InvalidSettingsError(PomodoroError):
    """Raised when the settings lack a required field or hold an invalid value."""
