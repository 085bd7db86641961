"""Timer phases and the policy that decides which phase comes next."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pomodoro_cycle.timer.errors import InvalidPhaseError, InvalidSettingsError


class Phase(Enum):
    """Activity segment of the Pomodoro cycle."""
    FOCUS = "focus"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def label(self) -> str:
        """Human readable name, e.g. ``Short Break``."""
        return self.value.replace("_", " ").title()

    @property
    def is_break(self) -> bool:
        return self is not Phase.FOCUS


# Settings may come from a YAML/JSON style mapping in either key style.
_SETTINGS_KEYS: dict[Phase, tuple[str, ...]] = {
    Phase.FOCUS: ("focus",),
    Phase.SHORT_BREAK: ("short_break", "shortBreak"),
    Phase.LONG_BREAK: ("long_break", "longBreak"),
}

_MISSING = object()


def _lookup(container: Any, keys: tuple[str, ...]) -> Any:
    for key in keys:
        if isinstance(container, Mapping):
            if key in container:
                return container[key]
        elif hasattr(container, key):
            return getattr(container, key)
    return _MISSING


def _phase_section(settings: Any, phase: Phase) -> Any:
    keys = _SETTINGS_KEYS[phase]
    section = _lookup(settings, keys)
    if section is _MISSING or section is None:
        raise InvalidSettingsError(f"Settings have no '{keys[-1]}' section")
    return section


def coerce_phase(value: Any) -> Phase:
    """Return ``value`` as a :class:`Phase`, accepting members, values and names."""
    if isinstance(value, Phase):
        return value
    if isinstance(value, str):
        try:
            return Phase(value)
        except ValueError:
            pass
        try:
            return Phase[value.upper()]
        except KeyError:
            pass
    raise InvalidPhaseError(f"Not a timer phase: {value!r}")


def phase_duration_seconds(settings: Any, phase: Phase) -> float:
    """Read the configured duration of ``phase`` (minutes) and return it in seconds."""
    duration = _lookup(_phase_section(settings, phase), ("duration",))
    if duration is _MISSING or duration is None:
        raise InvalidSettingsError(f"Settings have no duration for {phase.value}")
    if isinstance(duration, bool) or not isinstance(duration, (int, float)):
        raise InvalidSettingsError(
            f"Duration for {phase.value} must be a number of minutes, got {duration!r}"
        )
    if duration < 0:
        raise InvalidSettingsError(f"Duration for {phase.value} must not be negative")
    return float(duration) * 60


def long_break_interval(settings: Any) -> int | None:
    """Read the long break interval; ``None`` means long breaks are disabled."""
    interval = _lookup(_phase_section(settings, Phase.LONG_BREAK), ("interval",))
    if interval is _MISSING:
        raise InvalidSettingsError("Settings have no long break interval")
    if interval is None:
        return None
    if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
        raise InvalidSettingsError(
            f"Long break interval must be a positive integer or None, got {interval!r}"
        )
    return interval


def next_phase(phase: Phase, pomodoro_count: int, settings: Any) -> Phase:
    """Return the phase that follows ``phase``.

    A Focus phase is followed by a long break once the Focus session being
    finished brings ``pomodoro_count`` up to the interval. Breaks are always
    followed by Focus. Settings are read on every call.
    """
    if phase is not Phase.FOCUS:
        return Phase.FOCUS

    interval = long_break_interval(settings)
    if interval is not None and pomodoro_count + 1 >= interval:
        return Phase.LONG_BREAK
    return Phase.SHORT_BREAK
