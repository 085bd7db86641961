"""Tests for the phase transition policy and settings accessors."""

from __future__ import annotations

import pytest

from conftest import make_settings
from pomodoro_cycle.core.config import TimerSettings
from pomodoro_cycle.timer import InvalidPhaseError, InvalidSettingsError, Phase, next_phase
from pomodoro_cycle.timer.phase import coerce_phase, long_break_interval, phase_duration_seconds


# ---------------------------------------------------------------------------
# next_phase
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("phase", [Phase.SHORT_BREAK, Phase.LONG_BREAK])
@pytest.mark.parametrize("interval", [None, 1, 2, 4])
@pytest.mark.parametrize("count", [0, 1, 3, 10])
def test_breaks_are_always_followed_by_focus(phase, interval, count):
    assert next_phase(phase, count, make_settings(interval=interval)) is Phase.FOCUS


@pytest.mark.parametrize("interval", [1, 2, 3, 4])
@pytest.mark.parametrize("count", range(6))
def test_focus_leads_to_long_break_once_interval_reached(interval, count):
    expected = Phase.LONG_BREAK if count + 1 >= interval else Phase.SHORT_BREAK
    assert next_phase(Phase.FOCUS, count, make_settings(interval=interval)) is expected


@pytest.mark.parametrize("count", [0, 1, 5, 100])
def test_disabled_interval_never_gives_long_break(count):
    assert next_phase(Phase.FOCUS, count, make_settings(interval=None)) is Phase.SHORT_BREAK


def test_next_phase_reads_settings_on_every_call():
    settings = make_settings(interval=2)
    assert next_phase(Phase.FOCUS, 1, settings) is Phase.LONG_BREAK

    settings["longBreak"]["interval"] = None
    assert next_phase(Phase.FOCUS, 1, settings) is Phase.SHORT_BREAK

    settings["longBreak"]["interval"] = 3
    assert next_phase(Phase.FOCUS, 1, settings) is Phase.SHORT_BREAK


def test_break_phase_does_not_read_interval():
    settings = {"focus": {"duration": 1}}
    assert next_phase(Phase.SHORT_BREAK, 0, settings) is Phase.FOCUS


def test_focus_without_long_break_section_fails():
    with pytest.raises(InvalidSettingsError):
        next_phase(Phase.FOCUS, 0, {"focus": {"duration": 1}})


def test_next_phase_accepts_pydantic_settings():
    settings = TimerSettings()
    settings.long_break.interval = 2
    assert next_phase(Phase.FOCUS, 1, settings) is Phase.LONG_BREAK

    settings.long_break.interval = None
    assert next_phase(Phase.FOCUS, 1, settings) is Phase.SHORT_BREAK


# ---------------------------------------------------------------------------
# Settings accessors
# ---------------------------------------------------------------------------


def test_duration_is_converted_to_seconds():
    settings = make_settings(focus=25, short_break=5, long_break=15)
    assert phase_duration_seconds(settings, Phase.FOCUS) == 1500
    assert phase_duration_seconds(settings, Phase.SHORT_BREAK) == 300
    assert phase_duration_seconds(settings, Phase.LONG_BREAK) == 900


def test_snake_case_keys_are_accepted():
    settings = {"short_break": {"duration": 2}, "long_break": {"duration": 3, "interval": 4}}
    assert phase_duration_seconds(settings, Phase.SHORT_BREAK) == 120
    assert long_break_interval(settings) == 4


def test_missing_duration_fails():
    settings = {"focus": {}, "longBreak": {"interval": None}}
    with pytest.raises(InvalidSettingsError, match="duration"):
        phase_duration_seconds(settings, Phase.FOCUS)


def test_missing_section_fails():
    with pytest.raises(InvalidSettingsError, match="shortBreak"):
        phase_duration_seconds({"focus": {"duration": 1}}, Phase.SHORT_BREAK)


@pytest.mark.parametrize("duration", [-1, "25", True])
def test_invalid_duration_fails(duration):
    with pytest.raises(InvalidSettingsError):
        phase_duration_seconds(make_settings(focus=duration), Phase.FOCUS)


def test_missing_interval_fails():
    with pytest.raises(InvalidSettingsError, match="interval"):
        long_break_interval({"longBreak": {"duration": 1}})


@pytest.mark.parametrize("interval", [0, -2, 1.5, "4", False])
def test_invalid_interval_fails(interval):
    with pytest.raises(InvalidSettingsError):
        long_break_interval(make_settings(interval=interval))


# ---------------------------------------------------------------------------
# coerce_phase
# ---------------------------------------------------------------------------


def test_coerce_phase_accepts_members_values_and_names():
    assert coerce_phase(Phase.LONG_BREAK) is Phase.LONG_BREAK
    assert coerce_phase("short_break") is Phase.SHORT_BREAK
    assert coerce_phase("FOCUS") is Phase.FOCUS


@pytest.mark.parametrize("value", ["lunch", 3, None, ""])
def test_coerce_phase_rejects_other_values(value):
    with pytest.raises(InvalidPhaseError):
        coerce_phase(value)


def test_invalid_phase_error_is_a_value_error():
    with pytest.raises(ValueError):
        coerce_phase("nap")


def test_phase_labels():
    assert Phase.FOCUS.label == "Focus"
    assert Phase.SHORT_BREAK.label == "Short Break"
    assert Phase.LONG_BREAK.is_break
    assert not Phase.FOCUS.is_break
