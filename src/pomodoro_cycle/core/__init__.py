"""Core application components."""

from pomodoro_cycle.core.config import Config, TimerSettings, get_config

__all__ = ["Config", "TimerSettings", "get_config"]
