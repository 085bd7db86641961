"""Allow running as ``python -m pomodoro_cycle``."""

from pomodoro_cycle.cli.main import app

app()
