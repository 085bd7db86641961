"""Configuration management with Pydantic and YAML support."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

DEFAULT_CONFIG_DIR = Path.home() / ".config/pomodoro-cycle"


class PhaseSettings(BaseModel):
    """Duration of one phase."""

    model_config = ConfigDict(validate_assignment=True)

    duration: int = Field(default=25, ge=0, description="Phase length in minutes")


class LongBreakSettings(PhaseSettings):
    """Long break duration and how often it replaces a short break."""

    duration: int = Field(default=15, ge=0, description="Phase length in minutes")
    interval: int | None = Field(
        default=4,
        ge=1,
        description="Focus sessions before a long break; None disables long breaks",
    )


class TimerSettings(BaseModel):
    """Durations and long break interval, shared live with the running timer.

    Mutating a field (``settings.focus.duration = 50``) is picked up by the
    timer the next time it reads the value.
    """

    model_config = ConfigDict(validate_assignment=True, populate_by_name=True)

    focus: PhaseSettings = Field(default_factory=lambda: PhaseSettings(duration=25))
    short_break: PhaseSettings = Field(
        default_factory=lambda: PhaseSettings(duration=5),
        alias="shortBreak",
    )
    long_break: LongBreakSettings = Field(
        default_factory=LongBreakSettings,
        alias="longBreak",
    )


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="POMODORO_CYCLE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    config_dir: Path = Field(default_factory=lambda: DEFAULT_CONFIG_DIR)
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_file: Path | None = Field(default=None, description="Also write logs to this file")

    initial_phase: str = Field(
        default="focus",
        pattern="^(focus|short_break|long_break)$",
        description="Phase the timer is in when it is created",
    )
    timer: TimerSettings = Field(default_factory=TimerSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment variables win over values loaded from the YAML file.
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @property
    def config_file(self) -> Path:
        """Path to YAML config file."""
        return self.config_dir / "config.yaml"

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from YAML file, environment variables, and defaults.

        Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values
        """
        config_path = config_path or DEFAULT_CONFIG_DIR / "config.yaml"

        yaml_config: dict[str, Any] = {}
        if config_path.exists():
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f) or {}

        return cls(**yaml_config)

    def save(self, config_path: Path | None = None) -> None:
        """Save current configuration to YAML file."""
        config_path = config_path or self.config_file
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(exclude={"config_file"}, exclude_none=True)

        # Convert Path objects to strings for YAML
        for key in ["config_dir", "log_file"]:
            if key in data:
                data[key] = str(data[key])

        # Keep "interval: null" so a disabled long break survives a round trip
        data["timer"]["long_break"]["interval"] = self.timer.long_break.interval

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


@lru_cache
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.load()
