"""Scheduler configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_or_default
from .errors import ConfigurationError

DEFAULT_PULL_INTERVAL_MINUTES = 5.0


@dataclass(frozen=True, slots=True)
class ScheduleConfig:
    pull_interval_minutes: float = DEFAULT_PULL_INTERVAL_MINUTES
    app_env: str = "dev"

    @property
    def pull_interval_seconds(self) -> float:
        return self.pull_interval_minutes * 60


def get_schedule_config() -> ScheduleConfig:
    interval = env_float("APP_PULL_INTERVAL", DEFAULT_PULL_INTERVAL_MINUTES)
    if interval <= 0:
        raise ConfigurationError("APP_PULL_INTERVAL must be positive")
    return ScheduleConfig(
        pull_interval_minutes=interval,
        app_env=env_or_default("APP_ENV", "dev").lower(),
    )
