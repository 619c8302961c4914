"""Application configuration helpers."""

from __future__ import annotations

from .env import env_float, env_or_default, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .fedex import FedexConfig, get_fedex_config
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging, log_level_for_env
from .schedule import ScheduleConfig, get_schedule_config
from .sfex import SfexConfig, get_sfex_config, parse_utc_offset
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "FedexConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "ScheduleConfig",
    "SfexConfig",
    "StorageConfig",
    "configure_logging",
    "env_float",
    "env_or_default",
    "get_database_config",
    "get_database_uri",
    "get_fedex_config",
    "get_schedule_config",
    "get_sfex_config",
    "get_storage_config",
    "log_level_for_env",
    "parse_utc_offset",
    "require_env_vars",
]
