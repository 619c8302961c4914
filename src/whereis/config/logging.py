"""Shared logging helpers for whereis."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: we default
    to INFO level and a terse format suitable for CLI output. Pass ``force=True`` to
    reconfigure during tests or specialised entry points.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )


def log_level_for_env(app_env: str | None) -> int:
    """DEBUG for local development, INFO for qa and prod."""

    if (app_env or "dev").strip().lower() == "dev":
        return logging.DEBUG
    return logging.INFO
