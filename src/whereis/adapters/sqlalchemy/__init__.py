"""SQLAlchemy adapter package for whereis."""

from __future__ import annotations

from .mappings import entities_table, events_table, metadata, tokens_table
from .store import SqlAlchemyTrackingStore
from .unit_of_work import SqlAlchemyUnitOfWork, StartupError, shutdown, startup

__all__ = [
    "SqlAlchemyTrackingStore",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "entities_table",
    "events_table",
    "metadata",
    "shutdown",
    "startup",
    "tokens_table",
]
