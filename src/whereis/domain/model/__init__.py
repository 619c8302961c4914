"""Public domain model surface."""

from __future__ import annotations

from whereis.domain.model.catalog import Catalog, OperatorInfo, default_catalog
from whereis.domain.model.entity import Entity
from whereis.domain.model.enums import EntityType, IngestionMode, UpdateMethod
from whereis.domain.model.event import Event, make_event_id
from whereis.domain.model.status import (
    CRITICAL_STATUSES,
    DEFAULT_STATUS,
    FUTURE_EVENT_STATUS,
    TERMINAL_STATUSES,
    StatusCode,
    is_major,
    is_minor,
    is_terminal,
)
from whereis.domain.model.tracking_id import TrackingID, TrackingNumberRules

__all__ = [
    "CRITICAL_STATUSES",
    "DEFAULT_STATUS",
    "FUTURE_EVENT_STATUS",
    "TERMINAL_STATUSES",
    "Catalog",
    "Entity",
    "EntityType",
    "Event",
    "IngestionMode",
    "OperatorInfo",
    "StatusCode",
    "TrackingID",
    "TrackingNumberRules",
    "UpdateMethod",
    "default_catalog",
    "is_major",
    "is_minor",
    "is_terminal",
    "make_event_id",
]
