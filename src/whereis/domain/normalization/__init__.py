"""Carrier-independent normalization building blocks."""

from __future__ import annotations

from .events import SUPPLEMENT_NOTES, SUPPLEMENT_PROVIDER, build_supplement_event, clean_notes
from .inference import (
    MissingEventRule,
    missing_after_trigger,
    missing_before_later_status,
    supplement_missing_events,
)
from .status_map import (
    FixedStatus,
    PhaseEntry,
    RawEvent,
    RuleStatus,
    StatusEntry,
    StatusMap,
    StatusRule,
    resolve_status,
)

__all__ = [
    "SUPPLEMENT_NOTES",
    "SUPPLEMENT_PROVIDER",
    "FixedStatus",
    "MissingEventRule",
    "PhaseEntry",
    "RawEvent",
    "RuleStatus",
    "StatusEntry",
    "StatusMap",
    "StatusRule",
    "build_supplement_event",
    "clean_notes",
    "missing_after_trigger",
    "missing_before_later_status",
    "resolve_status",
    "supplement_missing_events",
]
