"""Event reconciliation between carriers and storage."""

from __future__ import annotations

from .engine import ReconciliationEngine, compute_delta
from .plan import EventDelta, ReconcileAction, ReconcileOutcome

__all__ = [
    "EventDelta",
    "ReconcileAction",
    "ReconcileOutcome",
    "ReconciliationEngine",
    "compute_delta",
]
