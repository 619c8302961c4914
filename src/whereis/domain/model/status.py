"""Canonical status taxonomy.

Multiples of 100 are major milestones, other multiples of 50 are minor
milestones, everything else is non-critical detail.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final


class StatusCode(IntEnum):
    TRANSPORT_BILL_CREATED = 3000
    LOGISTICS_IN_PROGRESS = 3001
    ARRIVED_IN_TRANSIT = 3002
    SCANNED_IN_TRANSIT = 3003
    DEPARTED_IN_TRANSIT = 3004
    INFORMATION_RECEIVED = 3005
    PROCESS_STOPPED = 3009
    PICKED_UP = 3050
    RECEIVED_BY_CARRIER = 3100
    EXPORT_CLEARANCE_IN_PROGRESS = 3150
    EXPORT_RELEASED = 3200
    IN_TRANSIT = 3250
    ARRIVED_AT_DESTINATION = 3300
    IMPORT_CLEARANCE_IN_PROGRESS = 3350
    IMPORT_RELEASED = 3400
    FINAL_DELIVERY_IN_PROGRESS = 3450
    DELIVERED = 3500


DEFAULT_STATUS: Final = StatusCode.LOGISTICS_IN_PROGRESS
FUTURE_EVENT_STATUS: Final = StatusCode.INFORMATION_RECEIVED

TERMINAL_STATUSES: Final = frozenset({StatusCode.DELIVERED, StatusCode.PROCESS_STOPPED})
CRITICAL_STATUSES: Final = (
    StatusCode.RECEIVED_BY_CARRIER,
    StatusCode.ARRIVED_AT_DESTINATION,
    StatusCode.IMPORT_RELEASED,
)
CROSS_BORDER_STATUSES: Final = frozenset(
    {StatusCode.IMPORT_CLEARANCE_IN_PROGRESS, StatusCode.IMPORT_RELEASED}
)


def is_major(status: int) -> bool:
    return status % 100 == 0


def is_minor(status: int) -> bool:
    return status % 50 == 0 and not is_major(status)


def is_terminal(status: int) -> bool:
    return status in TERMINAL_STATUSES
