"""Normalized tracking events."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from .enums import UpdateMethod

if TYPE_CHECKING:
    from .tracking_id import TrackingID


def make_event_id(tracking_id: TrackingID | str, when: datetime, status: int) -> str:
    """Deterministic identity: the same raw scan always yields the same id."""

    return f"ev_{tracking_id}-{math.floor(when.timestamp())}-{status}"


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True, kw_only=True)
class Event:
    event_id: str
    status: int
    what: str
    when: datetime
    where: str = ""
    whom: str = ""
    notes: str = ""
    operator_code: str
    tracking_num: str
    data_provider: str = ""
    exception_code: int | None = None
    exception_desc: str | None = None
    notification_code: int | None = None
    notification_desc: str | None = None
    update_method: UpdateMethod
    updated_at: datetime = field(default_factory=utcnow)
    extra: dict[str, Any] = field(default_factory=dict)
    source_data: dict[str, Any] = field(default_factory=dict)

    def provenance(self) -> dict[str, Any]:
        """The ``additional`` block as persisted and returned to clients."""

        payload: dict[str, Any] = {
            "trackingNum": self.tracking_num,
            "operatorCode": self.operator_code,
            "dataProvider": self.data_provider,
            "updateMethod": self.update_method.value,
            "updatedAt": self.updated_at.isoformat(),
        }
        if self.exception_code is not None:
            payload["exceptionCode"] = self.exception_code
            payload["exceptionDesc"] = self.exception_desc
        if self.notification_code is not None:
            payload["notificationCode"] = self.notification_code
            payload["notificationDesc"] = self.notification_desc
        payload.update(self.extra)
        return payload

    def to_dict(self, *, full_data: bool = False) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": self.status,
            "what": self.what,
            "whom": self.whom,
            "when": self.when.isoformat(),
            "where": self.where,
            "notes": self.notes,
            "additional": self.provenance(),
        }
        if full_data:
            payload["sourceData"] = self.source_data
        return payload
