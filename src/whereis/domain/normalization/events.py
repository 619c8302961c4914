"""Helpers shared by connectors when building canonical events."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Final

from whereis.domain.model import Event, UpdateMethod, make_event_id
from whereis.domain.model.event import utcnow

if TYPE_CHECKING:
    from datetime import datetime

    from whereis.domain.model import Catalog, Entity

SUPPLEMENT_PROVIDER: Final = "Whereis"
SUPPLEMENT_NOTES: Final = "Supplement event generated by whereis"
SUPPLEMENT_OFFSET: Final = timedelta(seconds=1)


def clean_notes(notes: str | None, what: str) -> str:
    """Drop notes that only repeat the status description."""

    text = (notes or "").strip()
    if text.lower() == what.strip().lower():
        return ""
    return text


def build_supplement_event(
    entity: Entity,
    status: int,
    base: Event,
    catalog: Catalog,
    *,
    now: datetime | None = None,
) -> Event:
    """Synthesize ``status`` one second before ``base``, at ``base``'s location."""

    status = int(status)
    when = base.when - SUPPLEMENT_OFFSET
    return Event(
        event_id=make_event_id(entity.tracking_id, when, status),
        status=status,
        what=catalog.status_description(status),
        when=when,
        where=base.where,
        whom=base.whom,
        notes=SUPPLEMENT_NOTES,
        operator_code=entity.tracking_id.operator,
        tracking_num=entity.tracking_id.tracking_num,
        data_provider=SUPPLEMENT_PROVIDER,
        update_method=UpdateMethod.SYSTEM_GENERATED,
        updated_at=now or utcnow(),
    )
