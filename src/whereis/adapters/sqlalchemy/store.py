"""SQLAlchemy implementation of the tracking storage contract."""

from __future__ import annotations

from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from whereis.domain.model import (
    Entity,
    EntityType,
    Event,
    IngestionMode,
    TrackingID,
    UpdateMethod,
)

from .mappings import entities_table, events_table, tokens_table
from .unit_of_work import SqlAlchemyUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from sqlalchemy import Row
    from sqlalchemy.orm import Session

    from whereis.domain.ports import TrackingStore

log = getLogger(__name__)

_PROVENANCE_KEYS: Final = frozenset(
    {
        "trackingNum",
        "operatorCode",
        "dataProvider",
        "updateMethod",
        "updatedAt",
        "exceptionCode",
        "exceptionDesc",
        "notificationCode",
        "notificationDesc",
    }
)


def _entity_row(entity: Entity) -> dict[str, Any]:
    return {
        "uuid": entity.uuid,
        "id": entity.id,
        "type": entity.type.value,
        "ingestion_mode": entity.ingestion_mode.value,
        "creation_time": entity.creation_time(),
        "completed": entity.completed,
        "additional": dict(entity.additional),
        "params": dict(entity.params),
    }


def _event_row(event: Event) -> dict[str, Any]:
    return {
        "event_id": event.event_id,
        "status": event.status,
        "what_": event.what,
        "when_": event.when,
        "where_": event.where,
        "whom_": event.whom,
        "notes": event.notes,
        "operator_code": event.operator_code,
        "tracking_num": event.tracking_num,
        "data_provider": event.data_provider,
        "exception_code": event.exception_code,
        "exception_desc": event.exception_desc,
        "notification_code": event.notification_code,
        "notification_desc": event.notification_desc,
        "additional": event.provenance(),
        "source_data": dict(event.source_data),
    }


def _event_from_row(row: Row[Any]) -> Event:
    additional: dict[str, Any] = dict(row.additional or {})
    updated_at = row.when_
    if additional.get("updatedAt"):
        updated_at = datetime.fromisoformat(str(additional["updatedAt"]))
    return Event(
        event_id=row.event_id,
        status=row.status,
        what=row.what_,
        when=row.when_,
        where=row.where_,
        whom=row.whom_,
        notes=row.notes,
        operator_code=row.operator_code,
        tracking_num=row.tracking_num,
        data_provider=row.data_provider,
        exception_code=row.exception_code,
        exception_desc=row.exception_desc,
        notification_code=row.notification_code,
        notification_desc=row.notification_desc,
        update_method=UpdateMethod(additional.get("updateMethod", UpdateMethod.AUTO_PULL)),
        updated_at=updated_at,
        extra={key: value for key, value in additional.items() if key not in _PROVENANCE_KEYS},
        source_data=dict(row.source_data or {}),
    )


def _tracking_filter(tracking_id: TrackingID) -> Any:
    return (events_table.c.operator_code == tracking_id.operator) & (
        events_table.c.tracking_num == tracking_id.tracking_num
    )


class SqlAlchemyTrackingStore:
    """Every write runs inside one unit of work; failures roll back as a whole."""

    def __init__(
        self,
        uow_factory: Callable[[], SqlAlchemyUnitOfWork] = SqlAlchemyUnitOfWork,
    ) -> None:
        self.uow_factory = uow_factory

    def ping(self) -> bool:
        try:
            with self.uow_factory() as uow:
                uow.session.execute(select(1))
        except SQLAlchemyError:
            log.exception("Database ping failed")
            return False
        return True

    def is_token_valid(self, token: str) -> bool:
        with self.uow_factory() as uow:
            found = uow.session.execute(
                select(tokens_table.c.id).where(tokens_table.c.id == token)
            ).first()
        return found is not None

    def insert_token(self, key: str, user_id: str) -> int:
        try:
            with self.uow_factory() as uow:
                uow.session.execute(insert(tokens_table).values(id=key, user_id=user_id))
                uow.commit()
        except IntegrityError:
            log.warning("API key for user %s already exists", user_id)
            return 0
        return 1

    def insert_entity(self, entity: Entity) -> int:
        if not entity.events:
            log.error("Refusing to store %s without events", entity.id)
            return 0
        try:
            with self.uow_factory() as uow:
                self._insert(uow.session, entity, entity.events)
                uow.commit()
        except IntegrityError:
            log.warning("%s is already stored", entity.id)
            return 0
        log.info("Stored %s with %s events", entity.id, len(entity))
        return 1

    def refresh_entity(self, tracking_id: TrackingID, entity: Entity) -> int:
        if not entity.events:
            log.error("Refusing to refresh %s without events", tracking_id)
            return 0
        with self.uow_factory() as uow:
            uow.session.execute(delete(events_table).where(_tracking_filter(tracking_id)))
            uow.session.execute(
                delete(entities_table).where(entities_table.c.id == str(tracking_id))
            )
            self._insert(uow.session, entity, entity.events)
            uow.commit()
        log.info("Refreshed %s with %s events", tracking_id, len(entity))
        return 1

    def update_entity(
        self,
        entity: Entity,
        update_method: UpdateMethod,
        added_event_ids: Sequence[str],
        removed_event_ids: Sequence[str],
    ) -> int:
        wanted = set(added_event_ids)
        added = [event for event in entity.events if event.event_id in wanted]
        changed = 0
        with self.uow_factory() as uow:
            session = uow.session
            if entity.completed:
                session.execute(
                    update(entities_table)
                    .where(entities_table.c.id == entity.id)
                    .values(completed=True)
                )
            if removed_event_ids:
                result = session.execute(
                    delete(events_table).where(events_table.c.event_id.in_(removed_event_ids))
                )
                changed += result.rowcount or 0  # type: ignore[attr-defined]
            if added:
                session.execute(insert(events_table), [_event_row(event) for event in added])
                changed += len(added)
            uow.commit()
        log.debug("%s: %s event rows changed via %s", entity.id, changed, update_method)
        return 1 if changed else 0

    def query_entity(self, tracking_id: TrackingID) -> Entity | None:
        with self.uow_factory() as uow:
            row = uow.session.execute(
                select(entities_table).where(entities_table.c.id == str(tracking_id))
            ).first()
            if row is None:
                return None
            event_rows = uow.session.execute(
                select(events_table).where(_tracking_filter(tracking_id))
            ).all()

        entity = Entity(
            tracking_id=tracking_id,
            uuid=row.uuid,
            type=EntityType(row.type),
            ingestion_mode=IngestionMode(row.ingestion_mode),
            params=dict(row.params or {}),
            additional=dict(row.additional or {}),
        )
        entity.add_events(_event_from_row(event_row) for event_row in event_rows)
        return entity

    def query_event_ids(self, tracking_id: TrackingID) -> list[str]:
        with self.uow_factory() as uow:
            return list(
                uow.session.scalars(
                    select(events_table.c.event_id).where(_tracking_filter(tracking_id))
                )
            )

    def get_in_processing_tracking_nums(self) -> dict[str, dict[str, str]]:
        with self.uow_factory() as uow:
            rows = uow.session.execute(
                select(entities_table.c.id, entities_table.c.params).where(
                    entities_table.c.completed.is_(False),
                    entities_table.c.ingestion_mode == IngestionMode.PULL.value,
                )
            ).all()
        return {row.id: dict(row.params or {}) for row in rows}

    def _insert(self, session: Session, entity: Entity, events: Iterable[Event]) -> None:
        session.execute(insert(entities_table).values(**_entity_row(entity)))
        rows = [_event_row(event) for event in events]
        if rows:
            session.execute(insert(events_table), rows)


if TYPE_CHECKING:
    _store_check: TrackingStore = SqlAlchemyTrackingStore()
