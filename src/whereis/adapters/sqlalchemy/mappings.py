"""SQLAlchemy table metadata for shipments, events and API keys."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Dialect,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
)

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)


class IsoDateTime(TypeDecorator[datetime]):
    """Stores timestamps as ISO-8601 text so the carrier's UTC offset survives."""

    impl = String(40)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.isoformat()

    def process_result_value(self, value: str | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        parsed = datetime.fromisoformat(value)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


entities_table = Table(
    "entities",
    metadata,
    Column("uuid", Uuid(), primary_key=True),
    Column("id", String(128), nullable=False, unique=True),
    Column("type", String(32), nullable=False),
    Column("ingestion_mode", String(16), nullable=False),
    Column("creation_time", IsoDateTime(), nullable=True),
    Column("completed", Boolean(), nullable=False, default=False),
    Column("additional", JSON(), nullable=False),
    Column("params", JSON(), nullable=False),
)

events_table = Table(
    "events",
    metadata,
    Column("event_id", String(255), primary_key=True),
    Column("status", Integer(), nullable=False),
    Column("what_", Text(), nullable=False),
    Column("when_", IsoDateTime(), nullable=False),
    Column("where_", Text(), nullable=False),
    Column("whom_", Text(), nullable=False),
    Column("notes", Text(), nullable=False),
    Column("operator_code", String(16), nullable=False),
    Column("tracking_num", String(64), nullable=False),
    Column("data_provider", String(64), nullable=False),
    Column("exception_code", Integer(), nullable=True),
    Column("exception_desc", Text(), nullable=True),
    Column("notification_code", Integer(), nullable=True),
    Column("notification_desc", Text(), nullable=True),
    Column("additional", JSON(), nullable=False),
    Column("source_data", JSON(), nullable=False),
    Index("ix_events_tracking", "operator_code", "tracking_num"),
)

tokens_table = Table(
    "tokens",
    metadata,
    Column("id", String(128), primary_key=True),
    Column("user_id", String(128), nullable=False),
)
