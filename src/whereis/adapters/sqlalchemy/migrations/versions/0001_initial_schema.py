"""Initial schema: entities, events and tokens.

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "entities",
        sa.Column("uuid", sa.Uuid(), nullable=False),
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("ingestion_mode", sa.String(length=16), nullable=False),
        sa.Column("creation_time", sa.String(length=40), nullable=True),
        sa.Column("completed", sa.Boolean(), nullable=False),
        sa.Column("additional", sa.JSON(), nullable=False),
        sa.Column("params", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("uuid", name="pk_entities"),
        sa.UniqueConstraint("id", name="uq_entities_id"),
    )
    op.create_table(
        "events",
        sa.Column("event_id", sa.String(length=255), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("what_", sa.Text(), nullable=False),
        sa.Column("when_", sa.String(length=40), nullable=False),
        sa.Column("where_", sa.Text(), nullable=False),
        sa.Column("whom_", sa.Text(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=False),
        sa.Column("operator_code", sa.String(length=16), nullable=False),
        sa.Column("tracking_num", sa.String(length=64), nullable=False),
        sa.Column("data_provider", sa.String(length=64), nullable=False),
        sa.Column("exception_code", sa.Integer(), nullable=True),
        sa.Column("exception_desc", sa.Text(), nullable=True),
        sa.Column("notification_code", sa.Integer(), nullable=True),
        sa.Column("notification_desc", sa.Text(), nullable=True),
        sa.Column("additional", sa.JSON(), nullable=False),
        sa.Column("source_data", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("event_id", name="pk_events"),
    )
    op.create_index("ix_events_tracking", "events", ["operator_code", "tracking_num"])
    op.create_table(
        "tokens",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_tokens"),
    )


def downgrade() -> None:
    op.drop_table("tokens")
    op.drop_index("ix_events_tracking", table_name="events")
    op.drop_table("events")
    op.drop_table("entities")
