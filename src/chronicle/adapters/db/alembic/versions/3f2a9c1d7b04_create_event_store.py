"""Create event_store table

Revision ID: 3f2a9c1d7b04
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from chronicle.adapters.db.sa_types import BIGINT_PK, PORTABLE_JSON, UTCDateTime

# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "3f2a9c1d7b04"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

POSTGRES = "postgresql"  # pragma: no mutate


def upgrade() -> None:
    """Create the event table and make it append-only."""
    dialect = op.get_bind().dialect.name

    op.create_table(
        "event_store",
        sa.Column(
            "global_seq",
            BIGINT_PK,
            sa.Identity(always=False, start=1),
            nullable=False,
            comment="Global, monotonically increasing sequence across all streams.",
        ),
        sa.Column(
            "stream_id",
            sa.String(length=200),
            nullable=False,
            comment="Stream identifier (the document ID).",
        ),
        sa.Column(
            "stream_type",
            sa.String(length=100),
            nullable=False,
            comment="Document type owning the stream (e.g. 'User').",
        ),
        sa.Column(
            "version",
            sa.Integer(),
            nullable=False,
            comment="1-based position in the stream; equals the stream's event count at this event.",
        ),
        sa.Column(
            "event_id",
            sa.String(length=26),
            nullable=False,
            comment="ULID (26 chars). Uniquely identifies this event.",
        ),
        sa.Column(
            "event_type",
            sa.String(length=120),
            nullable=False,
            comment="Stable event kind tag used for handler lookup and deserialization.",
        ),
        sa.Column(
            "recorded_at",
            UTCDateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="Server-assigned UTC timestamp.",
        ),
        sa.Column(
            "payload",
            PORTABLE_JSON,
            nullable=False,
            comment="Event payload (JSON object).",
        ),
        sa.Column(
            "metadata",
            PORTABLE_JSON,
            nullable=True,
            comment="Optional headers (e.g., correlation_id, causation_id, actor).",
        ),
        sa.CheckConstraint(
            "length(event_id) = 26", name=op.f("ck_event_store_event_id_26_char")
        ),
        sa.CheckConstraint(
            "version >= 1", name=op.f("ck_event_store_positive_version")
        ),
        sa.PrimaryKeyConstraint("global_seq", name=op.f("pk_event_store")),
        sa.UniqueConstraint("event_id", name=op.f("uq_event_store_event_id")),
        sa.UniqueConstraint(
            "stream_id", "version", name=op.f("uq_event_store_stream_id_version")
        ),
        comment="Append-only event log. One row per domain event.",
    )
    op.create_index(
        op.f("ix_event_store_stream_type"), "event_store", ["stream_type"]
    )
    op.create_index(op.f("ix_event_store_event_type"), "event_store", ["event_type"])

    # Rows are facts: forbid UPDATE and DELETE at the database level.
    if dialect == POSTGRES:
        op.execute(
            """
            CREATE OR REPLACE FUNCTION event_store_forbid_mod() RETURNS trigger
            LANGUAGE plpgsql AS $$
            BEGIN
              RAISE EXCEPTION 'event_store is append-only; % not allowed', TG_OP
              USING ERRCODE = '0A000';
            END;
            $$;
            """
        )
        op.execute(
            """
            CREATE TRIGGER tr_event_store_append_only
            BEFORE UPDATE OR DELETE ON event_store
            FOR EACH ROW
            EXECUTE FUNCTION event_store_forbid_mod();
            """
        )
    else:
        op.execute(
            """
            CREATE TRIGGER tr_event_store_no_update
            BEFORE UPDATE ON event_store
            BEGIN
              SELECT RAISE(ABORT, 'event_store is append-only; UPDATE not allowed');
            END;
            """
        )
        op.execute(
            """
            CREATE TRIGGER tr_event_store_no_delete
            BEFORE DELETE ON event_store
            BEGIN
              SELECT RAISE(ABORT, 'event_store is append-only; DELETE not allowed');
            END;
            """
        )


def downgrade() -> None:
    """Drop the append-only triggers, then the table."""
    dialect = op.get_bind().dialect.name

    if dialect == POSTGRES:
        op.execute("DROP TRIGGER IF EXISTS tr_event_store_append_only ON event_store;")
        op.execute("DROP FUNCTION IF EXISTS event_store_forbid_mod();")
    else:
        op.execute("DROP TRIGGER IF EXISTS tr_event_store_no_delete;")
        op.execute("DROP TRIGGER IF EXISTS tr_event_store_no_update;")

    op.drop_index(op.f("ix_event_store_event_type"), table_name="event_store")
    op.drop_index(op.f("ix_event_store_stream_type"), table_name="event_store")
    op.drop_table("event_store")
