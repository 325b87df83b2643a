"""Event store schema.

Defines the append-only ``event_store`` table. Each row is one event: its
position in its stream (``version``), a global sequence across all streams,
its stable kind tag (``event_type``), and its JSON payload.

Constraints (enforced here):

| Constraint                      | Purpose                                  |
|---------------------------------|------------------------------------------|
| UNIQUE(stream_id, version)      | backstop for racing conditional appends  |
| UNIQUE(event_id)                | ULID uniqueness                          |
| CHECK(length(event_id)=26)      | ULID length                              |
| CHECK(version >= 1)             | versions start at 1                      |

Append-only enforcement (no UPDATE/DELETE) is installed by the migrations,
not by ``metadata.create_all()``.
"""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    Identity,
    Index,
    Integer,
    String,
    Table,
    UniqueConstraint,
    text,
)

from chronicle.adapters.db.metadata import metadata
from chronicle.adapters.db.sa_types import BIGINT_PK, PORTABLE_JSON, UTCDateTime

__all__ = ["event_store"]

event_store = Table(
    "event_store",
    metadata,
    Column(
        "global_seq",
        BIGINT_PK,
        Identity(start=1),
        nullable=False,
        primary_key=True,
        comment="Global, monotonically increasing sequence across all streams.",
    ),
    Column(
        "stream_id",
        String(200),
        nullable=False,
        comment="Stream identifier (the document ID).",
    ),
    Column(
        "stream_type",
        String(100),
        nullable=False,
        comment="Document type owning the stream (e.g. 'User').",
    ),
    Column(
        "version",
        Integer,
        nullable=False,
        comment="1-based position in the stream; equals the stream's event count at this event.",
    ),
    Column(
        "event_id",
        String(26),
        nullable=False,
        unique=True,
        comment="ULID (26 chars). Uniquely identifies this event.",
    ),
    Column(
        "event_type",
        String(120),
        nullable=False,
        comment="Stable event kind tag used for handler lookup and deserialization.",
    ),
    Column(
        "recorded_at",
        UTCDateTime(),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="Server-assigned UTC timestamp.",
    ),
    Column(
        "payload",
        PORTABLE_JSON,
        nullable=False,
        comment="Event payload (JSON object).",
    ),
    Column(
        "metadata",
        PORTABLE_JSON,
        nullable=True,
        comment="Optional headers (e.g., correlation_id, causation_id, actor).",
    ),
    UniqueConstraint("stream_id", "version"),
    CheckConstraint("version >= 1", name="positive_version"),
    CheckConstraint("length(event_id) = 26", name="event_id_26_char"),
    Index(None, "stream_type"),
    Index(None, "event_type"),
    comment="Append-only event log. One row per domain event.",
)
