"""SQLAlchemy-backed EventStore adapter for CHRONICLE.

Persists event envelopes in the ``event_store`` table (see
``adapters.eventstore.schema``) using SQLAlchemy Core on a caller-provided
Connection. Transaction boundaries belong to the caller (usually a unit of
work); this adapter never commits.

Optimistic concurrency
    ``append`` first compares the stream's committed count with the expected
    count. Two writers may pass that check at the same time; the
    ``UNIQUE(stream_id, version)`` constraint then rejects the slower one,
    which is reported as the same ``ConcurrencyConflictError``.

Exceptions:
    Maps SQLAlchemy errors to CHRONICLE event store exceptions.
"""

from collections.abc import Sequence
from typing import NoReturn, cast

from sqlalchemy import RowMapping, Select, func, insert, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import (
    DataError,
    DBAPIError,
    IntegrityError,
)

from chronicle.interfaces.eventstore import (
    ConcurrencyConflictError,
    DuplicateEventIdError,
    EventEnvelope,
    EventEnvelopeBatch,
    EventStore,
    InvalidEnvelopeError,
    StorageError,
)

from ..schema import event_store

# all keywords must be present in the lowered driver message
STREAM_VERSION_CONSTRAINT_KEYWORDS = ("stream_id", "version")  # pragma: no mutate
UNIQUE_EVENT_ID_CONSTRAINT_KEYWORDS = ("event_id", "unique")  # pragma: no mutate

EMPTY_STRING = ""  # pragma: no mutate


class SqlAlchemyEventStore(EventStore):
    """SQLAlchemy-backed EventStore.

    - Uses the canonical `event_store` table (see adapters.eventstore.schema).
    - Enforces expected-count guarded, single-stream appends.
    - Returns envelopes in the **same order** as provided.
    """

    def __init__(self, connection: Connection):
        self.connection = connection

    # --------------------------------------------------------------------- #
    # Interface implementation
    # --------------------------------------------------------------------- #

    def append(
        self,
        stream_id: str,
        expected_event_count: int,
        events: Sequence[EventEnvelope],
    ) -> Sequence[EventEnvelope]:
        batch = EventEnvelopeBatch(
            stream_id=stream_id,
            expected_event_count=expected_event_count,
            events=tuple(events),
        )

        try:
            actual = self._fetch_stream_event_count(batch.stream_id)
        except DBAPIError as e:
            raise StorageError(str(e)) from e
        if actual != batch.expected_event_count:
            raise ConcurrencyConflictError(
                batch.stream_id, batch.expected_event_count, actual
            )

        if not batch.events:
            return []

        try:
            persisted_rows = self._insert_returning(batch)
        except IntegrityError as e:
            self._raise_eventstore_error_from_integrity_error(e, batch)
        except DataError as e:  # value too long, bad JSON, etc.
            raise InvalidEnvelopeError(str(e)) from e
        except DBAPIError as e:  # OperationalError, InterfaceError, etc.
            raise StorageError(str(e)) from e

        return [EventEnvelope(**row) for row in persisted_rows]

    def read(self, stream_id: str) -> Sequence[EventEnvelope]:
        stmt: Select = (
            select(event_store)
            .where(event_store.c.stream_id == stream_id)
            .order_by(event_store.c.version.asc())
        )
        try:
            rows = self.connection.execute(stmt).mappings().all()
        except DBAPIError as e:
            raise StorageError(str(e)) from e
        return [EventEnvelope(**row) for row in rows]

    def read_since(
        self, global_seq: int = 0, limit: int | None = None
    ) -> Sequence[EventEnvelope]:
        if global_seq < 0:
            raise ValueError("global_seq must be >= 0")
        if limit is not None and limit < 1:
            raise ValueError("limit cannot be <= 0")

        stmt: Select = (
            select(event_store)
            .where(event_store.c.global_seq > global_seq)
            .order_by(event_store.c.global_seq.asc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            rows = self.connection.execute(stmt).mappings().all()
        except DBAPIError as e:
            raise StorageError(str(e)) from e
        return [EventEnvelope(**row) for row in rows]

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _fetch_stream_event_count(self, stream_id: str) -> int:
        """Return the number of committed events in the stream.

        Versions are contiguous from 1, so the highest version is the count.
        """
        stmt = select(func.max(event_store.c.version)).where(
            event_store.c.stream_id == stream_id
        )
        tip = cast(int | None, self.connection.execute(stmt).scalar_one_or_none())
        return 0 if tip is None else tip

    def _insert_returning(self, batch: EventEnvelopeBatch) -> Sequence[RowMapping]:
        """Insert the batch in one statement and return the stored rows in input order."""

        rows = [event.as_insertable_row() for event in batch.events]
        inserted = (
            self.connection.execute(
                insert(event_store).values(rows).returning(event_store)
            )
            .mappings()
            .all()
        )
        # RETURNING order is not guaranteed for multi-row inserts
        return sorted(inserted, key=lambda row: row["version"])

    @staticmethod
    def _raise_eventstore_error_from_integrity_error(
        integrity_error: IntegrityError, batch: EventEnvelopeBatch
    ) -> NoReturn:
        """Translate an IntegrityError into the matching event store error.

        Raises:
            ConcurrencyConflictError: a concurrent writer claimed one of the
                batch's versions first.
            DuplicateEventIdError: an event_id already exists.
            InvalidEnvelopeError: any other integrity violation.
        """

        msg = (
            str(integrity_error.orig)
            if integrity_error.orig not in (None, EMPTY_STRING)
            else str(integrity_error)
        )
        lowered = msg.lower()

        if all(kw in lowered for kw in STREAM_VERSION_CONSTRAINT_KEYWORDS):
            # The winner's count is unknown here; at least one more than expected.
            raise ConcurrencyConflictError(
                batch.stream_id,
                batch.expected_event_count,
                batch.expected_event_count + 1,
            ) from integrity_error

        if all(kw in lowered for kw in UNIQUE_EVENT_ID_CONSTRAINT_KEYWORDS):
            raise DuplicateEventIdError(msg) from integrity_error

        raise InvalidEnvelopeError(msg) from integrity_error
