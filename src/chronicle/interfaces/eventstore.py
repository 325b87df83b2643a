"""Event store interfaces for CHRONICLE.

This module defines:
- The canonical `EventEnvelope` DTO (the persisted wire form of one event).
- The `EventStore` port (framework-free ABC) for appending and reading events.
- A small, adapter-agnostic exception hierarchy for precise error handling.

Layering & dependency rules:
- Lives under `chronicle.interfaces`. Do NOT import from adapters or entrypoints.
- Safe to import from the service layer and adapters.

Contract overview
-----------------
Append:
- `append(stream_id, expected_event_count, events)` is atomic for a **single stream**.
- The append only happens if the stream currently holds exactly
  `expected_event_count` events; otherwise nothing is written.
- An empty batch is a valid no-op (the expected count is still checked).
- `global_seq` is assigned by the store; `recorded_at` is normalized to **UTC tz-aware**.
- Returns envelopes in the **same order** as provided.
- Errors:
  * `InvalidEnvelopeError`: client-side invariant violations (mixed streams,
    versions not continuing from `expected_event_count`, naive timestamps, etc.).
  * `ConcurrencyConflictError`: the stream's committed event count did not
    match `expected_event_count`.
  * `DuplicateEventIdError`: `event_id` not globally unique.
  * `StorageError`: driver/DB/availability issues. The outcome of a failed
    append is unknown; re-read the stream before assuming anything.

Reads:
- `read(stream_id)`: every committed event of the stream, ascending by `version`.
- `read_since(global_seq=0, limit=None)`: ascending by `global_seq` (global catch-up).
- Empty results yield an empty sequence. Invalid ranges raise `ValueError`.

Invariants & validation:
- `event_id` is a **26-char ULID**.
- `version >= 1`; `global_seq` is None pre-persist.
- If provided, `recorded_at` must be **tz-aware** (UTC).
- `stream_id`, `stream_type`, `event_type` must be non-empty (whitespace rejected).
"""

import abc
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

# --- Exceptions to standardize adapter behavior ---


class EventStoreError(Exception):
    """Base class for CHRONICLE event store errors."""


class ConcurrencyConflictError(EventStoreError):
    """Expected event count precondition failed (optimistic concurrency)."""

    def __init__(self, stream_id: str, expected_event_count: int, actual_event_count: int):
        super().__init__(
            f"Stream {stream_id!r}: expected {expected_event_count} committed "
            f"events, found {actual_event_count}."
        )
        self.stream_id = stream_id
        self.expected_event_count = expected_event_count
        self.actual_event_count = actual_event_count


class DuplicateEventIdError(EventStoreError):
    """event_id must be globally unique; duplicate detected."""


class InvalidEnvelopeError(EventStoreError):
    """The event envelope (or batch of envelopes) is invalid."""


class StorageError(EventStoreError):
    """Operational/timeout/connection errors from the underlying store."""


# --- Envelope DTO ---


@dataclass(frozen=True, slots=True)
class EventEnvelope:
    """Canonical persisted event wrapper.

    Notes:
      - `event_type` is the event's stable kind tag, never a runtime class name.
      - `global_seq` is None before persistence and assigned by the store.
      - `recorded_at` if set, should be UTC, tz-aware; the store may overwrite it.
    """

    # pylint: disable=too-many-instance-attributes

    stream_id: str
    stream_type: str
    version: int
    event_id: str  # 26-char ULID
    event_type: str
    payload: dict[str, Any]
    metadata: dict[str, Any] | None = None  # e.g., correlation_id, causation_id, actor
    recorded_at: datetime | None = None
    global_seq: int | None = None

    def __post_init__(self) -> None:
        if len(self.event_id) != 26:
            raise InvalidEnvelopeError("event_id must be a 26-character ULID.")
        if self.version < 1:
            raise InvalidEnvelopeError("version must be >= 1")
        if self.global_seq is not None and self.global_seq < 1:
            raise InvalidEnvelopeError("global_seq must be >= 1 when set")
        if self.recorded_at is not None:
            if self.recorded_at.tzinfo is None or self.recorded_at.utcoffset() is None:
                raise InvalidEnvelopeError("recorded_at must be tz-aware.")
            if self.recorded_at.utcoffset() != timedelta(0):
                raise InvalidEnvelopeError("recorded_at must be UTC.")
        if (
            not self.stream_id.strip()
            or not self.stream_type.strip()
            or not self.event_type.strip()
        ):
            raise InvalidEnvelopeError(
                "stream_id, stream_type, and event_type must be non-empty."
            )

    def as_insertable_row(self) -> dict[str, Any]:
        """Return the envelope as a column mapping, without store-assigned fields."""
        return {
            "stream_id": self.stream_id,
            "stream_type": self.stream_type,
            "version": self.version,
            "event_id": self.event_id,
            "event_type": self.event_type,
            "payload": self.payload,
            "metadata": self.metadata,
        }


@dataclass(frozen=True, slots=True)
class EventEnvelopeBatch:
    """A single-stream, atomic append batch.

    Invariants enforced:
      - All events belong to `stream_id`.
      - Versions run contiguously from `expected_event_count + 1`.
      - global_seq is None for all events (pre-persist).
      - event_id is unique within the batch.

    An empty batch is allowed; appending it only checks the expected count.
    """

    stream_id: str
    expected_event_count: int
    events: Sequence[EventEnvelope]

    def __post_init__(self) -> None:
        if self.expected_event_count < 0:
            raise InvalidEnvelopeError("expected_event_count must be >= 0")

        for event in self.events:
            if event.stream_id != self.stream_id:
                raise InvalidEnvelopeError("Mixed streams in a single batch.")
            if event.global_seq is not None:
                raise InvalidEnvelopeError(
                    "global_seq must be None before persistence."
                )

        ids = [event.event_id for event in self.events]
        if len(ids) != len(set(ids)):
            raise InvalidEnvelopeError("Duplicate event_id within batch.")

        versions = [e.version for e in self.events]
        first = self.expected_event_count + 1
        if versions != list(range(first, first + len(versions))):
            raise InvalidEnvelopeError(
                f"Versions in batch must be contiguous and start at {first}."
            )

    @property
    def resulting_event_count(self) -> int:
        """The stream's event count once this batch is committed."""
        return self.expected_event_count + len(self.events)


# --- Event Store Interface ---


class EventStore(abc.ABC):
    """An abstract base class for an event store."""

    @abc.abstractmethod
    def append(
        self,
        stream_id: str,
        expected_event_count: int,
        events: Sequence[EventEnvelope],
    ) -> Sequence[EventEnvelope]:
        """Persist events atomically, guarded by the stream's event count.

        Args:
            stream_id: The stream to append to.
            expected_event_count: The number of events the caller believes are
                already committed to the stream.
            events: Envelopes to append, versions starting at
                `expected_event_count + 1`. May be empty.

        Raises:
            InvalidEnvelopeError: mixed streams, versions not continuing from
                `expected_event_count`, or other invariant violations.
            ConcurrencyConflictError: when the committed event count differs
                from `expected_event_count`. Nothing is written.
            DuplicateEventIdError: when any event_id already exists.
            StorageError: for operational/timeout/connection errors. The
                outcome is unknown; callers must re-read the stream.

        Returns:
            The persisted events with `global_seq` and `recorded_at` populated,
            in the **same order** as provided.
        """

    @abc.abstractmethod
    def read(self, stream_id: str) -> Sequence[EventEnvelope]:
        """Return all events for a given stream, ordered by version ascending.

        Args:
            stream_id: The ID of the stream to read from.

        Returns:
            A sequence of EventEnvelope objects. Empty if the stream has never
            been written.

        Raises:
            StorageError: for operational/timeout/connection errors.
        """

    @abc.abstractmethod
    def read_since(
        self, global_seq: int = 0, limit: int | None = None
    ) -> Sequence[EventEnvelope]:
        """Return events with `global_seq` > the given value, ascending.

        Args:
            global_seq: The global sequence number to read after,
                defaults to 0 (meaning start with the first event).
            limit: Maximum number of events to return. If None, returns all available.

        Returns:
            A sequence of EventEnvelope objects, possibly empty.

        Raises:
            ValueError: if global_seq < 0 or limit is not None and limit < 1.
        """
