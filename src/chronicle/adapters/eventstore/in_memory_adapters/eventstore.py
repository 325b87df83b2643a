"""In memory event store implementation.

All events are stored in memory and lost when the instance is discarded.
Use for unit tests, prototyping, or scenarios where durability is not required.

This implementation passes all contract tests for the EventStore interface.
"""

import threading
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timezone

from chronicle.interfaces.eventstore import (
    ConcurrencyConflictError,
    DuplicateEventIdError,
    EventEnvelope,
    EventEnvelopeBatch,
    EventStore,
)


class InMemoryEventStore(EventStore):
    """In-memory EventStore for testing and non-durable use cases.

    - Non-durable: all data is lost when the instance is discarded.
    - Thread-safe: one lock serializes appends and reads, so a conditional
      append checks the count and writes as a single step.
    """

    def __init__(self):
        self._events: list[EventEnvelope] = []
        self._streams: dict[str, list[EventEnvelope]] = {}
        self._event_ids: set[str] = set()
        self._lock = threading.Lock()

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

        with self._lock:
            stream = self._streams.get(stream_id, [])
            if len(stream) != batch.expected_event_count:
                raise ConcurrencyConflictError(
                    stream_id, batch.expected_event_count, len(stream)
                )

            # Validate everything before touching state so the append is all-or-nothing.
            for event in batch.events:
                if event.event_id in self._event_ids:
                    raise DuplicateEventIdError(f"duplicate event_id {event.event_id}")

            recorded_at = datetime.now(timezone.utc)
            appended = [
                replace(
                    event,
                    recorded_at=recorded_at,
                    global_seq=len(self._events) + i,
                )
                for i, event in enumerate(batch.events, start=1)
            ]

            self._events.extend(appended)
            self._streams.setdefault(stream_id, []).extend(appended)
            self._event_ids.update(event.event_id for event in appended)
            return appended

    def read(self, stream_id: str) -> Sequence[EventEnvelope]:
        with self._lock:
            return tuple(self._streams.get(stream_id, ()))

    def read_since(
        self, global_seq: int = 0, limit: int | None = None
    ) -> Sequence[EventEnvelope]:
        if global_seq < 0:
            raise ValueError("global_seq must be >= 0")
        if limit is not None and limit <= 0:
            raise ValueError("limit cannot be <= 0")

        # global_seq is 1-based and dense, so it doubles as a list offset
        end = None if limit is None else global_seq + limit
        with self._lock:
            return tuple(self._events[global_seq:end])

    # --------------------------------------------------------------------- #
    # Introspection
    # --------------------------------------------------------------------- #

    def stream_event_count(self, stream_id: str) -> int:
        """Return the number of committed events in a stream (0 if unknown)."""
        with self._lock:
            return len(self._streams.get(stream_id, ()))
