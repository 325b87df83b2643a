"""Module for the event-sourced document repository."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

from chronicle.domain.documents import Document
from chronicle.interfaces.eventstore import (
    ConcurrencyConflictError,
    EventEnvelope,
    EventStore,
    StorageError,
)

from .errors import DocumentNotFoundError, UntrackedDocumentError
from .event_mapper import EventMapper

if TYPE_CHECKING:
    from chronicle.domain.events import DomainEvent
    from chronicle.interfaces.id_generator import IdGenerator

logger = logging.getLogger(__name__)

D = TypeVar("D", bound=Document)


@dataclass(slots=True)
class TrackedEntry:
    """Repository-owned bookkeeping for one loaded document instance.

    `expected_event_count` is fixed at load time; `pending_events` collects
    events emitted afterwards, in emission order.
    """

    stream_id: str
    stream_type: str
    expected_event_count: int
    pending_events: list[DomainEvent] = field(default_factory=list)


# ============================================================================
#                      Event-Sourced Document Repository
# ============================================================================


class DocumentRepository:
    """Loads, tracks, and saves documents under optimistic concurrency.

    Every `load` returns a fresh document instance with its own tracked
    entry, keyed by an opaque token handed to the document as it starts
    being observed. Two loads of the same ID are tracked separately and race
    at save time; the event store decides the winner.

    The repository never locks and never retries. A conflicted save leaves
    the entry and its pending events untouched; the caller either discards
    the instance and reloads, or retries later.
    """

    def __init__(
        self,
        event_store: EventStore,
        event_id_generator: IdGenerator,
        token_generator: IdGenerator,
        event_mapper: EventMapper | None = None,
    ) -> None:
        self.event_store = event_store
        self.event_id_generator = event_id_generator
        self.token_generator = token_generator
        self.event_mapper = event_mapper if event_mapper is not None else EventMapper()
        self._tracked: dict[str, TrackedEntry] = {}

    # --- Loads ---

    def load(self, document_cls: type[D], document_id: str) -> D:
        """Replay a document from its stream and start tracking it.

        A stream that was never written yields an empty document, ready for
        its first business operation.

        Args:
            document_cls: The concrete document type to build.
            document_id: The ID of the document (also its stream ID).
        Raises:
            StorageError: If the store cannot be read.
            UnknownEventKindError: If a stored event kind is not registered.
        Returns:
            The live, tracked document.
        """
        envelopes = self.event_store.read(document_id)
        return self._rehydrate_and_track(document_cls, document_id, envelopes)

    def get(self, document_cls: type[D], document_id: str) -> D:
        """Like `load`, but the document must already exist.

        Raises:
            DocumentNotFoundError: If the stream holds no events.
        """
        if not (envelopes := self.event_store.read(document_id)):
            raise DocumentNotFoundError(
                document_type_name=document_cls.__name__,
                document_id=document_id,
            )
        return self._rehydrate_and_track(document_cls, document_id, envelopes)

    def _rehydrate_and_track(
        self,
        document_cls: type[D],
        document_id: str,
        envelopes: Sequence[EventEnvelope],
    ) -> D:
        history = [self.event_mapper.to_domain_event(envelope) for envelope in envelopes]
        document = document_cls.rehydrate(document_id, history)

        # Observe only after replay so history is never queued for re-save.
        token = self.token_generator.new_id()
        entry = TrackedEntry(
            stream_id=document_id,
            stream_type=document_cls.DOCUMENT_TYPE,
            expected_event_count=len(history),
        )
        document.attach_observer(token, entry.pending_events.append)
        self._tracked[token] = entry

        logger.debug(
            "Loaded %s %s with %d historical events",
            document_cls.__name__,
            document_id,
            len(history),
        )
        return document

    # --- Saves ---

    def save(self, document: Document) -> Sequence[EventEnvelope]:
        """Append the document's pending events and stop tracking it.

        Args:
            document: A document previously returned by `load` or `get`.
        Raises:
            UntrackedDocumentError: If the document is not tracked here.
            ConcurrencyConflictError: If the stream moved on since load.
                The document stays tracked with its pending events.
            StorageError: If the store failed. The document stays tracked;
                the append's outcome is unknown until the stream is re-read.
        Returns:
            The persisted envelopes (empty if nothing was pending).

        When the store is transactional, the events become durable only when
        the surrounding unit of work commits. Tracking ends here, so after a
        failed commit the document must be reloaded and the operation redone.
        """
        token, entry = self._lookup(document)
        envelopes = [
            self.event_mapper.to_envelope(
                stream_id=entry.stream_id,
                stream_type=entry.stream_type,
                version=entry.expected_event_count + i,
                event_id=self.event_id_generator.new_id(),
                event=event,
            )
            for i, event in enumerate(entry.pending_events, start=1)
        ]

        try:
            persisted = self.event_store.append(
                entry.stream_id, entry.expected_event_count, envelopes
            )
        except ConcurrencyConflictError:
            logger.warning(
                "Concurrency conflict saving %s %s (expected %d events); "
                "%d pending events kept",
                type(document).__name__,
                entry.stream_id,
                entry.expected_event_count,
                len(entry.pending_events),
            )
            raise
        except StorageError:
            logger.error(
                "Storage failure saving %s %s; outcome unknown, re-read the stream",
                type(document).__name__,
                entry.stream_id,
            )
            raise

        del self._tracked[token]
        document.detach_observer()
        logger.debug(
            "Saved %s %s: %d events appended after version %d",
            type(document).__name__,
            entry.stream_id,
            len(persisted),
            entry.expected_event_count,
        )
        return persisted

    # --- Tracking ---

    def is_tracked(self, document: Document) -> bool:
        """Return True if the document has an active tracked entry here."""
        token = document.tracking_token
        return token is not None and token in self._tracked

    def pending_events(self, document: Document) -> list[DomainEvent]:
        """Return a copy of the events emitted since the document was loaded.

        Raises:
            UntrackedDocumentError: If the document is not tracked here.
        """
        _, entry = self._lookup(document)
        return list(entry.pending_events)

    def expected_event_count(self, document: Document) -> int:
        """Return the stream event count recorded when the document was loaded.

        Raises:
            UntrackedDocumentError: If the document is not tracked here.
        """
        _, entry = self._lookup(document)
        return entry.expected_event_count

    def discard(self, document: Document) -> None:
        """Stop tracking a document without saving, dropping its pending events.

        Use after a conflict to abandon the instance before reloading.

        Raises:
            UntrackedDocumentError: If the document is not tracked here.
        """
        token, entry = self._lookup(document)
        del self._tracked[token]
        document.detach_observer()
        logger.debug(
            "Discarded %s %s with %d pending events",
            type(document).__name__,
            entry.stream_id,
            len(entry.pending_events),
        )

    def _lookup(self, document: Document) -> tuple[str, TrackedEntry]:
        token = document.tracking_token
        if token is None or (entry := self._tracked.get(token)) is None:
            raise UntrackedDocumentError(
                document_type_name=type(document).__name__,
                document_id=document.document_id,
            )
        return token, entry
