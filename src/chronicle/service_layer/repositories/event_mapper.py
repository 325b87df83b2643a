"""Conversions between DomainEvents and EventEnvelopes."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from chronicle.domain.errors import UnknownEventKindError
from chronicle.domain.events import DOMAIN_EVENT_REGISTRY
from chronicle.interfaces.eventstore import EventEnvelope

if TYPE_CHECKING:
    from chronicle.domain.events import DomainEvent


class EventMapper:
    """Maps between DomainEvents and EventEnvelopes.

    The envelope's `event_type` is the event's `KIND` tag; the payload is the
    event's dataclass fields.
    """

    def __init__(
        self, event_registry: dict[str, type[DomainEvent]] | None = None
    ) -> None:
        self.event_registry = (
            event_registry if event_registry is not None else DOMAIN_EVENT_REGISTRY
        )

    @staticmethod
    def to_envelope(
        stream_id: str,
        stream_type: str,
        version: int,
        event_id: str,
        event: DomainEvent,
    ) -> EventEnvelope:
        """Convert a DomainEvent to an EventEnvelope."""
        return EventEnvelope(
            stream_id=stream_id,
            stream_type=stream_type,
            version=version,
            event_id=event_id,
            event_type=event.KIND,
            payload=asdict(event),
        )

    def to_domain_event(self, envelope: EventEnvelope) -> DomainEvent:
        """Convert an EventEnvelope back to a DomainEvent.

        Raises:
            UnknownEventKindError: if the envelope's kind is not registered.
        """
        if not (cls := self.event_registry.get(envelope.event_type)):
            raise UnknownEventKindError(envelope.event_type, type(self).__name__)
        return cls(**envelope.payload)
