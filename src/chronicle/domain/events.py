"""Events

Every event class carries a stable `KIND` tag. The tag, not the Python class,
is what gets persisted as `event_type` and what handlers and deserialization
key off of, so renaming or moving a class never breaks stored streams.
"""

import abc
from collections.abc import Iterable
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True, slots=True)
class DomainEvent(abc.ABC):
    """Base class for all domain events.
    Requires a kind tag and a way to determine the owning document ID.
    """

    KIND: ClassVar[str]

    @property
    @abc.abstractmethod
    def document_id(self) -> str:
        """Return the ID of the document this event belongs to."""


@dataclass(frozen=True, slots=True)
class UserCreated(DomainEvent):
    """Event indicating that a user has been created."""

    KIND: ClassVar[str] = "UserCreated"

    user_id: str
    name: str

    @property
    def document_id(self) -> str:
        return self.user_id


@dataclass(frozen=True, slots=True)
class UserNameUpdated(DomainEvent):
    """Event indicating that a user's name has changed."""

    KIND: ClassVar[str] = "UserNameUpdated"

    user_id: str
    name: str

    @property
    def document_id(self) -> str:
        return self.user_id


def build_event_registry(
    event_types: Iterable[type[DomainEvent]],
) -> dict[str, type[DomainEvent]]:
    """Map each event class's `KIND` to the class.

    Raises:
        ValueError: if two classes share a kind.
    """
    registry: dict[str, type[DomainEvent]] = {}
    for event_type in event_types:
        if (existing := registry.get(event_type.KIND)) is not None:
            raise ValueError(
                f"Event kind {event_type.KIND!r} registered by both "
                f"{existing.__name__} and {event_type.__name__}"
            )
        registry[event_type.KIND] = event_type
    return registry


# Registry of domain event kinds for deserialization
DOMAIN_EVENT_REGISTRY: dict[str, type[DomainEvent]] = build_event_registry(
    [
        UserCreated,
        UserNameUpdated,
    ]
)
