"""Base class for all documents.

A document derives its whole state from the events applied to it. There is a
single application path (`_apply`) shared by historical replay and live
emission, so "this happened before" and "this is happening now" can never
diverge.

Concrete documents:
  - declare `DOCUMENT_TYPE` (used as the stream type when persisting);
  - register one state handler per event kind with `@handles(EventClass)`;
  - expose business methods that validate first and then call `_emit`.
"""

from __future__ import annotations

import abc
from collections.abc import Callable, Sequence
from typing import ClassVar, TypeVar

from chronicle.domain.errors import (
    DocumentIdMismatchError,
    ObserverAlreadyAttachedError,
    UnknownEventKindError,
)
from chronicle.domain.events import DomainEvent

D = TypeVar("D", bound="Document")
F = TypeVar("F", bound=Callable[..., None])

Observer = Callable[[DomainEvent], None]

HANDLES_KIND_ATTR = "__handles_kind__"  # pragma: no mutate


def handles(event_type: type[DomainEvent]) -> Callable[[F], F]:
    """Mark a document method as the state handler for `event_type`.

    The handler is registered under `event_type.KIND` when the document class
    is created. It receives the document and the event, and mutates state in
    place. Handlers must not validate or emit; the event already happened.

    Example:
        ```py
        @handles(events.UserCreated)
        def _on_created(self, event: events.UserCreated) -> None:
            self.name = event.name
        ```
    """

    def decorator(fn: F) -> F:
        setattr(fn, HANDLES_KIND_ATTR, event_type.KIND)
        return fn

    return decorator


class Document(abc.ABC):
    """Generic base class for all documents."""

    DOCUMENT_TYPE: ClassVar[str]
    """A string identifier for the type of event stream this document uses.

    Concrete document implementations must set this to distinguish their event streams.
    """

    _handlers: ClassVar[dict[str, Callable[..., None]]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        handlers = dict(cls._handlers)  # inherited registrations
        declared: set[str] = set()
        for attr in vars(cls).values():
            if (kind := getattr(attr, HANDLES_KIND_ATTR, None)) is None:
                continue
            if kind in declared:
                raise TypeError(
                    f"{cls.__name__} registers more than one handler for '{kind}'"
                )
            declared.add(kind)
            handlers[kind] = attr
        cls._handlers = handlers

    def __init__(self, document_id: str) -> None:
        self.document_id: str = document_id
        self._version: int = 0
        self._observer: Observer | None = None
        self._tracking_token: str | None = None

    # --- Construction Paths ---

    @classmethod
    def rehydrate(
        cls: type[D], document_id: str, event_stream: Sequence[DomainEvent]
    ) -> D:
        """Rebuild a document from its past events.

        No observer is attached during replay, so historical events are never
        mistaken for new ones.

        Args:
            document_id: The ID of the document to rebuild.
            event_stream: A sequence of events to apply to the document in order.

        Returns:
            An instance of the document rebuilt to the state represented by the event stream.
        Raises:
            DocumentIdMismatchError: If any event in the stream has a document_id
                that does not match the provided document_id.
            UnknownEventKindError: if the document has no handler for one of the events
        """
        document = cls(document_id)
        for event in event_stream:
            document._apply(event)  # pylint: disable=protected-access
        return document

    # --- Event Application ---

    def _apply(self, event: DomainEvent) -> None:
        """Internal gate. Do not override.

        Checks ownership, runs the registered handler, then reports the event
        to the observer (if one is attached).
        """
        if event.document_id != self.document_id:
            raise DocumentIdMismatchError(self.document_id, event.document_id)
        if (handler := self._handlers.get(event.KIND)) is None:
            raise UnknownEventKindError(event.KIND, type(self).__name__)
        handler(self, event)
        self._version += 1
        if self._observer is not None:
            self._observer(event)

    def _emit(self, event: DomainEvent) -> None:
        """Record a new fact. Call only after all preconditions passed."""
        self._apply(event)

    # --- Observation ---

    def attach_observer(self, token: str, observer: Observer) -> None:
        """Install the single observer that sees every subsequently applied event.

        Args:
            token: Opaque handle identifying the owner (e.g. a repository's
                tracked entry).
            observer: Called with each event after its handler has run.

        Raises:
            ObserverAlreadyAttachedError: if another owner is already attached.
        """
        if self._observer is not None:
            raise ObserverAlreadyAttachedError(self.document_id)
        self._observer = observer
        self._tracking_token = token

    def detach_observer(self) -> None:
        """Remove the observer, if any. Later events are applied but not reported."""
        self._observer = None
        self._tracking_token = None

    @property
    def tracking_token(self) -> str | None:
        """The token of the attached owner, or None when unobserved."""
        return self._tracking_token

    @property
    def version(self) -> int:
        """The number of events folded into the current state."""
        return self._version
