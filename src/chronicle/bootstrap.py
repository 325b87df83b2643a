"""Wire repositories and units of work with their default collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chronicle import config
from chronicle.adapters.db.engine import make_engine
from chronicle.adapters.id_generators import ULIDGenerator, UUIDv4Generator
from chronicle.adapters.unit_of_work import SqlAlchemyUnitOfWork
from chronicle.service_layer.repositories import DocumentRepository

if TYPE_CHECKING:
    from chronicle.interfaces.eventstore import EventStore
    from chronicle.interfaces.unit_of_work import AbstractUnitOfWork
    from chronicle.service_layer.repositories.event_mapper import EventMapper


def build_repository(
    event_store: EventStore, event_mapper: EventMapper | None = None
) -> DocumentRepository:
    """Build a repository with ULID event ids and UUIDv4 tracking tokens."""
    return DocumentRepository(
        event_store=event_store,
        event_id_generator=ULIDGenerator(),
        token_generator=UUIDv4Generator(),
        event_mapper=event_mapper,
    )


def build_unit_of_work(url: str | None = None) -> AbstractUnitOfWork:
    """Build a SQLAlchemy unit of work, defaulting to `CHRONICLE_DB_URL`."""
    return SqlAlchemyUnitOfWork(make_engine(url or config.get_db_url()))
