"""SQLAlchemy-backed Unit of Work for CHRONICLE.

Scopes one connection and one transaction around a `SqlAlchemyEventStore`.
Repositories built inside the `with` block append through that transaction;
nothing is durable until `commit()`.

A repository stops tracking a document once its append returns, before the
transaction commits. If `commit()` then raises `StorageError`, the events of
every save in the block are gone and the documents are untracked: reload them
in a new unit of work and repeat the operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.exc import DBAPIError

from chronicle.adapters.eventstore.sqlalchemy_adapters import SqlAlchemyEventStore
from chronicle.interfaces.eventstore import StorageError
from chronicle.interfaces.unit_of_work import AbstractUnitOfWork

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """SQLAlchemy-backed Unit of Work."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.connection: Connection

    def __enter__(self):
        self.connection = self.engine.connect()
        self.eventstore = SqlAlchemyEventStore(self.connection)
        return super().__enter__()

    def __exit__(self, *args):
        super().__exit__(*args)
        self.connection.close()

    def commit(self):
        """Commit the transaction.

        Raises:
            StorageError: if the database rejects or loses the commit. The
                outcome is unknown; re-read the affected streams.
        """
        try:
            self.connection.commit()
        except DBAPIError as e:
            raise StorageError(str(e)) from e

    def rollback(self):
        self.connection.rollback()
