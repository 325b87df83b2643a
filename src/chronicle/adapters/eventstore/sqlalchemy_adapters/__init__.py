"""Defines the SQLAlchemy EventStore adapter package.

Durable event storage on a relational database (SQLite or PostgreSQL) through
SQLAlchemy Core.
"""

from .eventstore import SqlAlchemyEventStore

__all__ = ["SqlAlchemyEventStore"]
