"""Defines the in-memory event store adapter package.

This package contains an in-memory implementation of the event store. It is
suitable for testing, prototyping, and scenarios where durability is not a
concern. Events are lost when the instance is discarded.
"""

from .eventstore import InMemoryEventStore

__all__ = ["InMemoryEventStore"]
