"""ID generators for CHRONICLE."""

import threading
import uuid

from ulid import monotonic

from chronicle.interfaces.id_generator import IdGenerator

# pylint: disable=too-few-public-methods


class ULIDGenerator(IdGenerator):
    """Thread-safe monotonic ULID generator.

    ULIDs are unique, lexicographically sortable identifiers made of a
    timestamp and a random component. Used for event ids, which the event
    store requires to be 26 characters long.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def new_id(self) -> str:
        """Generate a new ULID (serialized across threads)."""
        with self._lock:
            return str(monotonic.new())


class UUIDv4Generator(IdGenerator):
    """UUIDv4 generator.

    Random, unordered identifiers. The repository uses these as opaque
    tracking tokens for loaded documents.
    """

    def new_id(self) -> str:
        """Generate a new UUID."""
        return str(uuid.uuid4())


class SimpleIdGenerator(IdGenerator):
    """A simple ID generator that produces sequential, zero-padded IDs.

    Note:
        Not suitable for production use; primarily for testing and demos.
        Two instances produce the same sequence.
    """

    def __init__(self, length: int = 26, prefix: str = "") -> None:
        self._counter = 0
        self._length = length - len(prefix)
        self._prefix = prefix

    def new_id(self) -> str:
        """Generate a new unique identifier."""
        self._counter += 1
        return f"{self._prefix}{self._counter:0{self._length}d}"
