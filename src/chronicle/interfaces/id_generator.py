"""Interface for ID generators.

The repository needs two kinds of identifiers: event ids (26-char ULIDs, see
`EventEnvelope`) and opaque tracking tokens for loaded documents. Both are
produced through this port so tests can inject deterministic generators.
"""

import abc

# pylint: disable=too-few-public-methods


class IdGenerator(abc.ABC):
    """Contract for an ID generator."""

    @abc.abstractmethod
    def new_id(self) -> str:
        """Generate a new unique identifier.

        Identifiers must never repeat for the lifetime of the generator.
        """
