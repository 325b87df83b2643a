"""Package for repository implementations."""

from .document_repository import DocumentRepository, TrackedEntry

__all__ = ["DocumentRepository", "TrackedEntry"]
