"""Repository-related error definitions."""


class RepositoryError(Exception):
    """Base class for repository-related errors."""


class DocumentNotFoundError(RepositoryError):
    """Raised when a document's stream holds no events."""

    document_id: str
    document_type_name: str

    def __init__(self, document_type_name: str, document_id: str):
        super().__init__(f"{document_type_name} with ID {document_id} not found.")
        self.document_type_name = document_type_name
        self.document_id = document_id


class UntrackedDocumentError(RepositoryError):
    """Raised when saving (or inspecting) a document this repository does not track.

    The document was either never loaded through this repository, already
    saved, or discarded. This is a usage error, not a transient condition.
    """

    document_id: str
    document_type_name: str

    def __init__(self, document_type_name: str, document_id: str):
        super().__init__(
            f"{document_type_name} with ID {document_id} is not tracked by this "
            "repository; load it before saving."
        )
        self.document_type_name = document_type_name
        self.document_id = document_id
