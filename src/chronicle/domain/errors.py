"""Domain-layer error definitions."""

# ============================================================================
#                           General domain errors
# ============================================================================


class DomainError(Exception):
    """Base class for domain-layer errors."""


class DocumentIdMismatchError(DomainError):
    """Raised when an event targets a different document_id than the receiver."""

    def __init__(self, document_id: str, event_document_id: str) -> None:
        super().__init__(
            f"Event document ID '{event_document_id}' does not match "
            f"document ID '{document_id}'."
        )
        self.document_id = document_id
        self.event_document_id = event_document_id


class UnknownEventKindError(DomainError):
    """Raised when no handler or event class is registered for an event kind."""

    def __init__(self, kind: str, owner: str) -> None:
        super().__init__(f"{owner} has no registration for event kind '{kind}'.")
        self.kind = kind
        self.owner = owner


class ObserverAlreadyAttachedError(DomainError):
    """Raised when a second owner tries to observe an already observed document."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document {document_id} already has an attached observer.")
        self.document_id = document_id


class ValidationError(DomainError):
    """Raised when a business operation's precondition fails.

    Always raised before any event is emitted, so neither the document state
    nor its pending events change.
    """

    def __init__(self, document_id: str, reason: str) -> None:
        super().__init__(f"Document {document_id}: {reason}")
        self.document_id = document_id
        self.reason = reason


# ============================================================================
#                          User related errors
# ============================================================================


class UserAlreadyCreatedError(ValidationError):
    """Raised when creating a user whose stream already holds a creation."""

    def __init__(self, document_id: str) -> None:
        super().__init__(document_id, "user has already been created.")


class UserNotCreatedError(ValidationError):
    """Raised when modifying a user that has not been created yet."""

    def __init__(self, document_id: str) -> None:
        super().__init__(document_id, "user must be created first.")


class BlankNameError(ValidationError):
    """Raised when a user name is empty or only whitespace."""

    def __init__(self, document_id: str) -> None:
        super().__init__(document_id, "name must not be blank.")
