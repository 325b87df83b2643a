"""User Document"""

from chronicle.domain import errors, events

from .base import Document, handles


class User(Document):
    """Document representing a user account."""

    DOCUMENT_TYPE = "User"

    def __init__(self, document_id: str) -> None:
        super().__init__(document_id)
        self.name: str | None = None
        self.created: bool = False

    # --- Business Operations ---

    def create(self, name: str) -> None:
        """Create the user with an initial name.

        Raises:
            UserAlreadyCreatedError: if the user already exists.
            BlankNameError: if the name is empty after stripping whitespace.
        """
        if self.created:
            raise errors.UserAlreadyCreatedError(self.document_id)
        name = self._checked_name(name)
        self._emit(events.UserCreated(user_id=self.document_id, name=name))

    def update_name(self, name: str) -> None:
        """Rename the user. Renaming to the current name records nothing.

        Raises:
            UserNotCreatedError: if the user does not exist yet.
            BlankNameError: if the name is empty after stripping whitespace.
        """
        if not self.created:
            raise errors.UserNotCreatedError(self.document_id)
        name = self._checked_name(name)
        if name == self.name:
            return
        self._emit(events.UserNameUpdated(user_id=self.document_id, name=name))

    def _checked_name(self, name: str) -> str:
        if not (stripped := name.strip()):
            raise errors.BlankNameError(self.document_id)
        return stripped

    # --- Event Application ---

    @handles(events.UserCreated)
    def _on_created(self, event: events.UserCreated) -> None:
        self.name = event.name
        self.created = True

    @handles(events.UserNameUpdated)
    def _on_name_updated(self, event: events.UserNameUpdated) -> None:
        self.name = event.name
