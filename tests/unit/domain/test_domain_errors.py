"""Unit tests for domain error types."""

import pytest

from chronicle.domain import errors

# pylint: disable=magic-value-comparison


def test_document_id_mismatch_message():
    """Mismatch errors name both IDs."""
    error = errors.DocumentIdMismatchError("doc-1", "doc-2")
    assert str(error) == "Event document ID 'doc-2' does not match document ID 'doc-1'."


def test_unknown_event_kind_message():
    """Unknown-kind errors name the kind and who could not resolve it."""
    error = errors.UnknownEventKindError("Renamed", "User")
    assert str(error) == "User has no registration for event kind 'Renamed'."
    assert (error.kind, error.owner) == ("Renamed", "User")


def test_observer_already_attached_message():
    """Observer errors name the document."""
    assert "doc-1" in str(errors.ObserverAlreadyAttachedError("doc-1"))


@pytest.mark.parametrize(
    "error_type, reason",
    [
        (errors.UserAlreadyCreatedError, "user has already been created."),
        (errors.UserNotCreatedError, "user must be created first."),
        (errors.BlankNameError, "name must not be blank."),
    ],
)
def test_user_validation_errors(error_type, reason):
    """User precondition failures are ValidationErrors carrying a reason."""
    error = error_type("user-1")
    assert isinstance(error, errors.ValidationError)
    assert isinstance(error, errors.DomainError)
    assert error.reason == reason
    assert str(error) == f"Document user-1: {reason}"
