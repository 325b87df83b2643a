"""Unit tests for the User document."""

import pytest

from chronicle.domain import errors, events
from chronicle.domain.documents import User

# pylint: disable=magic-value-comparison


def observed_user(history: list[events.DomainEvent] | None = None) -> tuple[User, list]:
    """Rehydrate a user and attach a list-collecting observer."""
    user = User.rehydrate("user-1", history or [])
    seen: list[events.DomainEvent] = []
    user.attach_observer("tok", seen.append)
    return user, seen


CREATED = events.UserCreated(user_id="user-1", name="Ada")


class TestCreate:
    """`User.create`."""

    @staticmethod
    def test_create_emits_user_created() -> None:
        """Creating a fresh user records exactly one UserCreated."""
        user, seen = observed_user()

        user.create("Ada")

        assert seen == [CREATED]
        assert user.name == "Ada"
        assert user.created is True
        assert user.version == 1

    @staticmethod
    def test_create_strips_whitespace() -> None:
        """Surrounding whitespace is not part of the name."""
        user, seen = observed_user()
        user.create("  Ada  ")
        assert seen == [CREATED]

    @staticmethod
    @pytest.mark.parametrize("name", ["", "   ", "\t\n"])
    def test_create_blank_name_rejected(name: str) -> None:
        """Blank names are rejected before anything is recorded."""
        user, seen = observed_user()

        with pytest.raises(errors.BlankNameError) as e:
            user.create(name)

        assert e.value.document_id == "user-1"
        assert not seen
        assert user.created is False

    @staticmethod
    def test_create_twice_rejected() -> None:
        """A created user cannot be created again."""
        user, seen = observed_user([CREATED])

        with pytest.raises(errors.UserAlreadyCreatedError):
            user.create("Grace")

        assert not seen
        assert user.name == "Ada"


class TestUpdateName:
    """`User.update_name`."""

    @staticmethod
    def test_rename_emits_user_name_updated() -> None:
        """Renaming records the new name."""
        user, seen = observed_user([CREATED])

        user.update_name("Ada Lovelace")

        assert seen == [events.UserNameUpdated(user_id="user-1", name="Ada Lovelace")]
        assert user.name == "Ada Lovelace"
        assert user.version == 2

    @staticmethod
    def test_rename_to_same_name_records_nothing() -> None:
        """Renaming to the current (stripped) name is a no-op."""
        user, seen = observed_user([CREATED])

        user.update_name(" Ada ")

        assert not seen
        assert user.version == 1

    @staticmethod
    def test_rename_before_create_rejected() -> None:
        """A user that does not exist cannot be renamed."""
        user, seen = observed_user()

        with pytest.raises(errors.UserNotCreatedError):
            user.update_name("Ada")

        assert not seen

    @staticmethod
    def test_rename_to_blank_rejected() -> None:
        """Blank names are rejected on rename too."""
        user, seen = observed_user([CREATED])

        with pytest.raises(errors.BlankNameError):
            user.update_name(" ")

        assert not seen
        assert user.name == "Ada"


class TestReplay:
    """Rebuilding users from history."""

    @staticmethod
    def test_replay_matches_live_state() -> None:
        """Replaying the emitted events rebuilds the same state."""
        live, seen = observed_user()
        live.create("Ada")
        live.update_name("Grace")
        live.update_name("Hedy")

        replayed = User.rehydrate("user-1", seen)

        assert replayed.name == live.name == "Hedy"
        assert replayed.created is live.created is True
        assert replayed.version == live.version == 3
