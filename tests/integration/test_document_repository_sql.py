"""DocumentRepository over the SQL event store, one unit of work per caller.

These tests replay the concurrency scenarios with real transactions: two
callers load the same user in separate units of work, and the database
decides whose save wins.
"""

from __future__ import annotations

import pytest

from chronicle.adapters.unit_of_work import SqlAlchemyUnitOfWork
from chronicle.bootstrap import build_repository, build_unit_of_work
from chronicle.domain.documents import User
from chronicle.interfaces.eventstore import ConcurrencyConflictError

# pylint: disable=magic-value-comparison


def create_user(engine, user_id: str, name: str) -> None:
    """Create and commit a user in its own unit of work."""
    with SqlAlchemyUnitOfWork(engine) as uow:
        repo = build_repository(uow.eventstore)
        user = repo.load(User, user_id)
        user.create(name)
        repo.save(user)
        uow.commit()


def read_user(engine, user_id: str) -> User:
    """Load a user in a throwaway unit of work."""
    with SqlAlchemyUnitOfWork(engine) as uow:
        return build_repository(uow.eventstore).load(User, user_id)


def test_create_and_reload(sqlite_engine_file):
    """A committed user replays from the database."""
    create_user(sqlite_engine_file, "user-1", "Ada")

    user = read_user(sqlite_engine_file, "user-1")

    assert user.name == "Ada"
    assert user.version == 1


def test_uncommitted_save_is_lost(sqlite_engine_file):
    """Saving without committing the unit of work persists nothing."""
    with SqlAlchemyUnitOfWork(sqlite_engine_file) as uow:
        repo = build_repository(uow.eventstore)
        user = repo.load(User, "user-1")
        user.create("Ada")
        repo.save(user)

    assert read_user(sqlite_engine_file, "user-1").created is False


def test_concurrent_create_only_one_wins(sqlite_engine_file):
    """Two callers create the same user; the second commit attempt conflicts."""
    uow_a = SqlAlchemyUnitOfWork(sqlite_engine_file)
    uow_b = SqlAlchemyUnitOfWork(sqlite_engine_file)
    with uow_a, uow_b:
        repo_a = build_repository(uow_a.eventstore)
        repo_b = build_repository(uow_b.eventstore)
        user_a = repo_a.load(User, "user-1")
        user_b = repo_b.load(User, "user-1")
        # close B's implicit read so A can write
        uow_b.rollback()

        user_a.create("Ada")
        repo_a.save(user_a)
        uow_a.commit()

        user_b.create("Grace")
        with pytest.raises(ConcurrencyConflictError):
            repo_b.save(user_b)
        assert repo_b.is_tracked(user_b)

    assert read_user(sqlite_engine_file, "user-1").name == "Ada"


def test_stale_rename_conflicts_then_retry_succeeds(sqlite_engine_file):
    """A rename based on an old version conflicts; reload and retry wins."""
    create_user(sqlite_engine_file, "user-1", "Ada")

    with SqlAlchemyUnitOfWork(sqlite_engine_file) as uow_b:
        repo_b = build_repository(uow_b.eventstore)
        stale = repo_b.load(User, "user-1")
        uow_b.rollback()

        with SqlAlchemyUnitOfWork(sqlite_engine_file) as uow_a:
            repo_a = build_repository(uow_a.eventstore)
            fresh = repo_a.load(User, "user-1")
            fresh.update_name("Grace")
            repo_a.save(fresh)
            uow_a.commit()

        stale.update_name("Hedy")
        with pytest.raises(ConcurrencyConflictError):
            repo_b.save(stale)

        repo_b.discard(stale)
        retry = repo_b.load(User, "user-1")
        retry.update_name("Hedy")
        repo_b.save(retry)
        uow_b.commit()

    user = read_user(sqlite_engine_file, "user-1")
    assert user.name == "Hedy"
    assert user.version == 3


def test_build_unit_of_work_uses_environment(monkeypatch, sqlite_url):
    """Without an explicit URL the unit of work reads CHRONICLE_DB_URL."""
    monkeypatch.setenv("CHRONICLE_DB_URL", sqlite_url)

    uow = build_unit_of_work()
    try:
        with uow:
            assert len(uow.eventstore.read_since()) == 0
    finally:
        uow.engine.dispose()  # type: ignore[attr-defined]
