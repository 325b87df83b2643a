"""Database engine factory.

All engines used by CHRONICLE come from `make_engine` so that connections are
configured the same way everywhere.

SQLite connections get PRAGMAs suited to an append-heavy event log:
    - ``journal_mode=WAL`` (readers do not block the single writer)
    - ``synchronous=NORMAL`` (balanced durability under WAL)
    - ``busy_timeout`` (wait for a competing writer instead of failing at once)
    - ``foreign_keys=ON``
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, make_url

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import Engine

SQLITE_NAMES = {"sqlite", "sqlite+pysqlite"}
DEFAULT_SQLITE_BUSY_TIMEOUT_MS = 5000


def is_sqlite(url: str | URL) -> bool:
    """Return True if the given SQLAlchemy URL or string corresponds to SQLite."""
    return make_url(str(url)).get_backend_name() in SQLITE_NAMES


def make_engine(
    url: str | URL,
    *,
    echo: bool = False,
    sqlite_busy_timeout_ms: int = DEFAULT_SQLITE_BUSY_TIMEOUT_MS,
) -> Engine:
    """Create a SQLAlchemy Engine for the given URL.

    Args:
        url: Database connection URL (str or :class:`URL`).
        echo: If True, log SQL statements.
        sqlite_busy_timeout_ms: How long a SQLite connection waits on a locked
            database before raising. Ignored for other backends.

    Returns:
        Engine: Configured SQLAlchemy Engine.
    """

    engine = create_engine(url, echo=echo)

    if is_sqlite(url):

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_conn: SQLiteConnection, conn_record):  # type: ignore # pylint: disable=W0613
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON;")
            cur.execute("PRAGMA journal_mode=WAL;")
            cur.execute("PRAGMA synchronous=NORMAL;")
            cur.execute(f"PRAGMA busy_timeout={int(sqlite_busy_timeout_ms)};")
            cur.close()

    return engine
