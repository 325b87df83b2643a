"""Alembic environment for the CHRONICLE event store.

The URL comes from `-x url=...`, then the config's ``sqlalchemy.url`` (set by
`chronicle.config.build_alembic_config`), then ``CHRONICLE_DB_URL``.
Online runs connect through `make_engine`, so migrations see the same SQLite
PRAGMAs as the application. Logging is left to the caller; no ini file is read.
"""

from alembic import context

# Import table definitions so autogenerate sees them
import chronicle.adapters.eventstore.schema  # noqa: F401 # pylint: disable=unused-import
from chronicle import config as chronicle_config
from chronicle.adapters.db.engine import is_sqlite, make_engine
from chronicle.adapters.db.metadata import metadata

# pylint: disable=no-member

alembic_config = context.config
target_metadata = metadata

COMPARE_OPTIONS = {"compare_type": True, "compare_server_default": True}


def resolve_url() -> str:
    """Return the migration target URL.

    Raises:
        DatabaseUrlNotSetError: if no source provides a URL.
    """
    if url := context.get_x_argument(as_dictionary=True).get("url"):
        return url
    if url := alembic_config.get_main_option(chronicle_config.ALEMBIC_URL_KEY):
        return url
    return chronicle_config.get_db_url()


def run_migrations_offline() -> None:
    """Emit migration SQL to the script output without connecting."""
    context.configure(
        url=resolve_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **COMPARE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations over one connection to the target database."""
    url = resolve_url()
    engine = make_engine(url)
    try:
        with engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                render_as_batch=is_sqlite(url),
                **COMPARE_OPTIONS,
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
