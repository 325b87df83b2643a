"""Shared SQLAlchemy `MetaData` object with a naming convention.

Every CHRONICLE table attaches to this metadata so that constraints and
indexes get deterministic names. Alembic autogenerate relies on that: random
identifiers would show up as spurious drop/add pairs in new revisions.

Naming convention:
    - Indexes:       ix_<table>_<col...>
    - Unique:        uq_<table>_<col...>
    - Check:         ck_<table>_<constraint_name>
    - Primary key:   pk_<table>
"""

from sqlalchemy import MetaData

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(table_name)s_%(column_0_N_name)s",
        "uq": "uq_%(table_name)s_%(column_0_N_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "pk": "pk_%(table_name)s",
    }
)
