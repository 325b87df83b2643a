"""Relational database plumbing shared by the SQLAlchemy adapters.

Engines (`engine`), the shared `MetaData` (`metadata`), portable column types
(`sa_types`), and the Alembic migration scripts (`alembic/`).
"""
