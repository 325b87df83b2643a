"""Event store adapters: in-memory and SQLAlchemy-backed implementations."""
