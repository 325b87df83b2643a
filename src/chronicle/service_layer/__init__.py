"""Service layer for CHRONICLE.

Orchestrates documents and the event store: loading, change tracking, and
saving under optimistic concurrency.

Dependency rule: may import `chronicle.domain` and `chronicle.interfaces`, but
not `chronicle.adapters` or `chronicle.entrypoints`.
"""
