"""Entrypoints (inbound adapters) for CHRONICLE.

Expose administrative tooling to the outside world. Currently this is the
`chronicle` CLI, which manages the SQL event store schema.
"""
