"""Interfaces (application boundary) for CHRONICLE.

Defines framework-free application contracts: ABCs and small DTOs shared by
the service layer and adapters (event store, ID generators, unit of work).
Business rules stay out of this package.

Dependency rule: do not import from `chronicle.adapters`,
`chronicle.service_layer`, or `chronicle.entrypoints`. This package may be
imported by all of them.
"""
