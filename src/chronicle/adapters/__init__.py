"""Adapters (infrastructure) for CHRONICLE.

Provide concrete implementations of the ports in `chronicle.interfaces`
(event stores, ID generators, units of work), plus persistence mapping and
related wiring (engines, metadata, migrations).

Dependency rule: may import `chronicle.interfaces` and `chronicle.domain`; the
domain must not import this package.
"""
