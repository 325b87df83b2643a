"""Domain layer for CHRONICLE.

Contains business rules: documents, domain events, and domain errors. This
package is deliberately technology-agnostic.

Dependency rule: do not import from `chronicle.adapters`,
`chronicle.service_layer`, or `chronicle.entrypoints`.
"""
