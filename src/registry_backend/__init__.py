"""registry-backend core package.

This package holds the ingestion and ranking core of the package registry. The
HTTP handler layer, user store and database are collaborators that call into it
with plain values and receive a ``Result`` back.
"""

__all__ = [
    "assembler",
    "collection",
    "config",
    "ownership",
    "ranking",
]
