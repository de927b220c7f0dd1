"""Exceptions shared across the registry core."""

from __future__ import annotations


class ConfigError(RuntimeError):
    """Raised when configuration, or a configured method name, is invalid."""


class OperationCancelled(RuntimeError):
    """Raised when a caller-supplied cancel event is set mid-operation."""
