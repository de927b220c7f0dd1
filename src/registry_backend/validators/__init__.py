"""Validation helpers for externally supplied documents."""
