"""Data models for the registry core."""

from __future__ import annotations

from .package import CanonicalPackage, HostKind, repository_info
from .repo_reference import RepoReference, User
from .tag import TagDescriptor

__all__ = [
    "CanonicalPackage",
    "HostKind",
    "RepoReference",
    "TagDescriptor",
    "User",
    "repository_info",
]
