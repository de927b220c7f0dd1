"""Canonical package record and repository host classification."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from urllib.parse import urlsplit

_SCP_PATTERN = re.compile(r"^[\w.-]+@([^:/]+):")


class HostKind(str, Enum):
    """Source-control host a repository URL points at."""

    GITHUB = "git"
    BITBUCKET = "bit"
    SOURCEFORGE = "sfr"
    GITLAB = "lab"
    OTHER = "na"

    @classmethod
    def from_url(cls, url: str) -> HostKind:
        """Classify ``url`` by its host; the first matching host wins."""
        labels = _url_host(url).split(".")
        for kind, label in _HOST_PRIORITY:
            if label in labels:
                return kind
        return cls.OTHER


_HOST_PRIORITY = (
    (HostKind.GITHUB, "github"),
    (HostKind.BITBUCKET, "bitbucket"),
    (HostKind.SOURCEFORGE, "sourceforge"),
    (HostKind.GITLAB, "gitlab"),
)


def _url_host(url: str) -> str:
    url = url.strip()

    # git@github.com:owner/repo.git
    match = _SCP_PATTERN.match(url)
    if match:
        return match.group(1).lower()

    parts = urlsplit(url)
    if parts.hostname:
        return parts.hostname
    # npm shorthand such as "gitlab:owner/repo"
    if parts.scheme and not parts.netloc:
        return parts.scheme.lower()

    return urlsplit(f"//{url}").hostname or ""


def repository_info(repository: Any, fallback_url: str) -> dict[str, Any]:
    """Return the ``{type, url}`` repository block for a manifest field.

    Structured objects are kept verbatim. Strings are classified by host. A
    missing field falls back to ``fallback_url``.
    """
    if isinstance(repository, dict):
        return dict(repository)
    url = repository if isinstance(repository, str) and repository else fallback_url
    return {"type": HostKind.from_url(url).value, "url": url}


def _isoformat(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class CanonicalPackage:
    """Normalised, versioned record produced by package assembly."""

    name: str
    repository: dict[str, Any]
    readme: str
    metadata: dict[str, Any]
    versions: dict[str, dict[str, Any]]
    latest: str
    created: datetime
    updated: datetime
    creation_method: str
    downloads: int = 0
    stargazers_count: int = 0
    star_gazers: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "repository": dict(self.repository),
            "created": _isoformat(self.created),
            "updated": _isoformat(self.updated),
            "creation_method": self.creation_method,
            "downloads": self.downloads,
            "stargazers_count": self.stargazers_count,
            "star_gazers": list(self.star_gazers),
            "readme": self.readme,
            "metadata": self.metadata,
            "versions": self.versions,
            "releases": {"latest": self.latest},
        }
