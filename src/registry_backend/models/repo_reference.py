"""Repository reference and end-user credential models."""

from __future__ import annotations

import re
from dataclasses import dataclass

# Each part: URL-safe characters, at most 214 long, not starting with "." or "_".
_REPO_PATTERN = re.compile(r"^([-a-zA-Z\d][-\w.]{0,213})/([-a-zA-Z\d][-\w.]{0,213})$")


@dataclass(frozen=True)
class RepoReference:
    """An ``owner/repo`` pair on the source-control host."""

    owner: str
    repo: str

    def __post_init__(self) -> None:
        if not self.owner or not self.repo:
            raise ValueError("Repository owner and name must be non-empty")

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def full_name(self) -> str:
        return str(self)

    @classmethod
    def parse(cls, value: str) -> RepoReference:
        match = _REPO_PATTERN.match(value.strip())
        if match is None:
            raise ValueError(f"Invalid repository reference: {value!r}")
        return cls(owner=match.group(1), repo=match.group(2))


@dataclass(frozen=True)
class User:
    """End user whose own host token is used for ownership checks."""

    name: str
    token: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("User name must be non-empty")

    def __repr__(self) -> str:
        return f"User(name={self.name!r}, token='***')"
