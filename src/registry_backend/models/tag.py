"""Tag descriptor model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TagDescriptor:
    """A published tag on the host with its archive and commit."""

    name: str
    tarball_url: str
    sha: str

    @property
    def version(self) -> str:
        """Tag name without a single leading ``v``."""
        return self.name.removeprefix("v")

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "tarball_url": self.tarball_url,
            "commitSha": self.sha,
        }

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> TagDescriptor:
        commit = data.get("commit") or {}
        return cls(
            name=str(data.get("name", "")),
            tarball_url=str(data.get("tarball_url", "")),
            sha=str(commit.get("sha", "")) if isinstance(commit, dict) else "",
        )
