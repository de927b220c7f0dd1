"""Parse listing query parameters into values the core accepts.

Each helper takes the raw query mapping and falls back to a safe default
rather than failing, so a malformed parameter never reaches the collection
pipeline.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from .collection import DIRECTIONS, SORT_FIELDS
from .models import RepoReference

MAX_QUERY_LENGTH = 50

_DIGITS = re.compile(r"^\d+$")
_PATH_TRAVERSAL = re.compile(r"\.{2}(?:[/\\])?")
_SEMVER = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][\da-zA-Z-]*)(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][\da-zA-Z-]*))*))?"
    r"(?:\+([\da-zA-Z-]+(?:\.[\da-zA-Z-]+)*))?$"
)


def page(params: Mapping[str, str]) -> int:
    value = params.get("page")
    if value is None or not _DIGITS.match(value) or int(value) < 1:
        return 1
    return int(value)


def sort(params: Mapping[str, str], default: str = "downloads") -> str:
    value = params.get("sort", default)
    return value if value in SORT_FIELDS else default


def direction(params: Mapping[str, str]) -> str:
    """Read ``direction``, falling back to ``order``; default ``desc``."""
    value = params.get("direction")
    if value is None:
        value = params.get("order", "desc")
    return value if value in DIRECTIONS else "desc"


def path_traversal_attempt(value: str) -> bool:
    return _PATH_TRAVERSAL.search(value) is not None


def search_query(params: Mapping[str, str]) -> str:
    """The ``q`` parameter, truncated; empty when missing or suspicious."""
    value = params.get("q")
    if not isinstance(value, str) or path_traversal_attempt(value):
        return ""
    return value[:MAX_QUERY_LENGTH].strip()


def engine(params: Mapping[str, str]) -> str | None:
    value = params.get("engine")
    if not isinstance(value, str) or _SEMVER.match(value) is None:
        return None
    return value


def repository(params: Mapping[str, str]) -> RepoReference | None:
    value = params.get("repository")
    if not value:
        return None
    try:
        return RepoReference.parse(value)
    except ValueError:
        return None


def rename(params: Mapping[str, str]) -> bool:
    return str(params.get("rename", "")).lower() == "true"
