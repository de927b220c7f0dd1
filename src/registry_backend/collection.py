"""Sorting, ordering, pruning and ranking of package record collections.

Package records are plain dicts as produced by ``CanonicalPackage.to_dict`` or
read back from storage. The primitives below modify the records (and lists)
they are given and return them; ``search_packages`` and ``list_packages``
deep-copy their input first so cached collections stay untouched.
"""

from __future__ import annotations

import copy
import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from .config import DEFAULT_PAGINATED_AMOUNT, Settings
from .errors import ConfigError
from .ranking import DEFAULT_ALGORITHM, get_algorithm
from .result import ErrorKind, Result
from .semver import is_strict_semver, satisfies

logger = logging.getLogger(__name__)

Records = TypeVar("Records", dict[str, Any], list[dict[str, Any]])

# Sort method -> record field.
SORT_FIELDS = {
    "downloads": "downloads",
    "created_at": "created",
    "updated_at": "updated",
    "stars": "stargazers_count",
    "relevance": "relevance",
}
DIRECTIONS = ("asc", "desc")

SERVER_FIELDS = ("created", "updated", "star_gazers")
SHORT_FIELDS = SERVER_FIELDS + ("versions", "relevance")

DEFAULT_ENGINE_KEY = "atom"


def _sort_key(record: dict[str, Any], name: str) -> tuple[bool, Any]:
    # NaN compares false both ways and would break the ordering of its neighbours.
    value = record.get(name)
    present = value is not None and not (isinstance(value, float) and math.isnan(value))
    return (present, value if present else 0)


def sort_packages(packages: list[dict[str, Any]], method: str) -> list[dict[str, Any]]:
    """Sort ``packages`` in place, highest value of ``method`` first."""
    name = SORT_FIELDS.get(method)
    if name is None:
        known = ", ".join(sorted(SORT_FIELDS))
        raise ConfigError(f"Unrecognized sorting method '{method}'. Known methods: {known}")

    packages.sort(key=lambda record: _sort_key(record, name), reverse=True)
    return packages


def order_packages(packages: list[dict[str, Any]], direction: str) -> list[dict[str, Any]]:
    """Apply a direction to an already sorted list.

    ``desc`` keeps the order produced by ``sort_packages``; ``asc`` reverses it
    in place. Nothing is re-sorted here.
    """
    if direction not in DIRECTIONS:
        raise ConfigError(f"Unrecognized direction '{direction}'. Use 'asc' or 'desc'")
    if direction == "asc":
        packages.reverse()
    return packages


def _prune(packages: Records, fields: Iterable[str]) -> Records:
    records = packages if isinstance(packages, list) else [packages]
    for record in records:
        for name in fields:
            record.pop(name, None)
    return packages


def prune_full(packages: Records) -> Records:
    """Drop server-side fields from one record or a list of them."""
    return _prune(packages, SERVER_FIELDS)


def prune_short(packages: Records) -> Records:
    """Drop server-side fields plus ``versions`` and ``relevance``."""
    return _prune(packages, SHORT_FIELDS)


def annotate_relevance(
    query: str, packages: list[dict[str, Any]], algorithm: str
) -> list[dict[str, Any]]:
    """Score ``query`` against every package name and store it as ``relevance``.

    Raises:
        ConfigError: If ``algorithm`` is not a registered scorer.
    """
    scorer = get_algorithm(algorithm)
    for record in packages:
        record["relevance"] = scorer(query, str(record.get("name", "")))
    return packages


def filter_by_engine(
    package: dict[str, Any], engine: str | None, engine_key: str = DEFAULT_ENGINE_KEY
) -> dict[str, Any]:
    """Point ``metadata`` at the first version compatible with ``engine``.

    Versions are checked in mapping order against their
    ``engines[engine_key]`` range. An engine that is not a plain ``X.Y.Z``
    string, or no compatible version, leaves the package unchanged.
    """
    if not is_strict_semver(engine):
        return package

    versions = package.get("versions")
    if not isinstance(versions, dict):
        return package

    for record in versions.values():
        engines = record.get("engines") if isinstance(record, dict) else None
        wanted = engines.get(engine_key) if isinstance(engines, dict) else None
        if isinstance(wanted, str) and satisfies(engine, wanted):
            package["metadata"] = record
            break

    return package


@dataclass(slots=True)
class Page:
    """One page of a listing."""

    items: list[dict[str, Any]]
    page: int
    total_pages: int
    total: int
    links: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": self.items,
            "page": self.page,
            "total_pages": self.total_pages,
            "total": self.total,
            "links": dict(self.links),
        }


def paginate(packages: list[dict[str, Any]], page: int, per_page: int) -> Page:
    """Slice ``packages`` into the 1-based ``page``; out-of-range pages are empty."""
    if per_page <= 0:
        raise ValueError("per_page must be positive")

    page = max(page, 1)
    total = len(packages)
    total_pages = max(math.ceil(total / per_page), 1)
    start = (page - 1) * per_page

    links = {"first": 1, "last": total_pages}
    if page > 1:
        links["prev"] = min(page - 1, total_pages)
    if page < total_pages:
        links["next"] = page + 1

    return Page(
        items=packages[start : start + per_page],
        page=page,
        total_pages=total_pages,
        total=total,
        links=links,
    )


def _listing_defaults(
    settings: Settings | None, algorithm: str | None, per_page: int | None
) -> tuple[str, int]:
    """Fill unset listing options from ``settings``, then from the built-in defaults."""
    if settings is not None:
        algorithm = algorithm or settings.search_algorithm
        per_page = per_page or settings.paginated_amount
    return algorithm or DEFAULT_ALGORITHM, per_page or DEFAULT_PAGINATED_AMOUNT


def list_packages(
    packages: list[dict[str, Any]],
    *,
    sort: str = "downloads",
    direction: str = "desc",
    engine: str | None = None,
    page: int = 1,
    per_page: int | None = None,
    settings: Settings | None = None,
) -> Result[Page]:
    """Sort, order and paginate a collection into short records.

    ``per_page`` defaults to ``settings.paginated_amount``.
    """
    _, per_page = _listing_defaults(settings, None, per_page)
    return _run_listing(None, packages, None, sort, direction, engine, page, per_page)


def search_packages(
    query: str,
    packages: list[dict[str, Any]],
    *,
    algorithm: str | None = None,
    sort: str = "relevance",
    direction: str = "desc",
    engine: str | None = None,
    page: int = 1,
    per_page: int | None = None,
    settings: Settings | None = None,
) -> Result[Page]:
    """Rank a candidate collection against ``query`` and return one page.

    ``algorithm`` and ``per_page`` default to the configured
    ``search_algorithm`` and ``paginated_amount``.
    """
    algorithm, per_page = _listing_defaults(settings, algorithm, per_page)
    return _run_listing(query, packages, algorithm, sort, direction, engine, page, per_page)


def _run_listing(
    query: str | None,
    packages: list[dict[str, Any]],
    algorithm: str | None,
    sort: str,
    direction: str,
    engine: str | None,
    page: int,
    per_page: int,
) -> Result[Page]:
    try:
        records = copy.deepcopy(packages)
        if query is not None and algorithm is not None:
            annotate_relevance(query, records, algorithm)
        if engine is not None:
            for record in records:
                filter_by_engine(record, engine)
        sort_packages(records, sort)
        order_packages(records, direction)
        result = paginate(records, page, per_page)
    except ConfigError as exc:
        logger.warning("Listing rejected: %s", exc)
        return Result.failure(ErrorKind.CONFIG_ERROR, str(exc))
    except Exception as exc:
        logger.exception("Listing failed")
        return Result.failure(ErrorKind.SERVER_ERROR, exc)

    prune_short(result.items)
    return Result.success(result)
