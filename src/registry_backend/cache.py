"""In-memory TTL holder for data read from slow sources.

A ``CacheObject`` never refreshes itself. Once it reports ``expired`` the owner
fetches fresh data and replaces the whole object.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

DEFAULT_CACHE_TIME = 300.0


class CacheObject:
    """Wrap ``data`` together with the moment it was stored.

    ``cache_time`` is in seconds. ``clock`` returns the current time in seconds
    and exists so tests can control expiry.
    """

    __slots__ = ("birth", "data", "name", "cache_time", "invalidated", "last_validate", "_clock")

    def __init__(
        self,
        data: Any,
        name: str | None = None,
        *,
        cache_time: float = DEFAULT_CACHE_TIME,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._clock = clock
        self.birth = clock()
        self.data = data
        self.name = name
        self.cache_time = cache_time
        self.invalidated = False
        self.last_validate = 0.0

    @property
    def expired(self) -> bool:
        return self._clock() - self.birth > self.cache_time

    def invalidate(self) -> None:
        """Flag the entry for callers; ``expired`` is not affected."""
        self.invalidated = True

    def __repr__(self) -> str:
        return (
            f"CacheObject(name={self.name!r}, birth={self.birth}, "
            f"cache_time={self.cache_time}, invalidated={self.invalidated})"
        )
