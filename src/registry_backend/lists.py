"""Cached access to the registry's static JSON lists.

The ban list and the featured package/theme lists live outside the database,
either behind an HTTP(S) URL or on the local filesystem. Each list is held in a
``CacheObject`` and re-read once the entry expires.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import requests

from .cache import CacheObject
from .config import Settings
from .result import ErrorKind, Result

logger = logging.getLogger(__name__)

Loader = Callable[[str], Any]

BAN_LIST = "ban_list"
FEATURED_PACKAGES = "featured_packages"
FEATURED_THEMES = "featured_themes"


def _http_get(url: str, user_agent: str, timeout: float) -> str:
    r = requests.get(url, headers={"User-Agent": user_agent}, timeout=timeout)
    r.raise_for_status()
    return r.text


class ListStore:
    """Serve the static lists, re-reading a source only once its entry expires."""

    def __init__(
        self,
        settings: Settings,
        loader: Loader | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings
        self.loader = loader or self._load_source
        self.clock = clock
        self._sources = {
            BAN_LIST: settings.ban_list_source,
            FEATURED_PACKAGES: settings.featured_packages_source,
            FEATURED_THEMES: settings.featured_themes_source,
        }
        self._entries: dict[str, CacheObject] = {}

    def _load_source(self, source: str) -> Any:
        if source.startswith("http://") or source.startswith("https://"):
            text = _http_get(source, self.settings.user_agent, self.settings.request_timeout)
        else:
            text = Path(source).read_text(encoding="utf-8")
        return json.loads(text)

    def _get(self, name: str) -> Result[list[Any]]:
        entry = self._entries.get(name)
        if entry is not None and not entry.expired:
            logger.debug("%s cache not expired", name)
            return Result.success(entry.data)

        logger.debug("%s cache %s", name, "missing" if entry is None else "expired")
        source = self._sources[name]
        if not source:
            return Result.failure(ErrorKind.SERVER_ERROR, f"No source configured for {name}")

        try:
            data = self.loader(source)
        except Exception as exc:
            logger.warning("Failed to load %s from %s: %s", name, source, exc)
            return Result.failure(ErrorKind.SERVER_ERROR, exc)

        if not isinstance(data, list):
            return Result.failure(ErrorKind.SERVER_ERROR, f"{name} must be a JSON array")

        entry = CacheObject(data, name, cache_time=self.settings.cache_time, clock=self.clock)
        entry.last_validate = self.clock()
        self._entries[name] = entry
        return Result.success(entry.data)

    def get_ban_list(self) -> Result[list[Any]]:
        return self._get(BAN_LIST)

    def get_featured_packages(self) -> Result[list[Any]]:
        return self._get(FEATURED_PACKAGES)

    def get_featured_themes(self) -> Result[list[Any]]:
        return self._get(FEATURED_THEMES)

    def is_package_name_banned(self, name: str) -> Result[bool]:
        """Content is True when ``name`` appears on the ban list."""
        ban_list = self.get_ban_list()
        if not ban_list.ok:
            return ban_list
        return Result.success(name in ban_list.content)
