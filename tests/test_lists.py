from __future__ import annotations

import json

import pytest

from registry_backend.config import Settings
from registry_backend.lists import ListStore
from registry_backend.result import ErrorKind


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class CountingLoader:
    def __init__(self, data):
        self.data = data
        self.calls: list[str] = []

    def __call__(self, source: str):
        self.calls.append(source)
        if isinstance(self.data, Exception):
            raise self.data
        return self.data


@pytest.fixture
def list_settings() -> Settings:
    return Settings(
        username="u",
        token="t",
        cache_time=60,
        ban_list_source="https://example.com/ban-list.json",
        featured_packages_source="https://example.com/featured.json",
    )


def test_ban_list_is_cached_until_expiry(list_settings):
    clock = FakeClock()
    loader = CountingLoader(["slothoki", "huh"])
    store = ListStore(list_settings, loader=loader, clock=clock)

    assert store.get_ban_list().content == ["slothoki", "huh"]
    clock.now += 30
    assert store.get_ban_list().ok
    assert len(loader.calls) == 1

    clock.now += 31
    assert store.get_ban_list().ok
    assert len(loader.calls) == 2


def test_lists_are_cached_independently(list_settings):
    loader = CountingLoader(["a"])
    store = ListStore(list_settings, loader=loader, clock=FakeClock())

    store.get_ban_list()
    store.get_featured_packages()
    assert loader.calls == [
        "https://example.com/ban-list.json",
        "https://example.com/featured.json",
    ]


def test_unconfigured_source(list_settings):
    store = ListStore(list_settings, loader=CountingLoader([]), clock=FakeClock())
    result = store.get_featured_themes()
    assert result.short is ErrorKind.SERVER_ERROR


def test_loader_failure(list_settings):
    store = ListStore(list_settings, loader=CountingLoader(OSError("offline")), clock=FakeClock())
    result = store.get_ban_list()
    assert result.short is ErrorKind.SERVER_ERROR
    assert isinstance(result.content, OSError)


def test_non_array_source(list_settings):
    store = ListStore(list_settings, loader=CountingLoader({"a": 1}), clock=FakeClock())
    assert store.get_ban_list().short is ErrorKind.SERVER_ERROR


def test_is_package_name_banned(list_settings):
    store = ListStore(list_settings, loader=CountingLoader(["slothoki"]), clock=FakeClock())
    assert store.is_package_name_banned("slothoki").content is True
    assert store.is_package_name_banned("linter").content is False


def test_is_package_name_banned_propagates_failure(list_settings):
    store = ListStore(list_settings, loader=CountingLoader(OSError("x")), clock=FakeClock())
    assert not store.is_package_name_banned("anything").ok


def test_reads_local_file(tmp_path):
    path = tmp_path / "featured_themes.json"
    path.write_text(json.dumps(["one-dark-ui"]), encoding="utf-8")
    settings = Settings(username="u", token="t", featured_themes_source=str(path))

    assert ListStore(settings).get_featured_themes().content == ["one-dark-ui"]
