from __future__ import annotations

from registry_backend.cache import DEFAULT_CACHE_TIME, CacheObject


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_cache_object_holds_contents():
    entry = CacheObject("test-contents", "test-name")
    assert entry.data == "test-contents"
    assert entry.name == "test-name"
    assert entry.invalidated is False
    assert entry.last_validate == 0.0
    assert entry.cache_time == DEFAULT_CACHE_TIME


def test_name_is_optional():
    assert CacheObject({"a": 1}).name is None


def test_not_expired_right_after_construction():
    clock = FakeClock()
    entry = CacheObject([1, 2], cache_time=60, clock=clock)
    assert entry.birth == 1000.0
    assert entry.expired is False


def test_expires_once_cache_time_has_passed():
    clock = FakeClock()
    entry = CacheObject([1, 2], cache_time=60, clock=clock)

    clock.now += 60
    assert entry.expired is False

    clock.now += 0.001
    assert entry.expired is True


def test_invalidate_only_sets_flag():
    clock = FakeClock()
    entry = CacheObject("data", cache_time=60, clock=clock)
    entry.invalidate()
    assert entry.invalidated is True
    assert entry.expired is False
