from datetime import date

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from tutorhub.infra.cache.slot_cache import InMemorySlotCache, RedisSlotCache, slot_cache_key
from tutorhub.services.errors import CacheUnavailable

SLOTS = [{"start_time": "09:00", "end_time": "09:30"}]


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class FakeRedis:
    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    def get(self, key: str):
        return self.store.get(key)

    def setex(self, key: str, ttl: int, value: str) -> None:
        self.store[key] = value
        self.ttls[key] = ttl


class BrokenRedis:
    def get(self, key: str):
        raise RedisConnectionError("connection refused")

    def setex(self, key: str, ttl: int, value: str) -> None:
        raise RedisConnectionError("connection refused")


def _key(**overrides) -> str:
    params = dict(
        teacher_id="t1",
        session_id="sess",
        day=date(2025, 1, 5),
        window_signature="0900-1100:30+10",
        bookings_version=0,
        anchor_zone="Asia/Kolkata",
        viewer_zone="Asia/Kolkata",
    )
    params.update(overrides)
    return slot_cache_key(**params)


def test_key_changes_with_every_input() -> None:
    base = _key()
    assert _key() == base
    assert _key(viewer_zone="Europe/London") != base
    assert _key(anchor_zone="UTC") != base
    assert _key(bookings_version=1) != base
    assert _key(window_signature="0900-1200:30+10") != base
    assert _key(day=date(2025, 1, 6)) != base
    assert _key(session_id="other") != base
    assert _key(teacher_id="t2") != base


def test_memory_cache_round_trip_and_expiry() -> None:
    clock = FakeClock()
    cache = InMemorySlotCache(clock=clock)
    cache.put("k", SLOTS, ttl=60)

    assert cache.get("k") == SLOTS
    clock.now += 59
    assert cache.get("k") == SLOTS
    clock.now += 1
    assert cache.get("k") is None


def test_memory_cache_returns_copies() -> None:
    cache = InMemorySlotCache()
    cache.put("k", SLOTS)
    cached = cache.get("k")
    cached[0]["start_time"] = "23:00"
    assert cache.get("k") == SLOTS


def test_memory_cache_miss() -> None:
    assert InMemorySlotCache().get("missing") is None


def test_redis_cache_stores_json_with_ttl() -> None:
    client = FakeRedis()
    cache = RedisSlotCache(client)  # type: ignore[arg-type]
    cache.put("k", SLOTS, ttl=86400)

    assert client.ttls["k"] == 86400
    assert cache.get("k") == SLOTS
    assert cache.get("other") is None


def test_redis_errors_surface_as_cache_unavailable() -> None:
    cache = RedisSlotCache(BrokenRedis())  # type: ignore[arg-type]
    with pytest.raises(CacheUnavailable):
        cache.get("k")
    with pytest.raises(CacheUnavailable):
        cache.put("k", SLOTS)


def test_memory_cache_sweeps_expired_entries_on_write() -> None:
    clock = FakeClock()
    cache = InMemorySlotCache(clock=clock)
    for version in range(1000):
        cache.put(_key(bookings_version=version), SLOTS, ttl=10)
    assert len(cache) == 1000

    clock.now = 1e6
    cache.put(_key(bookings_version=1000), SLOTS, ttl=10)

    assert len(cache) == 1
    assert cache.get(_key(bookings_version=1000)) == SLOTS


def test_memory_cache_keeps_live_entries_when_sweeping() -> None:
    clock = FakeClock()
    cache = InMemorySlotCache(clock=clock)
    cache.put("short", SLOTS, ttl=5)
    cache.put("long", SLOTS, ttl=500)

    clock.now += 10
    cache.put("new", SLOTS, ttl=5)

    assert len(cache) == 2
    assert cache.get("long") == SLOTS
    assert cache.get("short") is None
