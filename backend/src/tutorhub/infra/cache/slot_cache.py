"""
Slot cache backends.

The cache only ever holds rendered slot lists for listings. It is
best-effort: backends raise CacheUnavailable on transport failures and the
caller decides to carry on without it.
"""
from __future__ import annotations

import json
import logging
import time
from datetime import date
from threading import Lock
from typing import Any, Callable, Protocol

from redis import Redis
from redis.exceptions import RedisError

from tutorhub.services.errors import CacheUnavailable

logger = logging.getLogger(__name__)

SLOT_CACHE_TTL_SECONDS = 24 * 60 * 60

CachedSlots = list[dict[str, str]]


def slot_cache_key(
    *,
    teacher_id: str,
    session_id: str,
    day: date,
    window_signature: str,
    bookings_version: int,
    anchor_zone: str,
    viewer_zone: str,
) -> str:
    """
    Composite key that fully determines the rendered list.

    `bookings_version` is the length of the append-only booked list, so a new
    booking moves readers onto a fresh key instead of the stale entry.
    """
    return (
        f"slots:{teacher_id}:{session_id}:{day.isoformat()}:{window_signature}"
        f":v{bookings_version}:{anchor_zone}:{viewer_zone}"
    )


class SlotCache(Protocol):
    def get(self, key: str) -> CachedSlots | None: ...

    def put(self, key: str, slots: CachedSlots, ttl: int = SLOT_CACHE_TTL_SECONDS) -> None: ...


class InMemorySlotCache:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._lock = Lock()
        self._clock = clock
        self._entries: dict[str, tuple[float, CachedSlots]] = {}

    def get(self, key: str) -> CachedSlots | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, slots = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return [dict(slot) for slot in slots]

    def put(self, key: str, slots: CachedSlots, ttl: int = SLOT_CACHE_TTL_SECONDS) -> None:
        if ttl <= 0:
            return
        with self._lock:
            now = self._clock()
            # Superseded keys are never read again, so expiry is swept here
            expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
            for k in expired:
                del self._entries[k]
            self._entries[key] = (now + ttl, [dict(slot) for slot in slots])

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class RedisSlotCache:
    def __init__(self, client: Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisSlotCache":
        client = Redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
            retry_on_timeout=True,
        )
        return cls(client)

    def get(self, key: str) -> CachedSlots | None:
        try:
            raw: Any = self._client.get(key)
        except RedisError as exc:
            raise CacheUnavailable(f"redis get failed: {exc}") from exc
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding undecodable cache entry %s", key)
            return None

    def put(self, key: str, slots: CachedSlots, ttl: int = SLOT_CACHE_TTL_SECONDS) -> None:
        try:
            self._client.setex(key, ttl, json.dumps(slots))
        except RedisError as exc:
            raise CacheUnavailable(f"redis setex failed: {exc}") from exc


class NullSlotCache:
    """Caching disabled."""

    def get(self, key: str) -> CachedSlots | None:
        return None

    def put(self, key: str, slots: CachedSlots, ttl: int = SLOT_CACHE_TTL_SECONDS) -> None:
        return None
