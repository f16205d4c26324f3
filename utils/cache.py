"""
Read-through cache used in front of the competitor price feed and the
per-product analytics feed.

The cache is an optimization, never a source of truth: backend errors are
logged and behave like misses. Concurrent misses for the same key each fall
through to the loader (no stampede protection).
"""

import json
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class Cache(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None: ...

    async def invalidate(self, key: str) -> None: ...


class InMemoryCache:
    """Process-local TTL cache. Values are stored as-is."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        self._entries[key] = (self._clock() + ttl_seconds, value)

    async def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)


class RedisCache:
    """Redis-backed cache storing JSON-encoded values with SETEX."""

    def __init__(self, client: redis.Redis, key_prefix: str = "forecast:"):
        self.client = client
        self.key_prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "forecast:") -> "RedisCache":
        return cls(redis.Redis.from_url(url, decode_responses=True), key_prefix)

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self.client.get(self._key(key))
        except Exception as e:
            logger.warning(f"Redis GET failed for '{key}': {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.error(f"Failed to decode cached value for '{key}'. Ignoring entry.")
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        try:
            await self.client.setex(self._key(key), ttl_seconds, json.dumps(value))
        except Exception as e:
            logger.warning(f"Redis SETEX failed for '{key}': {e}")

    async def invalidate(self, key: str) -> None:
        try:
            await self.client.delete(self._key(key))
        except Exception as e:
            logger.warning(f"Redis DEL failed for '{key}': {e}")

    async def close(self) -> None:
        await self.client.aclose()


async def read_through(
    cache: Cache | None,
    key: str,
    loader: Callable[[], Awaitable[Any]],
    ttl_seconds: int,
) -> Any:
    """Return the cached value for key, or load it, store it and return it."""
    if cache is None:
        return await loader()
    cached = await cache.get(key)
    if cached is not None:
        logger.debug(f"Cache hit for {key}")
        return cached
    logger.debug(f"Cache miss for {key}")
    value = await loader()
    if value is not None:
        await cache.set(key, value, ttl_seconds)
    return value
