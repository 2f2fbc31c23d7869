"""
Cache providers.

Implements the CacheProvider port twice:
- MemoryCacheProvider: process-local, per-entry TTL.
- RedisCacheProvider: shared across processes via redis.asyncio.

Values are stored as JSON so both providers hand back fresh copies.
Entries are advisory: last writer wins and a miss only costs a query.
"""

import json
import logging
import time
from typing import Any, Callable, Optional

from redis.asyncio import Redis

from app.core.config import Settings
from app.domain.ports import CacheProvider

logger = logging.getLogger(__name__)


class MemoryCacheProvider(CacheProvider):
    """In-process cache with absolute expiration."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[float, str]] = {}

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, payload = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return json.loads(payload)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        now = self._clock()
        self._purge_expired(now)
        self._entries[key] = (now + ttl_seconds, json.dumps(value))

    async def invalidate_prefix(self, prefix: str) -> int:
        keys = [key for key in self._entries if key.startswith(prefix)]
        for key in keys:
            del self._entries[key]
        return len(keys)

    async def close(self) -> None:
        self._entries.clear()

    def _purge_expired(self, now: float) -> None:
        # keys that are never read again are only dropped here
        expired = [
            key for key, (expires_at, _) in self._entries.items() if now >= expires_at
        ]
        for key in expired:
            del self._entries[key]


class RedisCacheProvider(CacheProvider):
    """Redis-backed cache.

    Args:
        client: A ``redis.asyncio.Redis`` created with ``decode_responses=True``.
    """

    def __init__(self, client: Redis) -> None:
        self._redis = client

    @classmethod
    def from_url(cls, redis_url: str) -> "RedisCacheProvider":
        client = Redis.from_url(redis_url, decode_responses=True, socket_timeout=5)
        logger.info("Using Redis cache at %s", redis_url)
        return cls(client)

    async def get(self, key: str) -> Optional[Any]:
        payload = await self._redis.get(key)
        if payload is None:
            return None
        return json.loads(payload)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        await self._redis.set(key, json.dumps(value), ex=ttl_seconds)

    async def invalidate_prefix(self, prefix: str) -> int:
        keys = [key async for key in self._redis.scan_iter(match=f"{prefix}*")]
        if not keys:
            return 0
        return await self._redis.delete(*keys)

    async def close(self) -> None:
        await self._redis.aclose()


def create_cache_provider(settings: Settings) -> CacheProvider:
    """Build the cache provider selected by ``settings.cache_provider``."""
    if settings.cache_provider == "redis":
        return RedisCacheProvider.from_url(settings.redis_url)
    return MemoryCacheProvider()
