"""
Tests for the cache providers.

The Redis provider is exercised against a mocked ``redis.asyncio`` client;
no Redis server is needed.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.config import Settings
from app.infrastructure.cache import (
    MemoryCacheProvider,
    RedisCacheProvider,
    create_cache_provider,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


async def _keys(*keys):
    for key in keys:
        yield key


class TestMemoryCacheProvider:
    """Tests for the in-process provider."""

    @pytest.mark.asyncio
    async def test_miss_returns_none(self):
        assert await MemoryCacheProvider().get("absent") is None

    @pytest.mark.asyncio
    async def test_entry_expires_after_ttl(self):
        clock = FakeClock()
        cache = MemoryCacheProvider(clock=clock)
        await cache.set("k", {"a": 1}, ttl_seconds=300)

        clock.now += 299
        assert await cache.get("k") == {"a": 1}

        clock.now += 1
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_write_sweeps_expired_entries(self):
        clock = FakeClock()
        cache = MemoryCacheProvider(clock=clock)
        for index in range(1000):
            await cache.set(f"members:offset:{index}:10", [], ttl_seconds=1)
        await cache.set("long-lived", [], ttl_seconds=100_000)

        clock.now += 10_000
        await cache.set("members:offset:0:20", [], ttl_seconds=300)

        assert set(cache._entries) == {"long-lived", "members:offset:0:20"}

    @pytest.mark.asyncio
    async def test_get_returns_a_copy(self):
        cache = MemoryCacheProvider()
        await cache.set("k", {"items": [1]}, ttl_seconds=60)
        first = await cache.get("k")
        first["items"].append(2)
        assert await cache.get("k") == {"items": [1]}

    @pytest.mark.asyncio
    async def test_invalidate_prefix(self):
        cache = MemoryCacheProvider()
        await cache.set("members:offset:0:10", [], 60)
        await cache.set("members:offset:1:10", [], 60)
        await cache.set("other:key", [], 60)

        removed = await cache.invalidate_prefix("members:offset:")

        assert removed == 2
        assert await cache.get("members:offset:0:10") is None
        assert await cache.get("other:key") == []


class TestRedisCacheProvider:
    """Tests for the Redis provider with a mocked client."""

    @pytest.mark.asyncio
    async def test_set_serializes_with_expiry(self):
        client = AsyncMock()
        cache = RedisCacheProvider(client)

        await cache.set("k", {"a": 1}, ttl_seconds=300)

        client.set.assert_awaited_once_with("k", json.dumps({"a": 1}), ex=300)

    @pytest.mark.asyncio
    async def test_get_deserializes(self):
        client = AsyncMock()
        client.get.return_value = '{"a": 1}'
        assert await RedisCacheProvider(client).get("k") == {"a": 1}

    @pytest.mark.asyncio
    async def test_get_miss(self):
        client = AsyncMock()
        client.get.return_value = None
        assert await RedisCacheProvider(client).get("k") is None

    @pytest.mark.asyncio
    async def test_invalidate_prefix_deletes_matching_keys(self):
        client = AsyncMock()
        client.scan_iter = MagicMock(return_value=_keys("p:1", "p:2"))
        client.delete.return_value = 2

        removed = await RedisCacheProvider(client).invalidate_prefix("p:")

        assert removed == 2
        client.scan_iter.assert_called_once_with(match="p:*")
        client.delete.assert_awaited_once_with("p:1", "p:2")

    @pytest.mark.asyncio
    async def test_invalidate_prefix_without_matches(self):
        client = AsyncMock()
        client.scan_iter = MagicMock(return_value=_keys())

        assert await RedisCacheProvider(client).invalidate_prefix("p:") == 0
        client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_close_releases_client(self):
        client = AsyncMock()
        await RedisCacheProvider(client).close()
        client.aclose.assert_awaited_once()


class TestCreateCacheProvider:
    """Provider selection from settings."""

    def test_memory_by_default(self):
        settings = Settings(_env_file=None)
        assert isinstance(create_cache_provider(settings), MemoryCacheProvider)

    def test_redis_when_configured(self):
        settings = Settings(
            _env_file=None, cache_provider="redis", redis_url="redis://cache:6379/1"
        )
        assert isinstance(create_cache_provider(settings), RedisCacheProvider)
