"""Tests for CacheService get/set/add and get_or_compute semantics."""

import asyncio
from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis

from bbb_tenancy.infrastructure.cache.keys import tenant_credentials_key
from bbb_tenancy.infrastructure.cache.redis_cache import CacheService


def test_tenant_credentials_key() -> None:
    assert tenant_credentials_key("tenant1") == "tenant:tenant1"
    assert tenant_credentials_key("") == "tenant:"


async def test_set_then_get_roundtrips_json(cache: CacheService) -> None:
    assert await cache.set("k", {"apiURL": "https://x/", "secret": "s"}, ttl=60)
    assert await cache.get("k") == {"apiURL": "https://x/", "secret": "s"}


async def test_add_does_not_overwrite(cache: CacheService) -> None:
    assert await cache.add("k", {"v": 1}, ttl=60) is True
    assert await cache.add("k", {"v": 2}, ttl=60) is False
    assert await cache.get("k") == {"v": 1}


async def test_get_or_compute_skips_compute_on_hit(cache: CacheService) -> None:
    await cache.set("k", {"v": "cached"}, ttl=60)
    compute = AsyncMock(return_value={"v": "fresh"})

    assert await cache.get_or_compute("k", 60, compute) == {"v": "cached"}
    compute.assert_not_awaited()


async def test_get_or_compute_stores_on_miss(cache: CacheService) -> None:
    compute = AsyncMock(return_value={"v": "fresh"})

    assert await cache.get_or_compute("k", 60, compute) == {"v": "fresh"}
    assert await cache.get("k") == {"v": "fresh"}
    compute.assert_awaited_once()


async def test_get_or_compute_does_not_store_failures(cache: CacheService) -> None:
    compute = AsyncMock(side_effect=RuntimeError("upstream down"))

    with pytest.raises(RuntimeError):
        await cache.get_or_compute("k", 60, compute)
    assert await cache.get("k") is None


async def test_get_or_compute_returns_race_winner(cache: CacheService) -> None:
    """A value stored while we were computing wins over our own result."""

    async def compute() -> dict:
        await cache.set("k", {"v": "winner"}, ttl=60)
        return {"v": "loser"}

    assert await cache.get_or_compute("k", 60, compute) == {"v": "winner"}


async def test_concurrent_get_or_compute_converges(cache: CacheService) -> None:
    calls = 0

    async def compute() -> dict:
        nonlocal calls
        calls += 1
        await asyncio.sleep(0)
        return {"v": calls}

    results = await asyncio.gather(
        *(cache.get_or_compute("k", 60, compute) for _ in range(5))
    )
    stored = await cache.get("k")
    assert all(result == stored for result in results)


async def test_unavailable_cache_computes_every_time(make_settings) -> None:
    cache = CacheService(settings=make_settings())
    compute = AsyncMock(return_value={"v": 1})

    assert cache.is_available() is False
    assert await cache.get_or_compute("k", 60, compute) == {"v": 1}
    assert await cache.get_or_compute("k", 60, compute) == {"v": 1}
    assert compute.await_count == 2


async def test_redis_error_on_get_is_a_miss(make_settings) -> None:
    client = AsyncMock()
    client.get.side_effect = redis.RedisError("boom")
    cache = CacheService(redis_client=client, settings=make_settings())

    assert await cache.get("k") is None


async def test_disconnect_closes_client(cache: CacheService) -> None:
    await cache.disconnect()
    assert cache.is_available() is False


async def test_get_or_compute_replaces_rejected_entry(cache: CacheService) -> None:
    await cache.set("k", {"v": "stale-shape"}, ttl=60)
    compute = AsyncMock(return_value={"value": 1})

    result = await cache.get_or_compute(
        "k", 60, compute, is_valid=lambda record: "value" in record
    )

    assert result == {"value": 1}
    assert await cache.get("k") == {"value": 1}
    compute.assert_awaited_once()


async def test_non_json_entry_reads_as_miss(cache: CacheService, fake_redis) -> None:
    await fake_redis.set("k", "{broken", ex=60)

    assert await cache.get("k") is None
    assert await cache.get_or_compute("k", 60, AsyncMock(return_value={"v": 1})) == {"v": 1}
    assert await cache.get("k") == {"v": 1}
