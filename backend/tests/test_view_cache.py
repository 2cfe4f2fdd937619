"""Tests for the per-owner view caches (in-process and Redis-backed)."""
import fnmatch
import json
import uuid
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from assetbridge.services.view_cache import RedisViewCache, ViewCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class FakeRedis:
    """Just the async Redis commands the view cache uses; TTLs are recorded, not enforced."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, *keys):
        return sum(1 for k in keys if self.store.pop(k, None) is not None)

    async def scan_iter(self, match=None):
        for key in list(self.store):
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key


def _loader(values, calls):
    async def load():
        calls.append(1)
        return list(values)
    return load


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ViewCache(ttl_seconds=60, clock=clock)


# ─── In-process ───────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_miss_then_hit(cache):
    owner = uuid.uuid4()
    assert await cache.get(owner, "locations") is None
    await cache.put(owner, "locations", ["Room 101"])
    assert await cache.get(owner, "locations") == ["Room 101"]


@pytest.mark.asyncio
async def test_entries_expire_after_ttl(cache, clock):
    owner = uuid.uuid4()
    await cache.put(owner, "units", ["HQ"])
    clock.now += 61
    assert await cache.get(owner, "units") is None


@pytest.mark.asyncio
async def test_expired_entries_of_other_owners_are_purged_on_write(cache, clock):
    for _ in range(5):
        await cache.put(uuid.uuid4(), "units", ["HQ"])
    clock.now += 61
    await cache.put(uuid.uuid4(), "units", ["Branch"])
    assert len(cache) == 1


@pytest.mark.asyncio
async def test_invalidate_owner_only_touches_that_owner(cache):
    a, b = uuid.uuid4(), uuid.uuid4()
    await cache.put(a, "locations", ["X"])
    await cache.put(a, "units", ["Y"])
    await cache.put(b, "units", ["Z"])

    assert await cache.invalidate_owner(a) == 2
    assert await cache.get(a, "locations") is None
    assert await cache.get(b, "units") == ["Z"]


@pytest.mark.asyncio
async def test_get_or_load_calls_loader_once_until_invalidated(cache):
    owner = uuid.uuid4()
    calls = []
    load = _loader(["Room 101", "Room 102"], calls)

    assert await cache.get_or_load(owner, "locations", load) == ["Room 101", "Room 102"]
    assert await cache.get_or_load(owner, "locations", load) == ["Room 101", "Room 102"]
    assert len(calls) == 1

    await cache.invalidate_owner(owner)
    await cache.get_or_load(owner, "locations", load)
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_returned_lists_are_copies(cache):
    owner = uuid.uuid4()
    await cache.put(owner, "units", ["HQ"])
    (await cache.get(owner, "units")).append("mutated")
    assert await cache.get(owner, "units") == ["HQ"]


# ─── Redis ────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_redis_cache_stores_json_with_ttl():
    redis = FakeRedis()
    cache = RedisViewCache(redis, ttl_seconds=120)
    owner = uuid.uuid4()

    values = await cache.get_or_load(owner, "locations", _loader(["Room 101"], []))

    key = f"assetbridge:views:{owner}:locations"
    assert values == ["Room 101"]
    assert json.loads(redis.store[key]) == ["Room 101"]
    assert redis.ttls[key] == 120


@pytest.mark.asyncio
async def test_invalidation_from_one_worker_reaches_the_others():
    redis = FakeRedis()
    worker_a = RedisViewCache(redis)
    worker_b = RedisViewCache(redis)
    owner, other = uuid.uuid4(), uuid.uuid4()
    calls = []

    await worker_b.get_or_load(owner, "locations", _loader(["Old Room"], calls))
    await worker_b.get_or_load(other, "locations", _loader(["Elsewhere"], []))

    assert await worker_a.invalidate_owner(owner) == 1

    fresh = await worker_b.get_or_load(owner, "locations", _loader(["New Room"], calls))
    assert fresh == ["New Room"]
    assert len(calls) == 2
    assert await worker_b.get_or_load(other, "locations", _loader(["unused"], [])) == ["Elsewhere"]


@pytest.mark.asyncio
async def test_redis_outage_falls_back_to_loader():
    redis = AsyncMock()
    redis.get.side_effect = RedisConnectionError("connection refused")
    cache = RedisViewCache(redis)

    values = await cache.get_or_load(uuid.uuid4(), "units", _loader(["HQ"], []))

    assert values == ["HQ"]
    redis.setex.assert_not_awaited()


@pytest.mark.asyncio
async def test_redis_invalidation_failure_is_not_raised():
    redis = FakeRedis()
    redis.delete = AsyncMock(side_effect=RedisConnectionError("connection reset"))
    cache = RedisViewCache(redis)
    owner = uuid.uuid4()
    await cache.get_or_load(owner, "units", _loader(["HQ"], []))

    assert await cache.invalidate_owner(owner) == 0
