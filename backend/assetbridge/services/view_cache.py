"""Short-lived cache for per-tenant aggregate views (distinct locations/units).

A completed import calls ``invalidate_owner`` so filter dropdowns pick up new
locations and units immediately instead of waiting for the TTL. Deployments
with more than one worker process use ``RedisViewCache`` so that signal
reaches every worker; ``ViewCache`` keeps entries in the current process.
"""
import json
import logging
import time
import uuid
from collections.abc import Awaitable, Callable
from typing import Protocol

from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[list[str]]]


class ViewCacheBackend(Protocol):
    async def get_or_load(self, owner_id: uuid.UUID, view: str, loader: Loader) -> list[str]: ...

    async def invalidate_owner(self, owner_id: uuid.UUID) -> int: ...


class ViewCache:
    """In-process cache; only safe for a single worker (tests, local dev)."""

    def __init__(self, ttl_seconds: float = 300, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[tuple[uuid.UUID, str], tuple[float, list[str]]] = {}

    def _expired(self, stored_at: float) -> bool:
        return self._clock() - stored_at > self.ttl_seconds

    async def get(self, owner_id: uuid.UUID, view: str) -> list[str] | None:
        entry = self._entries.get((owner_id, view))
        if entry is None:
            return None
        stored_at, values = entry
        if self._expired(stored_at):
            del self._entries[(owner_id, view)]
            return None
        return list(values)

    async def put(self, owner_id: uuid.UUID, view: str, values: list[str]) -> None:
        self.purge_expired()
        self._entries[(owner_id, view)] = (self._clock(), list(values))

    def purge_expired(self) -> int:
        stale = [k for k, (stored_at, _) in self._entries.items() if self._expired(stored_at)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def __len__(self) -> int:
        return len(self._entries)

    async def get_or_load(self, owner_id: uuid.UUID, view: str, loader: Loader) -> list[str]:
        cached = await self.get(owner_id, view)
        if cached is not None:
            return cached
        values = await loader()
        await self.put(owner_id, view, values)
        return list(values)

    async def invalidate_owner(self, owner_id: uuid.UUID) -> int:
        """Drop every cached view for ``owner_id``; returns how many were dropped."""
        keys = [k for k in self._entries if k[0] == owner_id]
        for key in keys:
            del self._entries[key]
        logger.debug("Invalidated %d cached views for owner=%s", len(keys), owner_id)
        return len(keys)


class RedisViewCache:
    """Views shared by all workers; Redis expires entries after ``ttl_seconds``.

    When Redis is unreachable reads fall through to the loader, so dropdowns
    keep working uncached.
    """

    def __init__(self, redis_client, ttl_seconds: int = 300, namespace: str = "assetbridge:views"):
        self.redis = redis_client
        self.ttl_seconds = int(ttl_seconds)
        self.namespace = namespace

    def _key(self, owner_id: uuid.UUID, view: str) -> str:
        return f"{self.namespace}:{owner_id}:{view}"

    async def get_or_load(self, owner_id: uuid.UUID, view: str, loader: Loader) -> list[str]:
        key = self._key(owner_id, view)
        try:
            raw = await self.redis.get(key)
        except RedisError as exc:
            logger.warning("View cache read failed key=%s: %s", key, exc)
            return await loader()

        if raw is not None:
            return json.loads(raw)

        values = await loader()
        try:
            await self.redis.setex(key, self.ttl_seconds, json.dumps(values))
        except RedisError as exc:
            logger.warning("View cache write failed key=%s: %s", key, exc)
        return list(values)

    async def invalidate_owner(self, owner_id: uuid.UUID) -> int:
        """Delete every view key of ``owner_id``; returns how many were deleted."""
        pattern = f"{self.namespace}:{owner_id}:*"
        try:
            keys = [key async for key in self.redis.scan_iter(match=pattern)]
            deleted = await self.redis.delete(*keys) if keys else 0
        except RedisError as exc:
            # Entries still expire after the TTL.
            logger.error("View cache invalidation failed owner=%s: %s", owner_id, exc)
            return 0
        logger.debug("Invalidated %d cached views for owner=%s", deleted, owner_id)
        return deleted
