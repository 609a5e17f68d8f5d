"""Redis cache implementation for newsdesk.

Provides async Redis operations for caching serialized article snapshots.
Uses the redis-py async client; the client (and its connection pool) is
created by the caller and shared by every repository call.
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import TYPE_CHECKING, cast

import redis.asyncio as redis
from redis.exceptions import RedisError

from newsdesk.cache.base import Cache
from newsdesk.core.errors import CacheError

if TYPE_CHECKING:
    from redis.asyncio import Redis


def create_redis(url: str) -> Redis:
    """Create a Redis client with its own connection pool.

    The caller owns the client and must close it with ``aclose()``.
    """
    return redis.from_url(  # type: ignore[no-untyped-call]
        url,
        decode_responses=False,  # We're storing bytes
    )


class RedisCache(Cache):
    """Cache backed by Redis strings with SETEX expiry.

    Every redis-py failure is re-raised as CacheError so callers only need
    to handle one exception type.
    """

    def __init__(self, client: Redis):
        self.client = client

    async def get(self, key: str) -> bytes | None:
        try:
            value = await self.client.get(key)
        except RedisError as exc:
            raise CacheError("get", key, str(exc)) from exc
        if value is None:
            return None
        if isinstance(value, str):
            return value.encode()
        return cast(bytes, value)

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        try:
            await self.client.setex(key, ttl, value)
        except RedisError as exc:
            raise CacheError("set", key, str(exc)) from exc

    async def delete(self, key: str) -> None:
        try:
            await self.client.delete(key)
        except RedisError as exc:
            raise CacheError("delete", key, str(exc)) from exc

    async def health_check(self) -> bool:
        """Check Redis connectivity."""
        try:
            await cast(Awaitable[bool], self.client.ping())
            return True
        except Exception:
            return False
