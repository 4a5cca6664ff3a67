"""Redis cache adapter for products.

Thin async wrapper over redis-py exposing the four primitives the
cache-aside coordinator needs: get, set with expiry, delete and key
enumeration. Errors are raised unchanged; ``GuardedCache`` is responsible
for turning them into faults.

The client is created once at startup (see ``create_redis``) and handed to
the adapter; there is no module-level connection.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable
from typing import TYPE_CHECKING, cast

import redis.asyncio as redis
from redis.asyncio.cluster import RedisCluster

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from productcache.config import Settings


def create_redis(settings: Settings) -> Redis | RedisCluster:
    """Create the process-wide Redis client.

    Socket timeouts follow ``cache_timeout`` so a dead server fails fast
    instead of holding the request.
    """
    options = {
        "decode_responses": False,  # entries are bytes
        "socket_timeout": settings.cache_timeout,
        "socket_connect_timeout": settings.cache_timeout,
    }
    if settings.redis_cluster:
        return RedisCluster.from_url(settings.redis_url, **options)
    return redis.from_url(settings.redis_url, **options)  # type: ignore[no-untyped-call]


async def close_redis(client: Redis | RedisCluster | None) -> None:
    """Close Redis connections."""
    if client is not None:
        await client.aclose()


class RedisCacheAdapter:
    """Byte-string key/value operations with per-key expiry."""

    def __init__(self, client: Redis | RedisCluster):
        self.client = client

    async def get(self, key: str) -> bytes | None:
        return cast(bytes | None, await self.client.get(key))

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        await self.client.set(key, value, ex=ttl)

    async def delete(self, key: str) -> None:
        # DEL on a missing key returns 0; that is not an error
        await self.client.delete(key)

    async def scan_keys(self, pattern: str) -> AsyncIterator[bytes]:
        """Enumerate keys matching a glob pattern on every server endpoint.

        SCAN walks the whole keyspace. It is meant for administrative use
        and must not sit on a request hot path.
        """
        async for key in self.client.scan_iter(match=pattern):
            yield key

    async def ping(self) -> bool:
        return await cast(Awaitable[bool], self.client.ping())
