"""Cache layer for the product service.

Provides Redis caching with the cache-aside pattern:
- Pure key naming (``products_all``, ``product_{id}``)
- JSON entries with a uniform TTL
- Failure isolation: cache calls resolve to SUCCESS, MISS or FAULT and
  never raise into the request path
"""

from productcache.cache.guard import CacheAdapter, CacheOutcome, CacheResult, GuardedCache
from productcache.cache.keys import CacheKeys
from productcache.cache.redis import RedisCacheAdapter, close_redis, create_redis
from productcache.cache.serialization import (
    CacheDecodeError,
    decode_product,
    decode_products,
    encode_product,
    encode_products,
)

__all__ = [
    # Keys and codec
    "CacheKeys",
    "CacheDecodeError",
    "decode_product",
    "decode_products",
    "encode_product",
    "encode_products",
    # Redis
    "RedisCacheAdapter",
    "create_redis",
    "close_redis",
    # Failure isolation
    "CacheAdapter",
    "CacheOutcome",
    "CacheResult",
    "GuardedCache",
]
