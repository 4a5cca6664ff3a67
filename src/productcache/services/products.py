"""Cache-aside coordinator for products.

Reads consult the cache first and fall back to the store of record on a miss
or a cache fault, then repopulate the cache. Writes go to the store first and
only then delete the cache entries they made stale.

The store is authoritative: its errors (``StoreError``) propagate to the
caller. The cache is advisory: every cache call goes through
``GuardedCache``, so a cache outage costs latency but never fails a request.
Entries are deleted rather than rewritten on writes, which keeps a write from
racing an in-flight repopulate with a partially built value.
"""

from __future__ import annotations

import logging
from typing import Protocol

from productcache.cache.guard import CacheOutcome, GuardedCache
from productcache.cache.keys import CacheKeys
from productcache.cache.serialization import (
    decode_product,
    decode_products,
    encode_product,
    encode_products,
)
from productcache.core.model import Product, ProductIn

logger = logging.getLogger(__name__)

# Default TTL (2 minutes), applied to every entry
DEFAULT_TTL = 120


class ProductStore(Protocol):
    """Operations the store of record must provide."""

    async def get_all(self) -> list[Product]: ...

    async def get_by_id(self, product_id: int) -> Product | None: ...

    async def create(self, product: ProductIn) -> Product: ...

    async def update(self, product_id: int, product: ProductIn) -> bool: ...

    async def delete(self, product_id: int) -> bool: ...


class ProductService:
    """Coordinates the product store and its cache."""

    def __init__(self, store: ProductStore, cache: GuardedCache, ttl: int = DEFAULT_TTL):
        self.store = store
        self.cache = cache
        self.ttl = ttl

    # -------------------------------------------------------------------------
    # Read path
    # -------------------------------------------------------------------------

    async def get_all(self) -> list[Product]:
        """Get every product, from cache when possible."""
        key = CacheKeys.products_all()

        cached = await self.cache.get(key, decode_products)
        if cached.hit and cached.value is not None:
            logger.debug(f"Cache hit: {key}")
            return cached.value

        products = await self.store.get_all()
        await self.cache.set(key, products, self.ttl, encode_products)
        return products

    async def get_by_id(self, product_id: int) -> Product | None:
        """Get one product, or None if the store has no such row.

        Not-found results are not cached. Negative ids never name a stored
        row, so they are answered without touching the cache or the store.
        """
        if product_id < 0:
            return None
        key = CacheKeys.product(product_id)

        cached = await self.cache.get(key, decode_product)
        if cached.hit and cached.value is not None:
            logger.debug(f"Cache hit: {key}")
            return cached.value

        product = await self.store.get_by_id(product_id)
        if product is not None:
            await self.cache.set(key, product, self.ttl, encode_product)
        return product

    # -------------------------------------------------------------------------
    # Write path
    # -------------------------------------------------------------------------

    async def create(self, product: ProductIn) -> Product:
        """Create a product and invalidate the collection snapshot."""
        created = await self.store.create(product)
        await self._invalidate(CacheKeys.products_all())
        logger.info(f"Created product {created.id}")
        return created

    async def update(self, product_id: int, product: ProductIn) -> bool:
        """Update a product.

        Returns:
            True if the product existed, False if not found. The cache is
            left untouched when nothing was updated.
        """
        if product_id < 0:
            return False
        if not await self.store.update(product_id, product):
            return False
        await self._invalidate(*CacheKeys.for_write(product_id))
        logger.info(f"Updated product {product_id}")
        return True

    async def delete(self, product_id: int) -> bool:
        """Delete a product.

        Returns:
            True if deleted, False if not found.
        """
        if product_id < 0:
            return False
        if not await self.store.delete(product_id):
            return False
        await self._invalidate(*CacheKeys.for_write(product_id))
        logger.info(f"Deleted product {product_id}")
        return True

    async def _invalidate(self, *keys: str) -> None:
        # Each delete is guarded on its own; one fault must not skip the rest
        for key in keys:
            await self.cache.delete(key)

    # -------------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------------

    async def invalidate_pattern(self, pattern: str) -> int:
        """Delete every cache key matching a glob pattern.

        Walks the full keyspace of each cache endpoint; not for hot paths.
        Returns the number of keys deleted, which is partial if the cache
        faulted midway.
        """
        result = await self.cache.delete_pattern(pattern)
        if result.outcome is CacheOutcome.FAULT:
            logger.warning(f"Pattern invalidation for {pattern} stopped early")
        return result.value or 0
