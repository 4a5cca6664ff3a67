"""Global pytest configuration and fixtures.

Provides in-memory stand-ins for the two collaborators of the product
service: a cache adapter that can be switched into a failing mode, and a
product store that records every call.
"""

from __future__ import annotations

import asyncio
import fnmatch
from collections.abc import AsyncIterator

import pytest

from productcache.cache.guard import GuardedCache
from productcache.core.model import Product, ProductIn
from productcache.services.products import ProductService


class FakeCacheAdapter:
    """Dict-backed cache adapter.

    ``fail`` makes every call raise ConnectionError; ``delay`` makes every
    call sleep first, to exercise timeouts.
    """

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.ttls: dict[str, int] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail = False
        self.fail_keys: set[str] = set()
        self.delay = 0.0

    async def _enter(self, operation: str, key: str) -> None:
        self.calls.append((operation, key))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail or key in self.fail_keys:
            raise ConnectionError("Connection refused")

    async def get(self, key: str) -> bytes | None:
        await self._enter("get", key)
        return self.data.get(key)

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        await self._enter("set", key)
        self.data[key] = value
        self.ttls[key] = ttl

    async def delete(self, key: str) -> None:
        await self._enter("delete", key)
        self.data.pop(key, None)
        self.ttls.pop(key, None)

    async def scan_keys(self, pattern: str) -> AsyncIterator[bytes]:
        await self._enter("scan", pattern)
        for key in list(self.data):
            if fnmatch.fnmatchcase(key, pattern):
                yield key.encode()

    def operations(self, operation: str) -> list[str]:
        return [key for op, key in self.calls if op == operation]


class InMemoryProductStore:
    """Product store keeping rows in a dict and counting calls."""

    def __init__(self, next_id: int = 1) -> None:
        self.rows: dict[int, Product] = {}
        self.next_id = next_id
        self.calls: list[str] = []

    async def get_all(self) -> list[Product]:
        self.calls.append("get_all")
        return [self.rows[k] for k in sorted(self.rows)]

    async def get_by_id(self, product_id: int) -> Product | None:
        self.calls.append("get_by_id")
        return self.rows.get(product_id)

    async def create(self, product: ProductIn) -> Product:
        self.calls.append("create")
        created = Product(id=self.next_id, **product.model_dump())
        self.rows[created.id] = created
        self.next_id += 1
        return created

    async def update(self, product_id: int, product: ProductIn) -> bool:
        self.calls.append("update")
        if product_id not in self.rows:
            return False
        self.rows[product_id] = Product(id=product_id, **product.model_dump())
        return True

    async def delete(self, product_id: int) -> bool:
        self.calls.append("delete")
        return self.rows.pop(product_id, None) is not None


@pytest.fixture
def cache_adapter() -> FakeCacheAdapter:
    """Create an in-memory cache adapter."""
    return FakeCacheAdapter()


@pytest.fixture
def guarded_cache(cache_adapter: FakeCacheAdapter) -> GuardedCache:
    """Wrap the fake adapter with failure isolation."""
    return GuardedCache(cache_adapter, timeout=0.05)


@pytest.fixture
def store() -> InMemoryProductStore:
    """Create an in-memory product store."""
    return InMemoryProductStore()


@pytest.fixture
def service(store: InMemoryProductStore, guarded_cache: GuardedCache) -> ProductService:
    """Create the cache-aside product service."""
    return ProductService(store=store, cache=guarded_cache, ttl=120)


@pytest.fixture
def widget() -> ProductIn:
    return ProductIn(name="Widget", price=9.99)


@pytest.fixture
def make_store() -> type[InMemoryProductStore]:
    """Factory for stores that start at a given id."""
    return InMemoryProductStore
