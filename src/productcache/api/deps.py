"""FastAPI dependencies.

Long-lived collaborators are built once in the application lifespan and
kept on ``app.state``; dependencies only hand them out.
"""

from __future__ import annotations

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from productcache.cache.redis import RedisCacheAdapter
from productcache.services.products import ProductService


def get_product_service(request: Request) -> ProductService:
    """Get the product cache-aside coordinator."""
    service: ProductService = request.app.state.product_service
    return service


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession] | None:
    return getattr(request.app.state, "session_factory", None)


def get_cache_adapter(request: Request) -> RedisCacheAdapter | None:
    return getattr(request.app.state, "cache_adapter", None)
