"""FastAPI application factory for the product service.

Creates the application with:
- Product CRUD routes served through the cache-aside coordinator
- Administrative cache invalidation
- Health probes
- Correlation IDs in logs and responses
- Lifecycle management for the database engine and the Redis client
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.types import ExceptionHandler

from productcache import __version__
from productcache.api.errors import (
    ProductApiError,
    generic_exception_handler,
    product_api_exception_handler,
    store_exception_handler,
    validation_exception_handler,
)
from productcache.api.middleware import CorrelationMiddleware
from productcache.api.routers import admin, health, products
from productcache.cache import GuardedCache, RedisCacheAdapter, close_redis, create_redis
from productcache.config import Settings, settings as default_settings
from productcache.errors import StoreError
from productcache.observability import configure_logging
from productcache.persistence import (
    ProductRepository,
    close_db,
    create_engine,
    create_session_factory,
    init_db,
)
from productcache.services import ProductService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    On startup, build the process-wide collaborators once and wire them:
    engine -> session factory -> repository, Redis client -> adapter ->
    guarded cache, both -> product service.

    On shutdown, close the Redis client and dispose of the engine.
    """
    settings: Settings = app.state.settings
    configure_logging(
        json_format=settings.log_json if settings.log_json is not None else settings.env != "dev",
        level=settings.log_level,
    )

    logger.info(f"Starting {settings.app_name} ({settings.env})")
    engine = create_engine(settings)
    await init_db(engine)
    session_factory = create_session_factory(engine)

    # The cache is optional at startup: the client connects lazily and a
    # dead server only turns every read into a store read.
    redis_client = create_redis(settings)
    cache_adapter = RedisCacheAdapter(redis_client)

    app.state.session_factory = session_factory
    app.state.cache_adapter = cache_adapter
    app.state.product_service = ProductService(
        store=ProductRepository(session_factory),
        cache=GuardedCache(cache_adapter, timeout=settings.cache_timeout),
        ttl=settings.cache_ttl,
    )
    logger.info(f"{settings.app_name} startup complete")

    yield

    logger.info(f"Shutting down {settings.app_name}")
    await close_redis(redis_client)
    await close_db(engine)
    logger.info(f"{settings.app_name} shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Product Cache",
        description="Product CRUD with a Redis cache-aside layer",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings or default_settings

    app.add_middleware(CorrelationMiddleware)

    # Register exception handlers
    app.add_exception_handler(
        ProductApiError, cast(ExceptionHandler, product_api_exception_handler)
    )
    app.add_exception_handler(
        RequestValidationError, cast(ExceptionHandler, validation_exception_handler)
    )
    app.add_exception_handler(StoreError, cast(ExceptionHandler, store_exception_handler))
    app.add_exception_handler(Exception, cast(ExceptionHandler, generic_exception_handler))

    # Include routers
    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(admin.router)

    return app
