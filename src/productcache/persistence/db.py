"""Async database engine and session factory.

Provides PostgreSQL async connectivity using SQLAlchemy 2.0 asyncio
extension with asyncpg driver. The engine is built once at startup and
passed to whoever needs it; each store operation opens its own short-lived
session from the factory.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from productcache.config import Settings
from productcache.persistence.tables import Base


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async database engine.

    Pool settings are skipped for SQLite, whose dialect manages its own pool.
    """
    options: dict[str, Any] = {
        "pool_pre_ping": True,  # Verify connection health
        "echo": settings.env == "dev" and settings.log_level.upper() == "DEBUG",
    }
    if not settings.database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
        )
    return create_async_engine(settings.database_url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory bound to ``engine``."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    """Initialize database (create tables if not exists)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: AsyncEngine | None) -> None:
    """Close database connections."""
    if engine is not None:
        await engine.dispose()


async def health_check(session_factory: async_sessionmaker[AsyncSession]) -> bool:
    """Check database connectivity."""
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
