"""Health check endpoints.

Provides Kubernetes-compatible liveness and readiness probes:
- /health/live  - Liveness probe (always returns OK if process is running)
- /health/ready - Readiness probe (checks database and cache connectivity)

The database is the store of record, so a database outage makes the service
unready. A cache outage only degrades it.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from productcache.api.deps import get_cache_adapter, get_session_factory
from productcache.cache.redis import RedisCacheAdapter
from productcache.persistence.db import health_check as db_health_check

router = APIRouter(tags=["health"])

CHECK_TIMEOUT = 5.0  # seconds


class HealthStatus(str, Enum):
    """Health check status."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Health status of a single component."""

    name: str
    status: HealthStatus
    latency_ms: float
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result: dict[str, Any] = {
            "status": self.status.value,
            "latency_ms": round(self.latency_ms, 2),
        }
        if self.message:
            result["message"] = self.message
        return result


async def check_database(
    session_factory: async_sessionmaker[AsyncSession] | None,
) -> ComponentHealth:
    """Check database connectivity."""
    start = time.monotonic()
    if session_factory is None:
        return ComponentHealth("database", HealthStatus.UNHEALTHY, 0.0, "Not initialized")
    try:
        healthy = await asyncio.wait_for(db_health_check(session_factory), timeout=CHECK_TIMEOUT)
        message = None if healthy else "Database check failed"
    except asyncio.TimeoutError:
        healthy, message = False, "Database check timed out"
    latency = (time.monotonic() - start) * 1000
    return ComponentHealth(
        name="database",
        status=HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY,
        latency_ms=latency,
        message=message,
    )


async def check_cache(adapter: RedisCacheAdapter | None) -> ComponentHealth:
    """Check cache connectivity. An unreachable cache is only a degradation."""
    start = time.monotonic()
    if adapter is None:
        return ComponentHealth("cache", HealthStatus.DEGRADED, 0.0, "Not initialized")
    try:
        healthy = await asyncio.wait_for(adapter.ping(), timeout=CHECK_TIMEOUT)
        message = None if healthy else "Cache check failed"
    except asyncio.TimeoutError:
        healthy, message = False, "Cache check timed out"
    except Exception as e:
        healthy, message = False, str(e)
    latency = (time.monotonic() - start) * 1000
    return ComponentHealth(
        name="cache",
        status=HealthStatus.HEALTHY if healthy else HealthStatus.DEGRADED,
        latency_ms=latency,
        message=message,
    )


@router.get("/health/live")
async def live() -> dict[str, str]:
    """Liveness probe.

    Returns OK if the process is running.
    """
    return {"status": "ok"}


@router.get("/health/ready")
async def ready(
    session_factory: async_sessionmaker[AsyncSession] | None = Depends(get_session_factory),
    adapter: RedisCacheAdapter | None = Depends(get_cache_adapter),
) -> JSONResponse:
    """Readiness probe.

    Returns 200 when the database is reachable (even with the cache down,
    reported as degraded) and 503 when it is not.
    """
    db_result, cache_result = await asyncio.gather(
        check_database(session_factory),
        check_cache(adapter),
    )

    if db_result.status == HealthStatus.UNHEALTHY:
        overall_status = HealthStatus.UNHEALTHY
    elif cache_result.status != HealthStatus.HEALTHY:
        overall_status = HealthStatus.DEGRADED
    else:
        overall_status = HealthStatus.HEALTHY

    return JSONResponse(
        content={
            "status": overall_status.value,
            "checks": {c.name: c.to_dict() for c in (db_result, cache_result)},
        },
        status_code=503 if overall_status == HealthStatus.UNHEALTHY else 200,
    )
