"""Administrative cache endpoints.

Pattern invalidation enumerates the whole keyspace of every cache endpoint.
Use it for debugging or after manual data fixes, never from clients on a
request path.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from productcache.api.deps import get_product_service
from productcache.api.responses import ApiResponse
from productcache.services.products import ProductService

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.delete("/cache", response_model=ApiResponse[dict[str, int]])
async def invalidate_cache(
    pattern: str = Query(..., min_length=1, description="Glob pattern, e.g. product_*"),
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[dict[str, int]]:
    """Delete every cache key matching ``pattern``."""
    deleted = await service.invalidate_pattern(pattern)
    return ApiResponse.ok({"deleted": deleted}, f"Deleted {deleted} cache keys.")
