"""Product API router.

- GET    /api/product          - List all products
- GET    /api/product/{id}     - Get a product
- POST   /api/product          - Create a product
- PUT    /api/product/{id}     - Update a product
- DELETE /api/product/{id}     - Delete a product

Reads are served through the cache-aside coordinator; a cache outage only
makes them slower.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from productcache.api.deps import get_product_service
from productcache.api.errors import NotFoundError
from productcache.api.responses import ApiResponse
from productcache.core.model import Product, ProductIn
from productcache.services.products import ProductService

router = APIRouter(prefix="/api/product", tags=["Products"])


@router.get("", response_model=ApiResponse[list[Product]])
async def get_all_products(
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[list[Product]]:
    """Get all products."""
    products = await service.get_all()
    return ApiResponse.ok(products, "Products retrieved successfully.")


@router.get("/{product_id}", response_model=ApiResponse[Product])
async def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[Product]:
    """Get a product by id."""
    product = await service.get_by_id(product_id)
    if product is None:
        raise NotFoundError(product_id)
    return ApiResponse.ok(product, f"Product with ID {product_id} retrieved successfully.")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[Product])
async def create_product(
    payload: ProductIn,
    response: Response,
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[Product]:
    """Create a product. The id is assigned by the store."""
    product = await service.create(payload)
    response.headers["Location"] = f"{router.prefix}/{product.id}"
    return ApiResponse.ok(product, f"Product with ID {product.id} created successfully.")


@router.put("/{product_id}", response_model=ApiResponse[bool])
async def update_product(
    product_id: int,
    payload: ProductIn,
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[bool]:
    """Replace a product's attributes."""
    if not await service.update(product_id, payload):
        raise NotFoundError(product_id)
    return ApiResponse.ok(True, f"Product with ID {product_id} updated successfully.")


@router.delete("/{product_id}", response_model=ApiResponse[bool])
async def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[bool]:
    """Delete a product."""
    if not await service.delete(product_id):
        raise NotFoundError(product_id)
    return ApiResponse.ok(True, f"Product with ID {product_id} deleted successfully.")
