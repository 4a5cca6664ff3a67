"""Application services."""

from productcache.services.products import DEFAULT_TTL, ProductService, ProductStore

__all__ = ["DEFAULT_TTL", "ProductService", "ProductStore"]
