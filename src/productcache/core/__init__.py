"""Domain model for the product service."""

from productcache.core.model import Product, ProductIn

__all__ = ["Product", "ProductIn"]
