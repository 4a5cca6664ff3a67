"""Cache key schema for products.

Key format (kept bit-exact so existing cached data stays readable):
- products_all      the whole product collection
- product_{id}      a single product, id as a plain decimal integer
"""

from __future__ import annotations


class CacheKeys:
    """Cache key generator following the product naming convention."""

    ALL_PRODUCTS = "products_all"
    PRODUCT_PREFIX = "product_"

    @classmethod
    def products_all(cls) -> str:
        """Key for the product collection snapshot."""
        return cls.ALL_PRODUCTS

    @classmethod
    def product(cls, product_id: int) -> str:
        """Key for a single product.

        Rejects bools and negative ids so the key can never carry a sign or
        a non-numeric token.
        """
        if isinstance(product_id, bool) or not isinstance(product_id, int):
            raise TypeError(f"product id must be an int, got {type(product_id).__name__}")
        if product_id < 0:
            raise ValueError(f"product id must be non-negative, got {product_id}")
        return f"{cls.PRODUCT_PREFIX}{product_id:d}"

    @classmethod
    def for_write(cls, product_id: int) -> tuple[str, str]:
        """Keys made stale by an update or delete of ``product_id``."""
        return (cls.products_all(), cls.product(product_id))
