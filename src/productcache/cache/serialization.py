"""JSON codec for cache entries.

Entries are orjson bytes of a product or of a list of products. Decoding
validates through the pydantic model, so a corrupt or foreign entry raises
``CacheDecodeError`` rather than leaking a half-built object.
"""

from __future__ import annotations

import orjson
from pydantic import TypeAdapter, ValidationError

from productcache.core.model import Product

_product_list = TypeAdapter(list[Product])


class CacheDecodeError(ValueError):
    """A cache entry could not be turned back into products."""


def encode_product(product: Product) -> bytes:
    return orjson.dumps(product.model_dump())


def encode_products(products: list[Product]) -> bytes:
    return orjson.dumps([p.model_dump() for p in products])


def decode_product(data: bytes) -> Product:
    try:
        return Product.model_validate(orjson.loads(data))
    except (orjson.JSONDecodeError, ValidationError) as e:
        raise CacheDecodeError(str(e)) from e


def decode_products(data: bytes) -> list[Product]:
    try:
        return _product_list.validate_python(orjson.loads(data))
    except (orjson.JSONDecodeError, ValidationError) as e:
        raise CacheDecodeError(str(e)) from e
