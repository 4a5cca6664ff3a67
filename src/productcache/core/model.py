"""Pydantic models for products.

``ProductIn`` is the payload accepted on create and update; the store assigns
ids, so only ``Product`` carries one.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProductIn(BaseModel):
    """Product attributes supplied by a client."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    price: float = Field(default=0.0, ge=0)
    stock: int = Field(default=0, ge=0)


class Product(ProductIn):
    """A product as held by the store of record."""

    model_config = ConfigDict(extra="forbid", from_attributes=True)

    id: int
