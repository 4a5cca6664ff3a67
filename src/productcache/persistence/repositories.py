"""Product repository: the store of record.

Every method opens its own session and transaction, so a call either
commits before returning or raises. Database failures surface as
``StoreError``; "no such row" is reported through the return value.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from productcache.core.model import Product, ProductIn
from productcache.errors import StoreError
from productcache.persistence.tables import ProductTable

logger = logging.getLogger(__name__)


class ProductRepository:
    """Repository for product CRUD operations."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self.session_factory() as session, session.begin():
                yield session
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Store {operation} failed: {e}")
            raise StoreError(operation, str(e)) from e

    async def get_all(self) -> list[Product]:
        async with self._transaction("get_all") as session:
            result = await session.execute(select(ProductTable).order_by(ProductTable.id))
            return [Product.model_validate(row) for row in result.scalars()]

    async def get_by_id(self, product_id: int) -> Product | None:
        """Get a product, or None if it doesn't exist."""
        async with self._transaction("get_by_id") as session:
            row = await session.get(ProductTable, product_id)
            return Product.model_validate(row) if row is not None else None

    async def create(self, product: ProductIn) -> Product:
        """Insert a product and return it with its database-assigned id.

        The row is re-read after the insert so the result carries the values
        as stored, including column rounding.
        """
        async with self._transaction("create") as session:
            row = ProductTable(**product.model_dump())
            session.add(row)
            await session.flush()
            await session.refresh(row)
            return Product.model_validate(row)

    async def update(self, product_id: int, product: ProductIn) -> bool:
        """Replace a product's attributes.

        Returns:
            True if a row was updated, False if not found.
        """
        async with self._transaction("update") as session:
            stmt = (
                update(ProductTable)
                .where(ProductTable.id == product_id)
                .values(**product.model_dump())
            )
            result = await session.execute(stmt)
            return bool(result.rowcount)

    async def delete(self, product_id: int) -> bool:
        """Delete a product.

        Returns:
            True if deleted, False if not found.
        """
        async with self._transaction("delete") as session:
            result = await session.execute(
                delete(ProductTable).where(ProductTable.id == product_id)
            )
            return bool(result.rowcount)
