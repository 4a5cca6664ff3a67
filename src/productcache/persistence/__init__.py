"""Persistence layer for the product service.

This module provides:
- Async engine and session factory (asyncpg in production)
- SQLAlchemy ORM model for the products table
- The product repository, the store of record
"""

from productcache.persistence.db import (
    close_db,
    create_engine,
    create_session_factory,
    health_check,
    init_db,
)
from productcache.persistence.repositories import ProductRepository
from productcache.persistence.tables import Base, ProductTable

__all__ = [
    # DB
    "create_engine",
    "create_session_factory",
    "init_db",
    "close_db",
    "health_check",
    # Tables
    "Base",
    "ProductTable",
    # Repositories
    "ProductRepository",
]
