"""CLI command for creating the database schema.

Usage:
    productcache init-db
"""

from __future__ import annotations

import asyncio

import typer

from productcache.config import settings
from productcache.persistence.db import close_db, create_engine, init_db

app = typer.Typer(help="Create the products table")


async def _init() -> None:
    engine = create_engine(settings)
    try:
        await init_db(engine)
    finally:
        await close_db(engine)


@app.callback(invoke_without_command=True)
def init_database() -> None:
    """Create database tables if they don't exist."""
    asyncio.run(_init())
    typer.echo("Database initialized")
