"""CLI commands for the product service.

Provides command-line interface using Typer:
- productcache serve: Run the API server
- productcache init-db: Create the database tables

Usage:
    productcache --help
    productcache serve --port 8080
    productcache init-db
"""

import typer

from productcache.cli.db_cmd import app as db_app
from productcache.cli.serve import app as serve_app

# Main CLI application
app = typer.Typer(
    name="productcache",
    help="Product CRUD service with a Redis cache-aside layer",
    no_args_is_help=True,
)

app.add_typer(serve_app, name="serve")
app.add_typer(db_app, name="init-db")


@app.callback()
def callback() -> None:
    """Product CRUD service with a Redis cache-aside layer."""
    pass


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
