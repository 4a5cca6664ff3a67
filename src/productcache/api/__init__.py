"""HTTP transport for the product service."""
