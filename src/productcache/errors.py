"""Domain errors for the product service.

Only store failures are modelled as exceptions. Cache failures never leave
the cache layer; they are reported as ``CacheOutcome.FAULT`` instead.
"""

from __future__ import annotations


class StoreError(Exception):
    """The store of record failed (connectivity, constraint or query error)."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"Store {operation} failed: {message}")
