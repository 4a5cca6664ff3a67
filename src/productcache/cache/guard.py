"""Failure isolation for cache calls.

Every call into the cache adapter goes through ``GuardedCache``. Each call is
bounded by a short timeout and resolves to a ``CacheResult`` with one of
three outcomes:

- SUCCESS: the operation completed (for reads, a usable value was found)
- MISS:    the key is absent or empty
- FAULT:   the cache failed (timeout, connection error, bad entry)

A fault is logged as a warning with the operation name and key and is never
raised. Callers on the read path treat MISS and FAULT the same way.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT = 0.25


class CacheOutcome(str, Enum):
    """Outcome of a single cache call."""

    SUCCESS = "success"
    MISS = "miss"
    FAULT = "fault"


@dataclass(frozen=True)
class CacheResult(Generic[T]):
    """Result of a guarded cache call."""

    outcome: CacheOutcome
    value: T | None = None
    error: BaseException | None = None

    @property
    def hit(self) -> bool:
        return self.outcome is CacheOutcome.SUCCESS

    @classmethod
    def success(cls, value: T | None = None) -> CacheResult[T]:
        return cls(CacheOutcome.SUCCESS, value)

    @classmethod
    def miss(cls) -> CacheResult[T]:
        return cls(CacheOutcome.MISS)

    @classmethod
    def fault(cls, error: BaseException) -> CacheResult[T]:
        return cls(CacheOutcome.FAULT, error=error)


class CacheAdapter(Protocol):
    """Operations a cache backend must provide."""

    async def get(self, key: str) -> bytes | None: ...

    async def set(self, key: str, value: bytes, ttl: int) -> None: ...

    async def delete(self, key: str) -> None: ...

    def scan_keys(self, pattern: str) -> AsyncIterator[bytes]: ...


class GuardedCache:
    """Cache adapter wrapper that never lets a cache failure escape."""

    def __init__(self, adapter: CacheAdapter, timeout: float = DEFAULT_TIMEOUT):
        self.adapter = adapter
        self.timeout = timeout

    async def _call(self, operation: str, key: str, call: Awaitable[T]) -> CacheResult[T]:
        try:
            value = await asyncio.wait_for(call, timeout=self.timeout)
        except Exception as e:
            return self._fault(operation, key, e)
        return CacheResult.success(value)

    def _fault(self, operation: str, key: str, error: BaseException) -> CacheResult[Any]:
        if isinstance(error, asyncio.TimeoutError):
            reason = "timeout"
        else:
            reason = str(error) or type(error).__name__
        logger.warning(
            f"Cache {operation} failed (key={key}): {reason}",
            extra={"cache_operation": operation, "cache_key": key},
        )
        return CacheResult.fault(error)

    async def get(self, key: str, decode: Callable[[bytes], T]) -> CacheResult[T]:
        """Read and decode an entry.

        An undecodable entry is a fault, so the caller falls back to the store
        and the next populate overwrites it.
        """
        raw = await self._call("get", key, self.adapter.get(key))
        if not raw.hit:
            return raw  # type: ignore[return-value]
        if not raw.value:
            return CacheResult.miss()
        try:
            return CacheResult.success(decode(raw.value))
        except Exception as e:
            return self._fault("decode", key, e)

    async def set(
        self, key: str, value: T, ttl: int, encode: Callable[[T], bytes]
    ) -> CacheResult[None]:
        """Encode and store an entry with the given TTL."""
        try:
            data = encode(value)
        except Exception as e:
            return self._fault("encode", key, e)
        return await self._call("set", key, self.adapter.set(key, data, ttl))

    async def delete(self, key: str) -> CacheResult[None]:
        """Delete an entry. Deleting an absent key succeeds."""
        return await self._call("delete", key, self.adapter.delete(key))

    async def delete_pattern(self, pattern: str) -> CacheResult[int]:
        """Delete every key matching ``pattern``.

        Enumerates the keyspace on each endpoint and deletes matches one at
        a time. Unsuitable for large keyspaces or high request rates; meant
        for administrative use only. Enumeration is not bounded by the
        per-call timeout, each individual delete is.
        """
        deleted = 0
        try:
            async for raw_key in self.adapter.scan_keys(pattern):
                key = raw_key.decode() if isinstance(raw_key, bytes) else str(raw_key)
                result = await self.delete(key)
                if result.outcome is CacheOutcome.FAULT:
                    return CacheResult(CacheOutcome.FAULT, value=deleted, error=result.error)
                deleted += 1
        except Exception as e:
            fault = self._fault("scan", pattern, e)
            return CacheResult(CacheOutcome.FAULT, value=deleted, error=fault.error)
        logger.info(f"Deleted {deleted} cache keys matching {pattern}")
        return CacheResult.success(deleted)
