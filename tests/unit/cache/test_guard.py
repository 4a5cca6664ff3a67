"""Tests for cache failure isolation."""

import asyncio
import logging

import pytest

from productcache.cache.guard import CacheOutcome, CacheResult, GuardedCache
from productcache.cache.serialization import decode_product, encode_product
from productcache.core.model import Product


class TestCacheResult:
    """Tests for CacheResult."""

    def test_outcome_values(self) -> None:
        """All three outcomes are defined."""
        assert CacheOutcome.SUCCESS.value == "success"
        assert CacheOutcome.MISS.value == "miss"
        assert CacheOutcome.FAULT.value == "fault"

    def test_only_success_is_a_hit(self) -> None:
        """Miss and fault are both not hits."""
        assert CacheResult.success(b"x").hit
        assert not CacheResult.miss().hit
        assert not CacheResult.fault(ConnectionError()).hit

    def test_fault_keeps_error(self) -> None:
        """A fault carries the original exception."""
        error = ConnectionError("down")
        assert CacheResult.fault(error).error is error


class TestGuardedCache:
    """Tests for GuardedCache."""

    @pytest.mark.asyncio
    async def test_get_hit(self, cache_adapter, guarded_cache: GuardedCache) -> None:
        """A stored entry decodes to SUCCESS."""
        product = Product(id=1, name="Widget")
        cache_adapter.data["product_1"] = encode_product(product)

        result = await guarded_cache.get("product_1", decode_product)

        assert result.outcome is CacheOutcome.SUCCESS
        assert result.value == product

    @pytest.mark.asyncio
    async def test_get_missing_is_miss(self, guarded_cache: GuardedCache) -> None:
        """An absent key is a MISS."""
        result = await guarded_cache.get("product_1", decode_product)
        assert result.outcome is CacheOutcome.MISS

    @pytest.mark.asyncio
    async def test_get_empty_is_miss(self, cache_adapter, guarded_cache: GuardedCache) -> None:
        """An empty value is a MISS, not a hit."""
        cache_adapter.data["product_1"] = b""
        result = await guarded_cache.get("product_1", decode_product)
        assert result.outcome is CacheOutcome.MISS

    @pytest.mark.asyncio
    async def test_get_connection_error_is_fault(
        self, cache_adapter, guarded_cache: GuardedCache, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A connection failure is a FAULT and is logged with operation and key."""
        cache_adapter.fail = True

        with caplog.at_level(logging.WARNING, logger="productcache.cache.guard"):
            result = await guarded_cache.get("product_1", decode_product)

        assert result.outcome is CacheOutcome.FAULT
        assert isinstance(result.error, ConnectionError)
        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.cache_operation == "get"
        assert record.cache_key == "product_1"

    @pytest.mark.asyncio
    async def test_get_timeout_is_fault(self, cache_adapter, guarded_cache: GuardedCache) -> None:
        """A slow cache is cut off by the timeout and reported as FAULT."""
        cache_adapter.delay = 0.5

        result = await guarded_cache.get("product_1", decode_product)

        assert result.outcome is CacheOutcome.FAULT
        assert isinstance(result.error, asyncio.TimeoutError)

    @pytest.mark.asyncio
    async def test_get_corrupt_entry_is_fault(
        self, cache_adapter, guarded_cache: GuardedCache, caplog: pytest.LogCaptureFixture
    ) -> None:
        """An undecodable entry is a FAULT logged as a decode failure."""
        cache_adapter.data["product_1"] = b"{broken"

        with caplog.at_level(logging.WARNING, logger="productcache.cache.guard"):
            result = await guarded_cache.get("product_1", decode_product)

        assert result.outcome is CacheOutcome.FAULT
        assert caplog.records[-1].cache_operation == "decode"

    @pytest.mark.asyncio
    async def test_set_applies_ttl(self, cache_adapter, guarded_cache: GuardedCache) -> None:
        """Set stores encoded bytes with the given TTL."""
        product = Product(id=1, name="Widget")

        result = await guarded_cache.set("product_1", product, 120, encode_product)

        assert result.outcome is CacheOutcome.SUCCESS
        assert cache_adapter.data["product_1"] == encode_product(product)
        assert cache_adapter.ttls["product_1"] == 120

    @pytest.mark.asyncio
    async def test_set_fault(self, cache_adapter, guarded_cache: GuardedCache) -> None:
        """A failing set is a FAULT and does not raise."""
        cache_adapter.fail = True
        result = await guarded_cache.set("product_1", Product(id=1, name="W"), 120, encode_product)
        assert result.outcome is CacheOutcome.FAULT

    @pytest.mark.asyncio
    async def test_set_encode_error_is_fault(
        self, cache_adapter, guarded_cache: GuardedCache
    ) -> None:
        """An encoder failure is a FAULT and nothing is written."""

        def broken(_: object) -> bytes:
            raise TypeError("not serializable")

        result = await guarded_cache.set("product_1", object(), 120, broken)

        assert result.outcome is CacheOutcome.FAULT
        assert cache_adapter.operations("set") == []

    @pytest.mark.asyncio
    async def test_delete_absent_key_succeeds(self, guarded_cache: GuardedCache) -> None:
        """Deleting a key that isn't there is a no-op, not an error."""
        result = await guarded_cache.delete("product_404")
        assert result.outcome is CacheOutcome.SUCCESS

    @pytest.mark.asyncio
    async def test_delete_fault(self, cache_adapter, guarded_cache: GuardedCache) -> None:
        """A failing delete is a FAULT and does not raise."""
        cache_adapter.fail = True
        result = await guarded_cache.delete("product_1")
        assert result.outcome is CacheOutcome.FAULT


class TestDeletePattern:
    """Tests for pattern invalidation."""

    @pytest.mark.asyncio
    async def test_deletes_matching_keys(self, cache_adapter, guarded_cache: GuardedCache) -> None:
        """Only keys matching the glob are deleted."""
        for key in ("product_1", "product_2", "products_all", "other"):
            cache_adapter.data[key] = b"x"

        result = await guarded_cache.delete_pattern("product_*")

        assert result.outcome is CacheOutcome.SUCCESS
        assert result.value == 2
        assert set(cache_adapter.data) == {"products_all", "other"}

    @pytest.mark.asyncio
    async def test_no_matches(self, guarded_cache: GuardedCache) -> None:
        """No matching keys deletes nothing."""
        result = await guarded_cache.delete_pattern("product_*")
        assert result.outcome is CacheOutcome.SUCCESS
        assert result.value == 0

    @pytest.mark.asyncio
    async def test_scan_failure_is_fault(self, cache_adapter, guarded_cache: GuardedCache) -> None:
        """A failing enumeration is a FAULT with zero deletions."""
        cache_adapter.data["product_1"] = b"x"
        cache_adapter.fail = True

        result = await guarded_cache.delete_pattern("product_*")

        assert result.outcome is CacheOutcome.FAULT
        assert result.value == 0

    @pytest.mark.asyncio
    async def test_partial_failure_reports_count(
        self, cache_adapter, guarded_cache: GuardedCache
    ) -> None:
        """A delete failing midway reports how many keys went before it."""
        cache_adapter.data["product_1"] = b"x"
        cache_adapter.data["product_2"] = b"x"
        cache_adapter.fail_keys.add("product_2")

        result = await guarded_cache.delete_pattern("product_*")

        assert result.outcome is CacheOutcome.FAULT
        assert result.value == 1
        assert "product_1" not in cache_adapter.data
