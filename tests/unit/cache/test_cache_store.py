# tests/unit/cache/test_cache_store.py — v1
"""Tests for cache/store.py — TTL, byte budget, item cap and failure handling."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest

from searchlens.cache.store import CacheStore, estimate_size

MB = 1024 * 1024


def _blob(size_bytes: int) -> str:
    # JSON encoding adds two quote characters.
    return "x" * (size_bytes - 2)


class TestEstimateSize:
    def test_string(self):
        assert estimate_size("abc") == 5

    def test_compact_json(self):
        assert estimate_size({"a": [1, 2]}) == len('{"a":[1,2]}')

    def test_utf8_bytes(self):
        assert estimate_size("é") == 4


class TestRoundTrip:
    @pytest.mark.asyncio
    async def test_set_then_get(self, cache_store):
        assert await cache_store.set("k", {"answer": 42}, ttl_s=60) is True
        assert await cache_store.get("k") == {"answer": 42}

    @pytest.mark.asyncio
    async def test_missing_key(self, cache_store):
        assert await cache_store.get("nope") is None

    @pytest.mark.asyncio
    async def test_prefix_applied(self, cache_store, kv_store):
        await cache_store.set("k", 1, ttl_s=None)
        assert await kv_store.keys() == ["searchlens:k"]

    @pytest.mark.asyncio
    async def test_remove(self, cache_store):
        await cache_store.set("k", 1, ttl_s=None)
        assert await cache_store.remove("k") is True
        assert await cache_store.get("k") is None
        assert (await cache_store.stats()).item_count == 0

    @pytest.mark.asyncio
    async def test_overwrite_replaces_accounting(self, cache_store):
        await cache_store.set("k", _blob(1000), ttl_s=None)
        await cache_store.set("k", _blob(10), ttl_s=None)
        stats = await cache_store.stats()
        assert stats.item_count == 1
        assert stats.used_bytes == 10


class TestExpiry:
    @pytest.mark.asyncio
    async def test_live_until_ttl(self, cache_store, clock):
        await cache_store.set("k", "v", ttl_s=10)
        clock.advance(10)
        assert await cache_store.get("k") == "v"

    @pytest.mark.asyncio
    async def test_expired_after_ttl(self, cache_store, kv_store, clock):
        await cache_store.set("k", "v", ttl_s=10)
        clock.advance(11)
        assert await cache_store.get("k") is None
        assert await kv_store.keys() == []

    @pytest.mark.asyncio
    async def test_no_ttl_never_expires(self, cache_store, clock):
        await cache_store.set("k", "v", ttl_s=None)
        clock.advance(10 * 365 * 86400)
        assert await cache_store.get("k") == "v"

    @pytest.mark.asyncio
    async def test_cleanup_purges_expired(self, cache_store, clock):
        await cache_store.set("short", "v", ttl_s=5)
        await cache_store.set("long", "v", ttl_s=500)
        clock.advance(6)
        assert await cache_store.cleanup() == 1
        assert (await cache_store.stats()).item_count == 1


class TestBudget:
    @pytest.mark.asyncio
    async def test_eviction_makes_room_for_large_entry(self, cache_store, clock):
        # Nine 0.5 MB entries fill 90% of the 5 MB budget.
        for i in range(9):
            assert await cache_store.set(f"old{i}", _blob(MB // 2), ttl_s=None)
            clock.advance(1)

        assert await cache_store.set("big", _blob(MB), ttl_s=None) is True

        stats = await cache_store.stats()
        assert stats.used_bytes <= stats.max_bytes
        assert stats.used_bytes <= 0.8 * stats.max_bytes + MB
        assert await cache_store.get("big") is not None
        assert await cache_store.get("old0") is None
        assert await cache_store.get("old8") is not None

    @pytest.mark.asyncio
    async def test_entry_larger_than_budget_rejected(self, kv_store, clock):
        store = CacheStore(kv_store, max_bytes=100, clock=clock)
        assert await store.set("k", _blob(101), ttl_s=None) is False
        assert await kv_store.keys() == []

    @pytest.mark.asyncio
    async def test_item_cap_evicts_oldest(self, kv_store, clock):
        store = CacheStore(kv_store, max_items=2, clock=clock)
        for key in ("a", "b", "c"):
            await store.set(key, key, ttl_s=None)
            clock.advance(1)
        assert await store.get("a") is None
        assert await store.get("b") == "b"
        assert await store.get("c") == "c"
        assert (await store.stats()).item_count == 2

    @pytest.mark.asyncio
    async def test_stats_percentage(self, kv_store, clock):
        store = CacheStore(kv_store, max_bytes=1000, clock=clock)
        await store.set("k", _blob(250), ttl_s=None)
        stats = await store.stats()
        assert stats.used_bytes == 250
        assert stats.percentage == pytest.approx(25.0)

    @pytest.mark.asyncio
    async def test_unserializable_value_rejected(self, cache_store):
        assert await cache_store.set("k", object(), ttl_s=None) is False


class TestFailures:
    @pytest.mark.asyncio
    async def test_write_failure_returns_false(self, cache_store, kv_store):
        with patch.object(kv_store, "set", AsyncMock(side_effect=OSError("disk full"))):
            assert await cache_store.set("k", "v", ttl_s=None) is False
        assert (await cache_store.stats()).item_count == 0

    @pytest.mark.asyncio
    async def test_read_failure_is_miss(self, cache_store, kv_store):
        await cache_store.set("k", "v", ttl_s=None)
        with patch.object(kv_store, "get", AsyncMock(side_effect=OSError("io"))):
            assert await cache_store.get("k") is None

    @pytest.mark.asyncio
    async def test_corrupt_entry_purged(self, cache_store, kv_store):
        await kv_store.set("searchlens:k", "{not json")
        assert await cache_store.get("k") is None
        assert await kv_store.get("searchlens:k") is None

    @pytest.mark.asyncio
    async def test_unknown_schema_version_purged(self, cache_store, kv_store, clock):
        record = {
            "schema_version": 99, "value": "v", "written_at": clock.now,
            "ttl_s": None, "size_bytes": 3,
        }
        await kv_store.set("searchlens:k", json.dumps(record))
        assert await cache_store.get("k") is None
        assert await kv_store.keys() == []


class TestIndexRebuild:
    @pytest.mark.asyncio
    async def test_second_store_sees_existing_entries(self, cache_store, kv_store, clock):
        await cache_store.set("a", _blob(100), ttl_s=None)
        await cache_store.set("b", _blob(50), ttl_s=None)

        reopened = CacheStore(kv_store, clock=clock)
        stats = await reopened.stats()
        assert stats.item_count == 2
        assert stats.used_bytes == 150

    @pytest.mark.asyncio
    async def test_rebuild_skips_foreign_and_expired_keys(self, cache_store, kv_store, clock):
        await kv_store.set("other:k", "foreign")
        await cache_store.set("stale", "v", ttl_s=1)
        clock.advance(2)

        reopened = CacheStore(kv_store, clock=clock)
        assert (await reopened.stats()).item_count == 0
        assert await kv_store.get("other:k") == "foreign"


class TestClear:
    @pytest.mark.asyncio
    async def test_clear_keeps_foreign_keys(self, cache_store, kv_store):
        await kv_store.set("other:k", "foreign")
        await cache_store.set("a", 1, ttl_s=None)
        await cache_store.set("b", 2, ttl_s=None)

        await cache_store.clear()

        assert await kv_store.keys() == ["other:k"]
        assert (await cache_store.stats()).item_count == 0

    @pytest.mark.asyncio
    async def test_remove_namespace(self, cache_store):
        await cache_store.set("ranking:a", 1, ttl_s=None)
        await cache_store.set("ranking:b", 2, ttl_s=None)
        await cache_store.set("query:a", 3, ttl_s=None)

        scoped = await cache_store.stats("ranking:")
        assert scoped.item_count == 2
        assert scoped.used_bytes == 2

        assert await cache_store.remove_namespace("ranking:") == 2
        assert await cache_store.get("ranking:a") is None
        assert await cache_store.get("query:a") == 3
        assert (await cache_store.stats()).item_count == 1
