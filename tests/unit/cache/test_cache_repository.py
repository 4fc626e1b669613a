# tests/unit/cache/test_cache_repository.py — v1
"""Tests for cache/repository.py — typed namespaced access and fingerprints."""

from __future__ import annotations

import pytest
from pydantic import BaseModel

from searchlens.cache.repository import CacheRepository, fingerprint


class _Point(BaseModel):
    x: int
    y: int


class TestFingerprint:
    def test_stable_across_key_order(self):
        assert fingerprint({"a": 1, "b": 2}) == fingerprint({"b": 2, "a": 1})

    def test_distinguishes_parts(self):
        assert fingerprint("q", {"a": 1}) != fingerprint("q", {"a": 2})

    def test_hex_digest(self):
        digest = fingerprint("query")
        assert len(digest) == 64
        int(digest, 16)


class TestCacheRepository:
    @pytest.mark.asyncio
    async def test_save_and_load(self, cache_store):
        repo = CacheRepository(cache_store, _Point, "points", ttl_s=60)
        assert await repo.save("p1", _Point(x=1, y=2)) is True
        assert await repo.load("p1") == _Point(x=1, y=2)

    @pytest.mark.asyncio
    async def test_namespaced_keys(self, cache_store, kv_store):
        repo = CacheRepository(cache_store, _Point, "points", ttl_s=None)
        await repo.save("p1", _Point(x=1, y=2))
        assert repo.key_for("p1") == "points:p1"
        assert await kv_store.keys() == ["searchlens:points:p1"]

    @pytest.mark.asyncio
    async def test_ttl_applied(self, cache_store, clock):
        repo = CacheRepository(cache_store, _Point, "points", ttl_s=30)
        await repo.save("p1", _Point(x=1, y=2))
        clock.advance(31)
        assert await repo.load("p1") is None

    @pytest.mark.asyncio
    async def test_invalid_payload_discarded(self, cache_store):
        await cache_store.set("points:p1", {"x": "not-an-int"}, ttl_s=None)
        repo = CacheRepository(cache_store, _Point, "points", ttl_s=None)
        assert await repo.load("p1") is None
        assert await cache_store.get("points:p1") is None

    @pytest.mark.asyncio
    async def test_delete(self, cache_store):
        repo = CacheRepository(cache_store, _Point, "points", ttl_s=None)
        await repo.save("p1", _Point(x=1, y=2))
        assert await repo.delete("p1") is True
        assert await repo.load("p1") is None

    @pytest.mark.asyncio
    async def test_stats_and_clear_scoped_to_namespace(self, cache_store):
        points = CacheRepository(cache_store, _Point, "points", ttl_s=None)
        others = CacheRepository(cache_store, _Point, "pointsx", ttl_s=None)
        await points.save("p1", _Point(x=1, y=2))
        await points.save("p2", _Point(x=3, y=4))
        await others.save("p1", _Point(x=5, y=6))

        assert (await points.stats()).item_count == 2
        assert await points.clear() == 2
        assert await points.load("p1") is None
        assert await others.load("p1") == _Point(x=5, y=6)
