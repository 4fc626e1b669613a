# tests/unit/cache/test_cache_factory.py — v1
"""Tests for cache/cache_factory.py — backend selection from settings."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from searchlens.cache.cache_factory import create_kv_store
from searchlens.cache.json_store import JsonFileStore
from searchlens.cache.memory_store import MemoryKeyValueStore
from searchlens.cache.sqlite_store import SqliteKeyValueStore
from searchlens.config.settings import Settings


class TestCreateKvStore:
    def test_default_is_memory(self):
        assert isinstance(create_kv_store(), MemoryKeyValueStore)

    def test_memory_from_settings(self):
        settings = Settings(_env_file=None, cache_backend="memory")
        assert isinstance(create_kv_store(settings), MemoryKeyValueStore)

    def test_json(self, tmp_path):
        settings = Settings(_env_file=None, cache_backend="json", cache_root=tmp_path)
        assert isinstance(create_kv_store(settings), JsonFileStore)

    def test_sqlite(self, tmp_path):
        settings = Settings(_env_file=None, cache_backend="sqlite", cache_root=tmp_path)
        store = create_kv_store(settings)
        assert isinstance(store, SqliteKeyValueStore)
        assert (tmp_path / "searchlens_cache.db").exists()
        store.close()

    def test_redis(self):
        settings = Settings(
            _env_file=None, cache_backend="redis", cache_redis_url="redis://localhost:6379/0"
        )
        fake_redis = MagicMock()
        with patch.dict("sys.modules", {"redis": fake_redis}):
            store = create_kv_store(settings)
        fake_redis.Redis.from_url.assert_called_once_with(
            "redis://localhost:6379/0", decode_responses=True
        )
        assert store._client is fake_redis.Redis.from_url.return_value

    def test_unsupported_backend(self):
        settings = MagicMock(cache_backend="floppy")
        with pytest.raises(ValueError, match="Unsupported cache backend"):
            create_kv_store(settings)
