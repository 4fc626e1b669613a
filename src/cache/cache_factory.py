# src/cache/cache_factory.py — v3
"""Factory for key-value store instantiation."""

from __future__ import annotations

from searchlens.cache.base_kv_store import BaseKeyValueStore
from searchlens.config.settings import Settings


def create_kv_store(settings: Settings | None = None) -> BaseKeyValueStore:
    """Instantiate the configured cache medium.

    Args:
        settings: Application settings. Defaults to the in-memory backend.

    Returns:
        Configured BaseKeyValueStore implementation.
    """
    backend = "memory" if settings is None else settings.cache_backend

    if backend == "memory":
        from searchlens.cache.memory_store import MemoryKeyValueStore
        return MemoryKeyValueStore()

    if backend == "json":
        from searchlens.cache.json_store import JsonFileStore
        return JsonFileStore(cache_root=settings.cache_root)

    if backend == "sqlite":
        from searchlens.cache.sqlite_store import SqliteKeyValueStore
        db_path = settings.cache_root.expanduser() / "searchlens_cache.db"
        return SqliteKeyValueStore(db_path=db_path)

    if backend == "redis":
        from searchlens.cache.redis_store import RedisKeyValueStore
        if not settings.cache_redis_url:
            raise ValueError(
                "CACHE_REDIS_URL must be set when CACHE_BACKEND=redis"
            )
        return RedisKeyValueStore(redis_url=settings.cache_redis_url)

    raise ValueError(f"Unsupported cache backend: {backend!r}")
