# src/cache/redis_store.py — v2
"""Redis-based store (CACHE_BACKEND=redis).

Requires 'redis' package: pip install searchlens[redis].
Lets several worker processes share one cache.
"""

from __future__ import annotations

import logging

from searchlens.cache.base_kv_store import BaseKeyValueStore

logger = logging.getLogger(__name__)

_KEY_PREFIX = "searchlens:kv:"
_INDEX_KEY = "searchlens:kv:__index__"


class RedisKeyValueStore(BaseKeyValueStore):
    """Redis-backed store with an index set for key listing."""

    def __init__(self, redis_url: str) -> None:
        try:
            import redis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install searchlens[redis]"
            ) from e

        self._client = redis.Redis.from_url(redis_url, decode_responses=True)

    async def get(self, key: str) -> str | None:
        return self._client.get(f"{_KEY_PREFIX}{key}")

    async def set(self, key: str, value: str) -> None:
        self._client.set(f"{_KEY_PREFIX}{key}", value)
        # Maintain a set of all keys for keys() / clear()
        self._client.sadd(_INDEX_KEY, key)

    async def delete(self, key: str) -> None:
        self._client.delete(f"{_KEY_PREFIX}{key}")
        self._client.srem(_INDEX_KEY, key)

    async def clear(self) -> None:
        for key in self._client.smembers(_INDEX_KEY):
            self._client.delete(f"{_KEY_PREFIX}{key}")
        self._client.delete(_INDEX_KEY)

    async def keys(self) -> list[str]:
        return sorted(self._client.smembers(_INDEX_KEY))

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()
