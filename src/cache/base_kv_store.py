# src/cache/base_kv_store.py — v2
"""Abstract persistent key-value store consumed by CacheStore.

Values are opaque strings; serialization and byte accounting belong to
the CacheStore layered on top.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseKeyValueStore(ABC):
    """Unified interface for cache storage media."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store a value (upsert). May raise when the medium rejects the write."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a key. Absent keys are ignored."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every key held by this store."""

    @abstractmethod
    async def keys(self) -> list[str]:
        """List all stored keys."""

    def close(self) -> None:
        """Release underlying resources."""
