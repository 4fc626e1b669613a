# src/cache/memory_store.py — v1
"""Process-local dict store (default CACHE_BACKEND=memory)."""

from __future__ import annotations

from searchlens.cache.base_kv_store import BaseKeyValueStore


class MemoryKeyValueStore(BaseKeyValueStore):
    """Dict-backed store; contents vanish with the process."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def clear(self) -> None:
        self._data.clear()

    async def keys(self) -> list[str]:
        return list(self._data)
