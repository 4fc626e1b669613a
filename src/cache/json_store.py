# src/cache/json_store.py — v2
"""JSON file-based store (CACHE_BACKEND=json).

One file per key under CACHE_ROOT. File names are the SHA-256 of the key
so arbitrary query text is safe on disk; the original key is kept inside
the file so ``keys()`` can list it.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path

from searchlens.cache.base_kv_store import BaseKeyValueStore

logger = logging.getLogger(__name__)


class JsonFileStore(BaseKeyValueStore):
    """File-based store using one JSON document per key."""

    def __init__(self, cache_root: Path | str) -> None:
        self._root = Path(cache_root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    async def get(self, key: str) -> str | None:
        path = self._entry_path(key)
        if not path.exists():
            return None
        data = json.loads(path.read_text(encoding="utf-8"))
        return data["value"]

    async def set(self, key: str, value: str) -> None:
        path = self._entry_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps({"key": key, "value": value}, ensure_ascii=False)
        path.write_text(payload, encoding="utf-8")

    async def delete(self, key: str) -> None:
        path = self._entry_path(key)
        if path.exists():
            path.unlink()

    async def clear(self) -> None:
        for path in self._root.glob("*.json"):
            path.unlink(missing_ok=True)

    async def keys(self) -> list[str]:
        found: list[str] = []
        if not self._root.is_dir():
            return found

        for path in self._root.glob("*.json"):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                found.append(data["key"])
            except (json.JSONDecodeError, KeyError, OSError) as e:
                logger.warning("Removing unreadable cache file %s: %s", path.name, e)
                path.unlink(missing_ok=True)

        return found

    def _entry_path(self, key: str) -> Path:
        """Return file path for a cache key."""
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self._root / f"{digest}.json"
