# src/cache/store.py — v2
"""Quota- and TTL-aware cache store.

Every component memoizes through this store. Entries are immutable
``CacheRecord`` envelopes written to a ``BaseKeyValueStore`` medium. The
store keeps an in-process index of live entries (rebuilt from the medium on
first use) so byte/item accounting and eviction stay O(entries).

Invariants after every successful ``set``:
  - sum of live entry sizes <= ``max_bytes``
  - live entry count <= ``max_items``

Medium failures never propagate: a failed write returns False, a failed or
corrupt read is a miss and the offending entry is purged.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from pydantic import ValidationError

from searchlens.cache.models import CACHE_SCHEMA_VERSION, CacheRecord, CacheStats

if TYPE_CHECKING:
    from searchlens.cache.base_kv_store import BaseKeyValueStore
    from searchlens.config.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_MAX_ITEMS = 1000
DEFAULT_CLEANUP_THRESHOLD = 0.8


@dataclass(frozen=True)
class _IndexEntry:
    written_at: float
    ttl_s: float | None
    size_bytes: int

    def is_expired(self, now: float) -> bool:
        return self.ttl_s is not None and now - self.written_at > self.ttl_s


def estimate_size(value: Any) -> int:
    """UTF-8 byte length of the compact JSON encoding of ``value``."""
    encoded = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return len(encoded.encode("utf-8"))


class CacheStore:
    """Byte- and item-bounded key/value cache with per-entry TTL."""

    def __init__(
        self,
        backend: BaseKeyValueStore,
        max_bytes: int = DEFAULT_MAX_BYTES,
        max_items: int = DEFAULT_MAX_ITEMS,
        cleanup_threshold: float = DEFAULT_CLEANUP_THRESHOLD,
        key_prefix: str = "searchlens:",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._backend = backend
        self._max_bytes = max_bytes
        self._max_items = max_items
        self._cleanup_threshold = cleanup_threshold
        self._prefix = key_prefix
        self._clock = clock
        self._index: dict[str, _IndexEntry] | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        backend: BaseKeyValueStore,
        clock: Callable[[], float] = time.time,
    ) -> CacheStore:
        return cls(
            backend=backend,
            max_bytes=settings.cache_max_bytes,
            max_items=settings.cache_max_items,
            cleanup_threshold=settings.cache_cleanup_threshold,
            key_prefix=settings.cache_key_prefix,
            clock=clock,
        )

    # --- Public API ---

    async def set(self, key: str, value: Any, ttl_s: float | None) -> bool:
        """Store ``value`` under ``key`` for ``ttl_s`` seconds.

        Returns:
            True when written, False when the value cannot be serialized,
            exceeds the whole budget, or the medium rejected the write.
        """
        try:
            size = estimate_size(value)
        except (TypeError, ValueError) as e:
            logger.warning("Cannot serialize cache value for %s: %s", key, e)
            return False

        if size > self._max_bytes:
            logger.warning(
                "Cache entry %s too large (%d bytes > budget %d)",
                key, size, self._max_bytes,
            )
            return False

        index = await self._ensure_index()
        full_key = self._full_key(key)
        # An overwrite releases the previous entry's share of the budget.
        previous = index.pop(full_key, None)

        if self._used_bytes() + size > self._max_bytes or len(index) + 1 > self._max_items:
            await self._cleanup(incoming_bytes=size, incoming_items=1)

        now = self._clock()
        record = CacheRecord(
            value=value, written_at=now, ttl_s=ttl_s, size_bytes=size
        )
        try:
            await self._backend.set(full_key, record.model_dump_json())
        except Exception as e:
            logger.warning("Cache write failed for %s: %s", key, e)
            if previous is not None and full_key not in index:
                index[full_key] = previous
            return False

        index[full_key] = _IndexEntry(written_at=now, ttl_s=ttl_s, size_bytes=size)
        logger.debug("Cached %s (%d bytes, ttl=%s)", key, size, ttl_s)
        return True

    async def get(self, key: str) -> Any | None:
        """Return the cached value, or None on miss, expiry or corruption."""
        full_key = self._full_key(key)
        try:
            raw = await self._backend.get(full_key)
        except Exception as e:
            logger.warning("Cache read failed for %s: %s", key, e)
            await self._purge(full_key)
            return None

        if raw is None:
            if self._index is not None:
                self._index.pop(full_key, None)
            return None

        record = self._parse(full_key, raw)
        if record is None:
            await self._purge(full_key)
            return None

        if record.is_expired(self._clock()):
            logger.debug("Cache entry %s expired", key)
            await self._purge(full_key)
            return None

        return record.value

    async def remove(self, key: str) -> bool:
        """Delete ``key``. Returns False only when the medium failed."""
        return await self._purge(self._full_key(key))

    async def clear(self) -> None:
        """Remove every entry written under this store's prefix."""
        try:
            keys = await self._backend.keys()
        except Exception as e:
            logger.warning("Cache clear could not list keys: %s", e)
            keys = list(self._index or {})
        for full_key in keys:
            if full_key.startswith(self._prefix):
                await self._purge(full_key)
        self._index = {}
        logger.info("Cache cleared (%d keys scanned)", len(keys))

    async def stats(self, namespace: str = "") -> CacheStats:
        """Budget usage, restricted to keys starting with ``namespace`` if given."""
        index = await self._ensure_index()
        prefix = self._full_key(namespace)
        entries = [e for k, e in index.items() if k.startswith(prefix)]
        return CacheStats(
            used_bytes=sum(e.size_bytes for e in entries),
            item_count=len(entries),
            max_bytes=self._max_bytes,
            max_items=self._max_items,
        )

    async def remove_namespace(self, namespace: str) -> int:
        """Delete every live entry whose key starts with ``namespace``."""
        index = await self._ensure_index()
        prefix = self._full_key(namespace)
        doomed = [k for k in index if k.startswith(prefix)]
        for full_key in doomed:
            await self._purge(full_key)
        if doomed:
            logger.info("Cache removed %d entries under %r", len(doomed), namespace)
        return len(doomed)

    async def cleanup(self) -> int:
        """Purge expired entries, then evict oldest while over budget.

        Returns:
            Number of entries removed.
        """
        return await self._cleanup(incoming_bytes=0, incoming_items=0)

    # --- Internal helpers ---

    async def _cleanup(self, incoming_bytes: int, incoming_items: int) -> int:
        index = await self._ensure_index()
        now = self._clock()
        removed = 0

        for full_key, entry in list(index.items()):
            if entry.is_expired(now):
                await self._purge(full_key)
                removed += 1
        expired = removed

        over_budget = self._used_bytes() + incoming_bytes > self._max_bytes
        over_cap = len(index) + incoming_items > self._max_items
        if over_budget or over_cap:
            target_bytes = self._cleanup_threshold * self._max_bytes
            oldest_first = sorted(index.items(), key=lambda kv: kv[1].written_at)
            for full_key, _entry in oldest_first:
                bytes_ok = (
                    not over_budget
                    or self._used_bytes() + incoming_bytes <= target_bytes
                )
                items_ok = len(index) + incoming_items <= self._max_items
                if bytes_ok and items_ok:
                    break
                await self._purge(full_key)
                removed += 1

        if removed:
            logger.info(
                "Cache cleanup removed %d entries (%d expired), %d bytes in use",
                removed, expired, self._used_bytes(),
            )
        return removed

    async def _ensure_index(self) -> dict[str, _IndexEntry]:
        """Load the live-entry index from the medium once."""
        if self._index is not None:
            return self._index

        self._index = {}
        try:
            keys = await self._backend.keys()
        except Exception as e:
            logger.warning("Cache index rebuild failed: %s", e)
            return self._index

        now = self._clock()
        for full_key in keys:
            if not full_key.startswith(self._prefix):
                continue
            try:
                raw = await self._backend.get(full_key)
            except Exception as e:
                logger.warning("Cache read failed for %s: %s", full_key, e)
                raw = None
            record = self._parse(full_key, raw) if raw is not None else None
            if record is None or record.is_expired(now):
                await self._purge(full_key)
                continue
            self._index[full_key] = _IndexEntry(
                written_at=record.written_at,
                ttl_s=record.ttl_s,
                size_bytes=record.size_bytes,
            )
        logger.debug("Cache index loaded: %d live entries", len(self._index))
        return self._index

    def _parse(self, full_key: str, raw: str) -> CacheRecord | None:
        try:
            record = CacheRecord.model_validate_json(raw)
        except (ValidationError, ValueError) as e:
            logger.warning("Corrupt cache entry %s: %s", full_key, e)
            return None
        if record.schema_version != CACHE_SCHEMA_VERSION:
            logger.warning(
                "Cache entry %s has schema v%d, expected v%d",
                full_key, record.schema_version, CACHE_SCHEMA_VERSION,
            )
            return None
        return record

    async def _purge(self, full_key: str) -> bool:
        if self._index is not None:
            self._index.pop(full_key, None)
        try:
            await self._backend.delete(full_key)
        except Exception as e:
            logger.warning("Cache delete failed for %s: %s", full_key, e)
            return False
        return True

    def _used_bytes(self) -> int:
        return sum(e.size_bytes for e in (self._index or {}).values())

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}"
