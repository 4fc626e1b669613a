# src/cache/models.py — v2
"""Cache domain models: CacheRecord (stored envelope) and CacheStats."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

CACHE_SCHEMA_VERSION = 1


class CacheRecord(BaseModel):
    """Envelope persisted for every cache entry.

    Created on ``set`` and never mutated afterwards. ``schema_version``
    lets a future release migrate or reject records written by an older one.
    """

    schema_version: int = CACHE_SCHEMA_VERSION
    value: Any
    written_at: float
    ttl_s: float | None = None
    size_bytes: int

    def is_expired(self, now: float) -> bool:
        """True once ``now - written_at`` exceeds the TTL."""
        return self.ttl_s is not None and now - self.written_at > self.ttl_s


class CacheStats(BaseModel):
    """Budget usage of the live entries."""

    used_bytes: int
    item_count: int
    max_bytes: int
    max_items: int

    @property
    def percentage(self) -> float:
        """Share of the byte budget in use, 0-100."""
        if self.max_bytes <= 0:
            return 0.0
        return self.used_bytes / self.max_bytes * 100.0
