# src/cache/repository.py — v2
"""Typed repository over the cache store.

Components never touch raw cached blobs: each owns a ``CacheRepository``
bound to one pydantic model, one key namespace and one TTL. A cached value
that no longer validates against the model is dropped and reported as a miss.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from searchlens.cache.models import CacheStats
from searchlens.cache.store import CacheStore

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def fingerprint(*parts: Any) -> str:
    """Stable sha256 hex digest of JSON-serializable parts."""
    payload = json.dumps(parts, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class CacheRepository(Generic[ModelT]):
    """Load/save one model type under ``<namespace>:<key>``."""

    def __init__(
        self,
        store: CacheStore,
        model: type[ModelT],
        namespace: str,
        ttl_s: float | None,
    ) -> None:
        self._store = store
        self._model = model
        self._namespace = namespace
        self._ttl_s = ttl_s

    @property
    def namespace(self) -> str:
        return self._namespace

    def key_for(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    async def load(self, key: str) -> ModelT | None:
        raw = await self._store.get(self.key_for(key))
        if raw is None:
            return None
        try:
            return self._model.model_validate(raw)
        except ValidationError as e:
            logger.warning(
                "Discarding cached %s at %s: %s",
                self._model.__name__, self.key_for(key), e.error_count(),
            )
            await self._store.remove(self.key_for(key))
            return None

    async def save(self, key: str, value: ModelT) -> bool:
        return await self._store.set(
            self.key_for(key), value.model_dump(mode="json"), self._ttl_s
        )

    async def delete(self, key: str) -> bool:
        return await self._store.remove(self.key_for(key))

    async def stats(self) -> CacheStats:
        """Usage of this namespace alone, against the store-wide budget."""
        return await self._store.stats(self.key_for(""))

    async def clear(self) -> int:
        """Drop every entry in this namespace; returns the number removed."""
        return await self._store.remove_namespace(self.key_for(""))
