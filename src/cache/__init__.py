# src/cache/__init__.py — v1
"""Quota- and TTL-aware cache over pluggable key-value media."""

from searchlens.cache.cache_factory import create_kv_store
from searchlens.cache.repository import CacheRepository, fingerprint
from searchlens.cache.store import CacheStore

__all__ = ["CacheRepository", "CacheStore", "create_kv_store", "fingerprint"]
