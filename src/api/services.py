# src/api/services.py — v1
"""Explicit service wiring.

One gate, one cache store and one remote client are built at process start
and shared by the three components. Nothing here is a module-level
singleton: every caller holds its own ``SearchServices``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from searchlens.cache.base_kv_store import BaseKeyValueStore
from searchlens.cache.cache_factory import create_kv_store
from searchlens.cache.store import CacheStore
from searchlens.config.settings import Settings
from searchlens.llm.base_client import BaseLLMClient
from searchlens.llm.client_factory import create_llm_client
from searchlens.llm.intelligence import IntelligenceClient
from searchlens.query.interpreter import QueryInterpreter
from searchlens.ranking.ranker import RelevanceRanker
from searchlens.resilience.gate import ResilienceGate
from searchlens.tagging.classifier import ContentClassifier

logger = logging.getLogger(__name__)


@dataclass
class SearchServices:
    """Container of the wired components."""

    settings: Settings
    gate: ResilienceGate
    cache: CacheStore
    kv_store: BaseKeyValueStore
    client: IntelligenceClient | None
    interpreter: QueryInterpreter
    ranker: RelevanceRanker
    classifier: ContentClassifier

    async def close(self) -> None:
        self.kv_store.close()


def build_services(
    settings: Settings | None = None,
    llm_client: BaseLLMClient | None = None,
    kv_store: BaseKeyValueStore | None = None,
    clock: Callable[[], float] | None = None,
) -> SearchServices:
    """Construct every component from settings.

    Args:
        settings: Application settings. Loaded from .env if None.
        llm_client: Remote LLM client. Built from settings when None and
            the remote service is enabled.
        kv_store: Cache medium. Built from settings when None.
        clock: Wall clock in epoch seconds, injectable for tests.
    """
    settings = settings or Settings()
    clock = clock or time.time

    gate = ResilienceGate.from_settings(settings, clock=clock)
    kv_store = kv_store or create_kv_store(settings)
    cache = CacheStore.from_settings(settings, kv_store, clock=clock)

    client: IntelligenceClient | None = None
    if settings.remote_enabled:
        if llm_client is None:
            llm_client = create_llm_client(
                settings.remote_provider, settings.remote_model, settings
            )
        client = IntelligenceClient.from_settings(settings, llm_client)
        logger.info(
            "Remote intelligence enabled: provider=%s model=%s",
            client.provider_name, settings.remote_model,
        )
    else:
        logger.info("Remote intelligence disabled, local rules only")

    return SearchServices(
        settings=settings,
        gate=gate,
        cache=cache,
        kv_store=kv_store,
        client=client,
        interpreter=QueryInterpreter(
            gate, cache, client,
            ttl_s=settings.query_cache_ttl_s,
            remote_timeout_s=settings.remote_timeout_s,
            clock=clock,
        ),
        ranker=RelevanceRanker(
            gate, cache, client,
            ttl_s=settings.ranking_cache_ttl_s,
            remote_timeout_s=settings.remote_timeout_s,
            clock=clock,
        ),
        classifier=ContentClassifier(
            cache, ttl_s=settings.tagging_cache_ttl_s, clock=clock
        ),
    )
