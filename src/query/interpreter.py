# src/query/interpreter.py — v2
"""Query interpreter: raw search phrase -> Interpretation.

Intent classification goes through the resilience gate. The remote branch
maps the remote intent and entities into local types; the fallback branch
classifies with ordered keyword rules. Parameters, context, search terms
and suggestions are always computed locally. Results are memoized per
(query, options) for ``query_cache_ttl_s``.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable

from searchlens.cache.repository import CacheRepository, fingerprint
from searchlens.core.text_utils import STOP_WORDS, collapse_whitespace
from searchlens.llm.errors import RemoteSchemaError
from searchlens.query.context_detector import determine_context
from searchlens.query.entity_extractor import extract_entities
from searchlens.query.intent_rules import (
    classify_intent,
    local_intent_confidence,
    overall_confidence,
)
from searchlens.query.models import (
    ENTITY_TYPES,
    INTENT_TYPES,
    Entity,
    Interpretation,
    QueryIntent,
    QueryOptions,
    Span,
)
from searchlens.query.parameter_extractor import extract_filters, extract_parameters
from searchlens.query.suggestions import generate_suggestions

if TYPE_CHECKING:
    from searchlens.cache.models import CacheStats
    from searchlens.cache.store import CacheStore
    from searchlens.llm.intelligence import IntelligenceClient
    from searchlens.llm.models import RemoteQueryResponse
    from searchlens.resilience.gate import ResilienceGate

logger = logging.getLogger(__name__)

DEFAULT_QUERY_TTL_S = 60 * 60


def clean_query(query: str) -> str:
    """Collapse whitespace and drop stop words, keeping original casing."""
    words = collapse_whitespace(query).split(" ")
    return " ".join(w for w in words if w and w.lower() not in STOP_WORDS)


def extract_search_terms(text: str) -> list[str]:
    """Lowercased words longer than two characters that are not stop words."""
    return [
        w.lower() for w in text.split()
        if len(w) > 2 and w.lower() not in STOP_WORDS
    ]


class QueryInterpreter:
    """Classifies intent and extracts entities, parameters and search terms."""

    def __init__(
        self,
        gate: ResilienceGate,
        cache: CacheStore,
        client: IntelligenceClient | None = None,
        ttl_s: float = DEFAULT_QUERY_TTL_S,
        remote_timeout_s: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._gate = gate
        self._client = client
        self._remote_timeout_s = remote_timeout_s
        self._clock = clock
        self._repo: CacheRepository[Interpretation] = CacheRepository(
            cache, Interpretation, "query", ttl_s
        )

    async def process(self, query: str, options: QueryOptions | None = None) -> Interpretation:
        """Interpret ``query``.

        A blank query returns an empty interpretation without touching the
        cache, the gate or the remote service.
        """
        options = options or QueryOptions()
        now = self._now()

        if not query or not query.strip():
            logger.debug("Blank query rejected before interpretation")
            return Interpretation(original_query=query or "", created_at=now, source="empty")

        key = self.cache_key(query, options)
        cached = await self._repo.load(key)
        if cached is not None:
            logger.debug("Query interpretation cache hit: %r", query)
            return cached

        started = time.monotonic()
        intent, source = await self._analyze_intent(query, options, now)

        processed = clean_query(query)
        search_terms = extract_search_terms(processed)
        filters = extract_filters(query, now) if options.include_filters else {}
        suggestions = (
            generate_suggestions(intent, options.max_suggestions)
            if options.include_suggestions else []
        )

        result = Interpretation(
            original_query=query,
            intent=intent,
            processed_query=processed,
            search_terms=search_terms,
            filters=filters,
            suggestions=suggestions,
            confidence=overall_confidence(
                intent.confidence, search_terms, filters, intent.entities
            ),
            processing_time_ms=int((time.monotonic() - started) * 1000),
            created_at=now,
            source=source,
        )

        if not await self._repo.save(key, result):
            logger.warning("Failed to cache interpretation for %r", query)
        logger.info(
            "Interpreted query intent=%s confidence=%.2f entities=%d source=%s",
            intent.type, result.confidence, len(intent.entities), source,
        )
        return result

    async def cache_statistics(self) -> CacheStats:
        """Entries and bytes held by cached interpretations."""
        return await self._repo.stats()

    async def clear_cache(self) -> int:
        return await self._repo.clear()

    @staticmethod
    def cache_key(query: str, options: QueryOptions) -> str:
        return fingerprint(query, options.model_dump(mode="json"))

    # --- Internal helpers ---

    async def _analyze_intent(
        self, query: str, options: QueryOptions, now: datetime
    ) -> tuple[QueryIntent, str]:
        def fallback() -> tuple[QueryIntent, str]:
            return self.local_intent(query, options, now), "local"

        if self._client is None or not options.include_intent:
            return fallback()

        async def primary() -> tuple[QueryIntent, str]:
            response = await self._client.interpret_query(
                query,
                user_id=options.user_id,
                organization_id=options.organization_id,
                recent_searches=options.context.recent_searches,
                connected_sources=options.context.active_integrations,
                organization_context=(
                    options.context.organization.model_dump()
                    if options.context.organization else None
                ),
            )
            return self._from_remote(response, query, options, now), "remote"

        return await self._gate.execute_with_fallback(
            primary, fallback, label="query intent analysis",
            timeout=self._remote_timeout_s,
        )

    def local_intent(self, query: str, options: QueryOptions, now: datetime) -> QueryIntent:
        """Rule-based intent analysis. Total and deterministic for a given ``now``."""
        intent_type = classify_intent(query)
        entities = extract_entities(query, now) if options.include_entities else []
        return QueryIntent(
            type=intent_type,
            confidence=local_intent_confidence(query, intent_type, entities),
            entities=entities,
            parameters=extract_parameters(query, now, options.include_filters),
            context=determine_context(query, options.domain),
        )

    def _from_remote(
        self,
        response: RemoteQueryResponse,
        query: str,
        options: QueryOptions,
        now: datetime,
    ) -> QueryIntent:
        if response.intent.type not in INTENT_TYPES:
            raise RemoteSchemaError(f"Unknown intent type: {response.intent.type!r}")

        entities: list[Entity] = []
        if options.include_entities:
            for remote in response.entities:
                if remote.type not in ENTITY_TYPES:
                    logger.debug("Dropping remote entity of unknown type %r", remote.type)
                    continue
                start = query.lower().find(remote.value.lower())
                if start < 0:
                    logger.debug("Dropping remote entity %r absent from the query", remote.value)
                    continue
                entities.append(Entity(
                    type=remote.type,
                    value=remote.value,
                    confidence=remote.confidence,
                    span=Span(start=start, end=start + len(remote.value)),
                ))

        return QueryIntent(
            type=response.intent.type,
            confidence=response.intent.confidence,
            entities=entities,
            parameters=extract_parameters(query, now, options.include_filters),
            context=determine_context(query, options.domain),
        )

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self._clock(), tz=timezone.utc)
