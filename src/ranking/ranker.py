# src/ranking/ranker.py — v2
"""Relevance ranker: six-factor scoring and ordering of candidate results.

The remote branch (through the resilience gate) supplies only the
relevance factor; the other five stay at a neutral 0.5. The fallback
branch computes all six locally. Either way the full ordered list is
cached per query and the output is truncated to ``max_results``.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Sequence

from searchlens.cache.repository import CacheRepository, fingerprint
from searchlens.core.models import SearchResult
from searchlens.llm.errors import RemoteSchemaError
from searchlens.ranking.explanation import (
    boost_reasons,
    explain,
    penalty_reasons,
    weighted_score,
)
from searchlens.ranking.factors import compute_factors
from searchlens.ranking.models import (
    RankedResult,
    RankingContext,
    RankingFactors,
    RankingOptions,
    RankingRecord,
    RankingStatistics,
    ReasonCount,
)

if TYPE_CHECKING:
    from searchlens.cache.store import CacheStore
    from searchlens.llm.intelligence import IntelligenceClient
    from searchlens.llm.models import RemoteRankingResponse
    from searchlens.resilience.gate import ResilienceGate

logger = logging.getLogger(__name__)

DEFAULT_RANKING_TTL_S = 24 * 60 * 60
NEUTRAL_FACTOR = 0.5
MAX_TRACKED_QUERIES = 100
TOP_REASONS = 5


class RelevanceRanker:
    """Scores and orders search results for one query at a time."""

    def __init__(
        self,
        gate: ResilienceGate,
        cache: CacheStore,
        client: IntelligenceClient | None = None,
        ttl_s: float = DEFAULT_RANKING_TTL_S,
        remote_timeout_s: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._gate = gate
        self._client = client
        self._remote_timeout_s = remote_timeout_s
        self._clock = clock
        self._repo: CacheRepository[RankingRecord] = CacheRepository(
            cache, RankingRecord, "ranking", ttl_s
        )
        # Latest ranking per query, insertion-ordered, for statistics.
        self._history: dict[str, list[RankedResult]] = {}

    async def rank(
        self,
        results: Sequence[SearchResult],
        context: RankingContext,
        options: RankingOptions | None = None,
    ) -> list[RankedResult]:
        """Return ``results`` ordered by descending score, at most ``max_results``."""
        options = options or RankingOptions()
        if not results:
            return []

        def fallback() -> tuple[list[RankedResult], str]:
            return self.rank_locally(results, context, options), "local"

        if self._client is None:
            ranked, source = fallback()
        else:
            async def primary() -> tuple[list[RankedResult], str]:
                response = await self._client.rank_results(
                    context.query,
                    results,
                    history=context.history.items,
                    preferred_sources=context.preferences.preferred_sources,
                )
                return self._from_remote(response, results, options), "remote"

            ranked, source = await self._gate.execute_with_fallback(
                primary, fallback, label="search result ranking",
                timeout=self._remote_timeout_s,
            )

        await self._save(context.query, ranked, source)
        logger.info(
            "Ranked %d results for query (source=%s, returning %d)",
            len(ranked), source, min(len(ranked), options.max_results),
        )
        return ranked[: options.max_results]

    def rank_locally(
        self,
        results: Sequence[SearchResult],
        context: RankingContext,
        options: RankingOptions,
    ) -> list[RankedResult]:
        """Deterministic six-factor ranking of the full list (no truncation)."""
        ranked = []
        for result in results:
            factors = compute_factors(result, context)
            ranked.append(self._build(
                result,
                factors,
                options,
                explanation=explain(factors) if options.explain_ranking else None,
            ))
        return _sort(ranked)

    async def get_ranking_data(self, query: str) -> list[RankedResult] | None:
        """Full cached ranking for ``query``, or None when absent or expired."""
        record = await self._repo.load(fingerprint(query))
        return record.results if record is not None else None

    async def clear_ranking_data(self) -> int:
        """Forget every cached ranking and the in-process statistics window."""
        self._history.clear()
        removed = await self._repo.clear()
        logger.info("Cleared %d cached rankings", removed)
        return removed

    def ranking_statistics(self) -> RankingStatistics:
        if not self._history:
            return RankingStatistics()

        all_results = [r for ranked in self._history.values() for r in ranked]
        boosts = Counter(reason for r in all_results for reason in r.boosted_by)
        penalties = Counter(reason for r in all_results for reason in r.penalized_by)
        return RankingStatistics(
            total_queries=len(self._history),
            average_results_per_query=len(all_results) / len(self._history),
            average_score=(
                sum(r.score for r in all_results) / len(all_results) if all_results else 0.0
            ),
            top_boost_reasons=[
                ReasonCount(reason=k, count=v) for k, v in boosts.most_common(TOP_REASONS)
            ],
            top_penalty_reasons=[
                ReasonCount(reason=k, count=v) for k, v in penalties.most_common(TOP_REASONS)
            ],
        )

    # --- Internal helpers ---

    def _from_remote(
        self,
        response: RemoteRankingResponse,
        results: Sequence[SearchResult],
        options: RankingOptions,
    ) -> list[RankedResult]:
        known_ids = {r.id for r in results}
        remote_by_id = {}
        for item in response.ranked_results:
            if item.id not in known_ids:
                raise RemoteSchemaError(f"Remote ranking returned unknown id {item.id!r}")
            remote_by_id[item.id] = item

        ranked = []
        for result in results:
            item = remote_by_id.get(result.id)
            factors = RankingFactors(
                relevance=item.relevance_score if item else 0.0,
                recency=NEUTRAL_FACTOR,
                authority=NEUTRAL_FACTOR,
                user_engagement=NEUTRAL_FACTOR,
                content_quality=NEUTRAL_FACTOR,
                personalization=NEUTRAL_FACTOR,
            )
            explanation = None
            if options.explain_ranking:
                explanation = (item.ranking_reason if item else "") or explain(factors)
            ranked.append(self._build(result, factors, options, explanation))
        return _sort(ranked)

    @staticmethod
    def _build(
        result: SearchResult,
        factors: RankingFactors,
        options: RankingOptions,
        explanation: str | None,
    ) -> RankedResult:
        return RankedResult(
            **result.model_dump(include=set(SearchResult.model_fields)),
            score=weighted_score(factors, options.weights),
            factors=factors,
            explanation=explanation,
            boosted_by=boost_reasons(factors, options),
            penalized_by=penalty_reasons(factors, options),
        )

    async def _save(self, query: str, ranked: list[RankedResult], source: str) -> None:
        self._history.pop(query, None)
        self._history[query] = ranked
        while len(self._history) > MAX_TRACKED_QUERIES:
            self._history.pop(next(iter(self._history)))

        record = RankingRecord(
            query=query,
            results=ranked,
            ranked_at=datetime.fromtimestamp(self._clock(), tz=timezone.utc),
            source=source,
        )
        if not await self._repo.save(fingerprint(query), record):
            logger.warning("Failed to cache ranking for query %r", query)


def _sort(ranked: list[RankedResult]) -> list[RankedResult]:
    # sorted() is stable, so equal scores keep input order.
    return sorted(ranked, key=lambda r: r.score, reverse=True)
