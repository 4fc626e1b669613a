# src/tagging/classifier.py — v2
"""Content classifier: topic, sentiment, entity, action and custom tags.

Purely local and deterministic. Results are memoized per
(document id, options) so re-tagging the same document with the same
options returns the stored result without recomputation.
"""

from __future__ import annotations

import logging
import time
from collections import Counter, defaultdict
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable

from searchlens.cache.repository import CacheRepository, fingerprint
from searchlens.core.models import Document
from searchlens.query.dates import MONTH_DATE
from searchlens.query.entity_extractor import MONEY
from searchlens.tagging.lexicons import (
    ACTIONS,
    BUSINESS_TOPICS,
    CUSTOM_TERM_CONFIDENCE,
    CUSTOM_TERMS,
    DOMAIN_TOPICS,
    NEGATIVE_WORDS,
    POSITIVE_WORDS,
    Lexicon,
)
from searchlens.tagging.models import (
    Tag,
    TagCategory,
    TagCount,
    TaggingOptions,
    TaggingResult,
    TaggingStatistics,
)

if TYPE_CHECKING:
    from searchlens.cache.store import CacheStore

logger = logging.getLogger(__name__)

DEFAULT_TAGGING_TTL_S = 7 * 24 * 60 * 60
MOST_COMMON_TAGS = 10


def _lexicon_tags(content: str, lexicon: Lexicon, category: TagCategory, label: str) -> list[Tag]:
    tags = []
    for name, (confidence, synonyms) in lexicon.items():
        if name in content or any(s in content for s in synonyms):
            tags.append(Tag(
                name=name, category=category, confidence=confidence,
                description=f"{label}: {name}",
            ))
    return tags


def topic_tags(content: str, domain: str) -> list[Tag]:
    tags = _lexicon_tags(content, BUSINESS_TOPICS, "topic", "Business topic")
    if domain in DOMAIN_TOPICS:
        tags += _lexicon_tags(
            content, DOMAIN_TOPICS[domain], "topic", f"{domain.capitalize()} topic"
        )
    return tags


def sentiment_tags(content: str) -> list[Tag]:
    positive = sum(1 for w in POSITIVE_WORDS if w in content)
    negative = sum(1 for w in NEGATIVE_WORDS if w in content)
    tags = []
    if positive:
        tags.append(Tag(
            name="positive", category="sentiment",
            confidence=min(0.9, 0.5 + positive * 0.1),
            description="Positive sentiment detected",
        ))
    if negative:
        tags.append(Tag(
            name="negative", category="sentiment",
            confidence=min(0.9, 0.5 + negative * 0.1),
            description="Negative sentiment detected",
        ))
    if not positive and not negative:
        tags.append(Tag(
            name="neutral", category="sentiment", confidence=0.7,
            description="Neutral sentiment detected",
        ))
    return tags


def entity_tags(content: str, document: Document) -> list[Tag]:
    tags = []
    if document.author:
        tags.append(Tag(
            name=document.author, category="entity", confidence=0.9,
            description="Document author",
        ))
    if document.source:
        tags.append(Tag(
            name=document.source, category="entity", confidence=0.9,
            description="Document source",
        ))
    for match in MONTH_DATE.finditer(content):
        tags.append(Tag(
            name=match.group(0), category="entity", confidence=0.8,
            description="Date mentioned in document",
        ))
    for match in MONEY.finditer(content):
        tags.append(Tag(
            name=match.group(0), category="entity", confidence=0.8,
            description="Monetary value",
        ))
    return tags


def action_tags(content: str) -> list[Tag]:
    return _lexicon_tags(content, ACTIONS, "action", "Action")


def custom_tags(content: str, domain: str) -> list[Tag]:
    return [
        Tag(
            name=term, category="custom", confidence=CUSTOM_TERM_CONFIDENCE,
            description=f"{domain.capitalize()} term: {term}",
        )
        for term in CUSTOM_TERMS.get(domain, ())
        if term in content
    ]


def finalize_tags(tags: list[Tag], options: TaggingOptions) -> list[Tag]:
    """Dedupe by (name, category) keeping the first, filter, sort, truncate."""
    seen: set[tuple[str, str]] = set()
    unique = []
    for tag in tags:
        key = (tag.name, tag.category)
        if key not in seen:
            seen.add(key)
            unique.append(tag)
    kept = [t for t in unique if t.confidence >= options.min_confidence]
    kept.sort(key=lambda t: t.confidence, reverse=True)
    return kept[: options.max_tags]


class ContentClassifier:
    """Tags documents and memoizes the result per document and options."""

    def __init__(
        self,
        cache: CacheStore,
        ttl_s: float = DEFAULT_TAGGING_TTL_S,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._clock = clock
        self._repo: CacheRepository[TaggingResult] = CacheRepository(
            cache, TaggingResult, "tagging", ttl_s
        )
        self._results: dict[str, TaggingResult] = {}

    async def tag(self, document: Document, options: TaggingOptions | None = None) -> TaggingResult:
        options = options or TaggingOptions()
        key = self.cache_key(document.id, options)

        cached = await self._repo.load(key)
        if cached is not None:
            logger.debug("Tagging cache hit for document %s", document.id)
            return cached

        started = time.monotonic()
        tags = self.compute_tags(document, options)
        word_count = len(document.content.split(" "))
        distribution = Counter(t.category for t in tags)

        result = TaggingResult(
            document_id=document.id,
            tags=tags,
            overall_confidence=(
                sum(t.confidence for t in tags) / len(tags) if tags else 0.0
            ),
            tag_density=len(tags) / word_count,
            word_count=word_count,
            category_distribution=dict(distribution),
            processing_time_ms=int((time.monotonic() - started) * 1000),
            created_at=datetime.fromtimestamp(self._clock(), tz=timezone.utc),
        )

        if not await self._repo.save(key, result):
            logger.warning("Failed to cache tagging result for document %s", document.id)
        self._results[key] = result
        logger.info("Tagged document %s with %d tags", document.id, len(tags))
        return result

    def compute_tags(self, document: Document, options: TaggingOptions) -> list[Tag]:
        """Run every enabled extractor over the document; no caching."""
        content = document.content.lower()
        tags: list[Tag] = []
        if options.include_topics:
            tags += topic_tags(content, options.domain)
        if options.include_sentiment:
            tags += sentiment_tags(content)
        if options.include_entities:
            tags += entity_tags(content, document)
        if options.include_actions:
            tags += action_tags(content)
        if options.include_custom_tags:
            tags += custom_tags(content, options.domain)
        return finalize_tags(tags, options)

    async def get_tags(
        self, document_id: str, options: TaggingOptions | None = None
    ) -> list[Tag] | None:
        """Tags of a previously tagged document, None when not cached."""
        cached = await self._repo.load(self.cache_key(document_id, options or TaggingOptions()))
        return cached.tags if cached is not None else None

    async def forget(self, document_id: str, options: TaggingOptions | None = None) -> bool:
        key = self.cache_key(document_id, options or TaggingOptions())
        self._results.pop(key, None)
        return await self._repo.delete(key)

    def all_tags(self) -> list[Tag]:
        """Distinct (name, category) tags seen by this instance, most confident first."""
        best: dict[tuple[str, str], Tag] = {}
        for result in self._results.values():
            for tag in result.tags:
                key = (tag.name, tag.category)
                if key not in best or tag.confidence > best[key].confidence:
                    best[key] = tag
        return sorted(best.values(), key=lambda t: t.confidence, reverse=True)

    def tags_by_category(self, category: TagCategory) -> list[Tag]:
        return [t for t in self.all_tags() if t.category == category]

    def export_results(self) -> list[TaggingResult]:
        return list(self._results.values())

    async def import_results(
        self, results: list[TaggingResult], options: TaggingOptions | None = None
    ) -> int:
        """Adopt previously exported results as if tagged with ``options``.

        An imported result replaces any existing one for the same document.
        Returns the number of results written to the cache.
        """
        options = options or TaggingOptions()
        saved = 0
        for result in results:
            key = self.cache_key(result.document_id, options)
            self._results[key] = result
            if await self._repo.save(key, result):
                saved += 1
            else:
                logger.warning("Failed to cache imported result for %s", result.document_id)
        logger.info("Imported %d tagging results (%d cached)", len(results), saved)
        return saved

    def statistics(self) -> TaggingStatistics:
        """Aggregate over the documents tagged by this classifier instance."""
        if not self._results:
            return TaggingStatistics()

        all_tags = [t for r in self._results.values() for t in r.tags]
        counts: Counter[str] = Counter()
        confidence_sums: dict[str, float] = defaultdict(float)
        for tag in all_tags:
            counts[tag.name] += 1
            confidence_sums[tag.name] += tag.confidence

        return TaggingStatistics(
            total_documents=len(self._results),
            total_tags=len(all_tags),
            average_tags_per_document=len(all_tags) / len(self._results),
            average_confidence=(
                sum(t.confidence for t in all_tags) / len(all_tags) if all_tags else 0.0
            ),
            category_distribution=dict(Counter(t.category for t in all_tags)),
            most_common_tags=[
                TagCount(name=name, count=n, average_confidence=confidence_sums[name] / n)
                for name, n in counts.most_common(MOST_COMMON_TAGS)
            ],
        )

    @staticmethod
    def cache_key(document_id: str, options: TaggingOptions) -> str:
        return f"{document_id}:{fingerprint(options.model_dump(mode='json'))}"
