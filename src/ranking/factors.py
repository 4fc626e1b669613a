# src/ranking/factors.py — v1
"""Local computation of the six ranking factors.

Each function is total: any result and context produce a value in [0, 1].
"""

from __future__ import annotations

import re

from searchlens.core.models import SearchResult
from searchlens.core.text_utils import jaccard_similarity
from searchlens.ranking.models import RankingContext, RankingFactors

SOURCE_AUTHORITY: dict[str, float] = {
    "google": 0.9,
    "notion": 0.8,
    "slack": 0.7,
    "github": 0.8,
    "confluence": 0.8,
    "jira": 0.7,
    "asana": 0.7,
    "trello": 0.6,
}
DEFAULT_AUTHORITY = 0.5
TRUSTED_DOMAINS = ("docs.google.com", "notion.so", "github.com")

LONG_CONTENT_WORDS = 100
EXTENDED_CONTENT_WORDS = 500
SHORT_CONTENT_WORDS = 50
RECENT_HISTORY_WINDOW = 10
SIMILAR_HISTORY_THRESHOLD = 0.3

# (max age in days, score); older than the last step scores 0.1
RECENCY_STEPS: tuple[tuple[float, float], ...] = (
    (1, 1.0), (7, 0.8), (30, 0.6), (90, 0.4), (365, 0.2),
)
OLDEST_RECENCY = 0.1

_STRUCTURE = re.compile(r"[•\-\*]|\d+\.")


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def _word_count(text: str) -> int:
    # Counts space-separated chunks, so empty content counts as one word.
    return len(text.split(" "))


def _topic_matches(result: SearchResult, context: RankingContext) -> int:
    topics = [t.lower() for t in context.preferences.interested_topics]
    return sum(1 for tag in result.tags if any(t in tag.lower() for t in topics))


def _max_history_similarity(result: SearchResult, context: RankingContext) -> float:
    return max(
        (jaccard_similarity(result.content, doc.content) for doc in context.history.items),
        default=0.0,
    )


def relevance(result: SearchResult, query: str) -> float:
    query_lower = query.lower()
    query_words = query_lower.split()
    title_words = result.title.lower().split()
    content_words = result.content.lower().split()
    score = 0.0

    for word in query_words:
        if word in title_words:
            score += 0.3

    if content_words:
        for word in query_words:
            matches = sum(1 for cw in content_words if word in cw)
            score += matches / len(content_words) * 0.2

    if query_lower and query_lower in result.title.lower():
        score += 0.4
    if query_lower and query_lower in result.content.lower():
        score += 0.2

    if result.tags:
        tag_matches = sum(
            1 for tag in result.tags if any(w in tag.lower() for w in query_words)
        )
        score += tag_matches / len(result.tags) * 0.1

    return _clamp(score)


def recency(result: SearchResult, context: RankingContext) -> float:
    age_days = (context.search_time - result.created_at).total_seconds() / 86400
    for max_days, score in RECENCY_STEPS:
        if age_days <= max_days:
            return score
    return OLDEST_RECENCY


def authority(result: SearchResult, context: RankingContext) -> float:
    score = SOURCE_AUTHORITY.get(result.source.lower(), DEFAULT_AUTHORITY)

    if result.author and any(doc.author == result.author for doc in context.history.items):
        score += 0.1

    words = _word_count(result.content)
    if words > LONG_CONTENT_WORDS:
        score += 0.1
    if words > EXTENDED_CONTENT_WORDS:
        score += 0.1

    if result.url:
        score += 0.1 * sum(1 for domain in TRUSTED_DOMAINS if domain in result.url)

    return _clamp(score)


def user_engagement(result: SearchResult, context: RankingContext) -> float:
    score = 0.5

    if any(
        jaccard_similarity(result.content, doc.content) > SIMILAR_HISTORY_THRESHOLD
        for doc in context.history.items
    ):
        score += 0.2

    if result.source in context.preferences.preferred_sources:
        score += 0.2

    if result.tags:
        score += _topic_matches(result, context) / len(result.tags) * 0.1

    recent = context.history.items[:RECENT_HISTORY_WINDOW]
    if any(doc.id == result.id for doc in recent):
        score += 0.1

    return _clamp(score)


def content_quality(result: SearchResult) -> float:
    score = 0.5

    words = _word_count(result.content)
    if words < SHORT_CONTENT_WORDS:
        score -= 0.2
    elif words > EXTENDED_CONTENT_WORDS:
        score += 0.2
    elif words > LONG_CONTENT_WORDS:
        score += 0.1

    if 10 < len(result.title) < 100:
        score += 0.1
    if _STRUCTURE.search(result.content):
        score += 0.1
    if result.tags:
        score += 0.1
    if result.author:
        score += 0.1
    if result.url:
        score += 0.1

    return _clamp(score)


def personalization(result: SearchResult, context: RankingContext) -> float:
    score = 0.0

    if result.tags and context.user_tags:
        user_tags = {t.lower() for t in context.user_tags}
        matches = sum(1 for tag in result.tags if tag.lower() in user_tags)
        score += matches / len(result.tags) * 0.3

    score += _max_history_similarity(result, context) * 0.4

    if result.source in context.preferences.preferred_sources:
        score += 0.2

    if result.tags:
        score += _topic_matches(result, context) / len(result.tags) * 0.1

    return _clamp(score)


def compute_factors(result: SearchResult, context: RankingContext) -> RankingFactors:
    return RankingFactors(
        relevance=relevance(result, context.query),
        recency=recency(result, context),
        authority=authority(result, context),
        user_engagement=user_engagement(result, context),
        content_quality=content_quality(result),
        personalization=personalization(result, context),
    )
