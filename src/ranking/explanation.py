# src/ranking/explanation.py — v1
"""Weighted score, boost/penalty reason tags and natural-language explanation."""

from __future__ import annotations

from searchlens.ranking.models import (
    FACTOR_NAMES,
    RankingFactors,
    RankingOptions,
    RankingWeights,
)

BOOST_THRESHOLD = 0.8
PENALTY_THRESHOLD = 0.3

BOOST_REASONS: dict[str, str] = {
    "relevance": "high_relevance",
    "recency": "recent_content",
    "authority": "authoritative_source",
    "user_engagement": "user_preference_match",
    "content_quality": "high_quality",
    "personalization": "highly_personalized",
}
PENALTY_REASONS: dict[str, str] = {
    "relevance": "low_relevance",
    "recency": "old_content",
    "authority": "low_authority",
    "user_engagement": "low_engagement",
    "content_quality": "low_quality",
    "personalization": "not_personalized",
}

# factor -> ((threshold, phrase), (threshold, phrase)); strongest tier first
EXPLANATION_TIERS: dict[str, tuple[tuple[float, str], ...]] = {
    "relevance": (
        (0.7, "Highly relevant to your search query"),
        (0.4, "Moderately relevant to your search query"),
    ),
    "recency": ((0.8, "Very recent content"), (0.5, "Recent content")),
    "authority": (
        (0.8, "From a highly authoritative source"),
        (0.6, "From a reliable source"),
    ),
    "user_engagement": (
        (0.7, "Matches your interests and preferences"),
        (0.4, "Somewhat matches your preferences"),
    ),
    "content_quality": (
        (0.8, "High-quality, well-structured content"),
        (0.6, "Good quality content"),
    ),
    "personalization": (
        (0.7, "Highly personalized for you"),
        (0.4, "Somewhat personalized"),
    ),
}
DEFAULT_EXPLANATION = "Standard ranking based on relevance"


def weighted_score(factors: RankingFactors, weights: RankingWeights) -> float:
    """Sum of factor x weight, clamped to [0, 1]."""
    score = sum(
        getattr(factors, name) * getattr(weights, name) for name in FACTOR_NAMES
    )
    return min(1.0, max(0.0, score))


def _disabled_reasons(options: RankingOptions) -> set[str]:
    disabled: set[str] = set()
    if not options.boost_recent:
        disabled.add("recent_content")
    if not options.boost_personalized:
        disabled.update({"user_preference_match", "highly_personalized"})
    if not options.boost_high_quality:
        disabled.add("high_quality")
    if not options.penalize_low_engagement:
        disabled.add("low_engagement")
    return disabled


def boost_reasons(factors: RankingFactors, options: RankingOptions) -> list[str]:
    disabled = _disabled_reasons(options)
    return [
        reason for name, reason in BOOST_REASONS.items()
        if getattr(factors, name) > BOOST_THRESHOLD and reason not in disabled
    ]


def penalty_reasons(factors: RankingFactors, options: RankingOptions) -> list[str]:
    disabled = _disabled_reasons(options)
    return [
        reason for name, reason in PENALTY_REASONS.items()
        if getattr(factors, name) < PENALTY_THRESHOLD and reason not in disabled
    ]


def explain(factors: RankingFactors) -> str:
    phrases = []
    for name, tiers in EXPLANATION_TIERS.items():
        value = getattr(factors, name)
        for threshold, phrase in tiers:
            if value > threshold:
                phrases.append(phrase)
                break
    return "; ".join(phrases) if phrases else DEFAULT_EXPLANATION
