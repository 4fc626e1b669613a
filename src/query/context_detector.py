# src/query/context_detector.py — v1
"""Keyword rules for domain, urgency, complexity and expected result type."""

from __future__ import annotations

from searchlens.query.models import (
    Complexity,
    Domain,
    ExpectedResultType,
    QueryContext,
    Urgency,
)

DOMAIN_KEYWORDS: list[tuple[tuple[str, ...], Domain]] = [
    (("budget", "financial", "cost"), "financial"),
    (("legal", "contract", "compliance"), "legal"),
    (("technical", "api", "code"), "technical"),
    (("business", "strategy", "management"), "business"),
]
URGENCY_KEYWORDS: list[tuple[tuple[str, ...], Urgency]] = [
    (("urgent", "asap", "immediately"), "urgent"),
    (("important", "priority", "critical"), "high"),
    (("soon", "quickly"), "medium"),
]
RESULT_TYPE_KEYWORDS: list[tuple[tuple[str, ...], ExpectedResultType]] = [
    (("analyze", "trend", "insight"), "analysis"),
    (("create", "make", "build"), "action"),
    (("data", "numbers", "statistics"), "data"),
]


def _first_match(text: str, table: list[tuple[tuple[str, ...], str]]) -> str | None:
    for keywords, label in table:
        if any(k in text for k in keywords):
            return label
    return None


def determine_complexity(query: str) -> Complexity:
    words = query.split()
    if len(words) > 10:
        return "complex"
    if len(words) > 5:
        return "moderate"
    return "simple"


def determine_context(query: str, default_domain: Domain = "general") -> QueryContext:
    lowered = query.lower()
    return QueryContext(
        domain=_first_match(lowered, DOMAIN_KEYWORDS) or default_domain,
        urgency=_first_match(lowered, URGENCY_KEYWORDS) or "low",
        complexity=determine_complexity(query),
        expected_result_type=_first_match(lowered, RESULT_TYPE_KEYWORDS) or "document",
    )
