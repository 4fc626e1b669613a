# src/query/intent_rules.py — v1
"""Rule-based intent classification.

Rules are tested in order against the query and the first match wins, so a
query like "create a new report" is a ``command`` (command verbs are checked
before the creation group). Pure functions; no state.
"""

from __future__ import annotations

import re

from searchlens.query.models import Entity, IntentType

INTENT_RULES: list[tuple[IntentType, re.Pattern[str]]] = [
    ("question", re.compile(
        r"\b(what|how|when|where|why|who|which|can|could|would|should"
        r"|is|are|was|were|do|does|did)\b", re.IGNORECASE)),
    ("command", re.compile(
        r"\b(show|find|get|list|display|create|make|build|generate"
        r"|delete|remove|update|edit|modify)\b", re.IGNORECASE)),
    ("comparison", re.compile(
        r"\b(compare|versus|vs|difference|between|against)\b", re.IGNORECASE)),
    ("analysis", re.compile(
        r"\b(analyze|analysis|trend|pattern|insight|summary|report"
        r"|statistics|metrics)\b", re.IGNORECASE)),
    ("creation", re.compile(
        r"\b(create|make|build|generate|new|add|insert)\b", re.IGNORECASE)),
    ("update", re.compile(
        r"\b(update|edit|modify|change|revise|amend)\b", re.IGNORECASE)),
    ("delete", re.compile(
        r"\b(delete|remove|eliminate|cancel|archive)\b", re.IGNORECASE)),
]

# Substring indicators that raise confidence in the chosen intent.
INTENT_INDICATORS: dict[str, tuple[str, ...]] = {
    "question": ("what", "how", "when", "where", "why", "who", "which"),
    "command": ("show", "find", "get", "list", "create", "delete"),
    "comparison": ("compare", "versus", "vs", "difference"),
    "analysis": ("analyze", "trend", "pattern", "insight"),
}

BASE_CONFIDENCE = 0.5
INDICATOR_BONUS = 0.1
ENTITY_BONUS = 0.05
LOCAL_TRUST_FACTOR = 0.7
LOCAL_CONFIDENCE_FLOOR = 0.3


def classify_intent(query: str) -> IntentType:
    """Return the first intent whose rule matches, ``search`` otherwise."""
    lowered = query.lower()
    for intent, pattern in INTENT_RULES:
        if pattern.search(lowered):
            return intent
    return "search"


def intent_confidence(query: str, intent: str, entities: list[Entity]) -> float:
    lowered = query.lower()
    indicators = INTENT_INDICATORS.get(intent, ())
    hits = sum(1 for indicator in indicators if indicator in lowered)
    confidence = BASE_CONFIDENCE + hits * INDICATOR_BONUS + len(entities) * ENTITY_BONUS
    return min(1.0, confidence)


def local_intent_confidence(query: str, intent: str, entities: list[Entity]) -> float:
    """Confidence of a locally classified intent, scaled for lower trust."""
    scaled = intent_confidence(query, intent, entities) * LOCAL_TRUST_FACTOR
    return max(LOCAL_CONFIDENCE_FLOOR, scaled)


def overall_confidence(
    intent_conf: float,
    search_terms: list[str],
    filters: dict,
    entities: list[Entity],
) -> float:
    confidence = intent_conf
    if len(search_terms) > 2:
        confidence += 0.1
    if filters:
        confidence += 0.1
    if entities:
        confidence += 0.1
    return min(1.0, confidence)
