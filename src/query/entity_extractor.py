# src/query/entity_extractor.py — v1
"""Pattern-based entity extraction.

Each matcher runs independently over the raw query (original casing), so
overlapping matches from different matchers are all kept. Entities come
out grouped by matcher, in match order within a matcher.
"""

from __future__ import annotations

import re
from datetime import datetime

from searchlens.query.dates import DATE_PATTERNS, normalize_date
from searchlens.query.models import Entity, EntityType, Span

DATE_CONFIDENCE = 0.9
METRIC_CONFIDENCE = 0.9
PROJECT_CONFIDENCE = 0.7
DOCUMENT_CONFIDENCE = 0.8

MONEY = re.compile(r"\$[\d,]+(?:\.\d{2})?")
PERCENTAGE = re.compile(r"\b(\d+(?:\.\d+)?)\s*%")
CAPITALIZED_PHRASE = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b")

COMMON_WORDS = frozenset({
    "The", "This", "That", "These", "Those", "A", "An", "And", "Or", "But",
})
DOCUMENT_TYPES = (
    "report", "document", "file", "spreadsheet",
    "presentation", "email", "meeting", "note",
)
_DOCUMENT_PATTERNS = [
    re.compile(rf"\b{doc_type}\b", re.IGNORECASE) for doc_type in DOCUMENT_TYPES
]


def _entity(
    entity_type: EntityType,
    match: re.Match[str],
    confidence: float,
    **metadata: object,
) -> Entity:
    return Entity(
        type=entity_type,
        value=match.group(0),
        confidence=confidence,
        span=Span(start=match.start(), end=match.end()),
        metadata=dict(metadata),
    )


def extract_entities(query: str, now: datetime) -> list[Entity]:
    """Extract date, metric, project and document entities from ``query``."""
    entities: list[Entity] = []

    for pattern in DATE_PATTERNS:
        for match in pattern.finditer(query):
            entities.append(_entity(
                "date", match, DATE_CONFIDENCE,
                normalized_date=normalize_date(match.group(0), now),
            ))

    for match in MONEY.finditer(query):
        entities.append(_entity("metric", match, METRIC_CONFIDENCE, kind="monetary"))

    for match in PERCENTAGE.finditer(query):
        entities.append(_entity("metric", match, METRIC_CONFIDENCE, kind="percentage"))

    for match in CAPITALIZED_PHRASE.finditer(query):
        value = match.group(0)
        if len(value) > 3 and value not in COMMON_WORDS:
            entities.append(_entity("project", match, PROJECT_CONFIDENCE))

    for pattern in _DOCUMENT_PATTERNS:
        for match in pattern.finditer(query):
            entities.append(_entity("document", match, DOCUMENT_CONFIDENCE))

    return entities
