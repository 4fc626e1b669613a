# src/query/suggestions.py — v1
"""Follow-up query suggestions."""

from __future__ import annotations

from searchlens.query.models import Entity, QueryIntent

INTENT_SUGGESTIONS: dict[str, list[str]] = {
    "question": [
        "What are the key points in this document?",
        "How can I improve this process?",
        "What are the next steps?",
        "Who is responsible for this task?",
    ],
    "command": [
        "Show me recent documents",
        "Find all budget-related files",
        "List team meeting notes",
        "Display project status reports",
    ],
    "analysis": [
        "Analyze spending trends",
        "Compare performance metrics",
        "Generate summary report",
        "Identify key insights",
    ],
}
GENERAL_SUGGESTIONS = [
    "Search for similar documents",
    "Find related content",
    "Browse recent activity",
    "Explore trending topics",
]
DOMAIN_SUGGESTIONS: dict[str, list[str]] = {
    "financial": ["Budget analysis", "Expense reports", "Financial planning"],
    "technical": ["API documentation", "Code reviews", "Technical specifications"],
    "legal": ["Contract reviews", "Compliance reports", "Legal documents"],
    "business": ["Strategy documents", "Business plans", "Market analysis"],
}


def entity_suggestions(entities: list[Entity]) -> list[str]:
    suggestions = []
    for entity in entities:
        if entity.type == "date":
            suggestions.append(f"Find documents from {entity.value}")
        elif entity.type == "project":
            suggestions.append(f"Show all {entity.value} related content")
        elif entity.type == "document":
            suggestions.append(f"Find {entity.value} files")
    return suggestions


def generate_suggestions(intent: QueryIntent, max_suggestions: int) -> list[str]:
    """Intent, entity and domain suggestions, in that order, truncated."""
    suggestions = list(INTENT_SUGGESTIONS.get(intent.type, GENERAL_SUGGESTIONS))
    suggestions.extend(entity_suggestions(intent.entities))
    suggestions.extend(DOMAIN_SUGGESTIONS.get(intent.context.domain, []))
    return suggestions[:max_suggestions]
