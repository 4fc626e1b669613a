# src/tagging/lexicons.py — v1
"""Keyword lexicons for topic, sentiment, action and domain-term tags.

Lexicon entries map a canonical tag name to (confidence, synonyms). A tag
fires when the lowercased content contains the name or any synonym.
"""

from __future__ import annotations

Lexicon = dict[str, tuple[float, tuple[str, ...]]]

BUSINESS_TOPICS: Lexicon = {
    "budget": (0.9, ("financial", "cost", "expense", "revenue")),
    "project": (0.8, ("initiative", "task", "assignment", "work")),
    "meeting": (0.8, ("conference", "discussion", "session", "call")),
    "contract": (0.9, ("agreement", "deal", "arrangement", "terms")),
    "report": (0.7, ("document", "summary", "analysis", "review")),
    "timeline": (0.8, ("schedule", "deadline", "milestone", "delivery")),
    "client": (0.8, ("customer", "buyer", "patron", "stakeholder")),
    "vendor": (0.8, ("supplier", "provider", "contractor", "partner")),
    "invoice": (0.9, ("bill", "statement", "charge", "payment")),
    "proposal": (0.8, ("suggestion", "plan", "recommendation", "offer")),
}

TECHNICAL_TOPICS: Lexicon = {
    "api": (0.9, ("interface", "endpoint", "service")),
    "database": (0.9, ("db", "data", "storage", "sql")),
    "security": (0.8, ("auth", "permission", "access", "encryption")),
    "performance": (0.8, ("speed", "optimization", "efficiency")),
    "deployment": (0.9, ("release", "publish", "launch", "rollout")),
}

FINANCIAL_TOPICS: Lexicon = {
    "revenue": (0.9, ("income", "sales", "earnings")),
    "forecast": (0.8, ("projection", "outlook", "estimate")),
    "audit": (0.9, ("inspection", "verification", "auditor")),
    "investment": (0.8, ("funding", "capital", "portfolio")),
}

LEGAL_TOPICS: Lexicon = {
    "compliance": (0.9, ("regulation", "regulatory", "policy")),
    "liability": (0.8, ("obligation", "indemnity", "exposure")),
    "litigation": (0.9, ("lawsuit", "dispute", "court")),
    "intellectual property": (0.8, ("patent", "trademark", "copyright")),
}

# Extra topic lexicons switched on by TaggingOptions.domain.
DOMAIN_TOPICS: dict[str, Lexicon] = {
    "technical": TECHNICAL_TOPICS,
    "financial": FINANCIAL_TOPICS,
    "legal": LEGAL_TOPICS,
}

POSITIVE_WORDS = (
    "excellent", "great", "good", "successful", "positive",
    "improved", "increased", "achieved", "completed", "satisfied",
)
NEGATIVE_WORDS = (
    "poor", "bad", "failed", "negative", "decreased",
    "problem", "issue", "concern", "risk", "urgent",
)

ACTIONS: Lexicon = {
    "review": (0.8, ("examine", "check", "assess")),
    "approve": (0.9, ("accept", "authorize", "confirm")),
    "complete": (0.8, ("finish", "finalize", "conclude")),
    "schedule": (0.8, ("plan", "arrange", "organize")),
    "submit": (0.9, ("send", "deliver", "provide")),
    "update": (0.7, ("modify", "change", "revise")),
    "create": (0.8, ("generate", "produce", "develop")),
    "delete": (0.9, ("remove", "eliminate", "cancel")),
}

CUSTOM_TERMS: dict[str, tuple[str, ...]] = {
    "financial": (
        "revenue", "profit", "loss", "investment", "budget",
        "expense", "income", "tax", "audit", "compliance",
    ),
    "legal": (
        "contract", "agreement", "liability", "compliance", "regulation",
        "law", "legal", "terms", "conditions", "clause",
    ),
    "technical": (
        "api", "database", "server", "client", "frontend",
        "backend", "deployment", "testing", "debugging", "optimization",
    ),
}
CUSTOM_TERM_CONFIDENCE = 0.8
