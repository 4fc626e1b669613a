# src/query/models.py — v1
"""Query interpretation types."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

IntentType = Literal[
    "search", "question", "command", "comparison",
    "analysis", "creation", "update", "delete",
]
EntityType = Literal[
    "person", "organization", "date", "location", "product",
    "project", "document", "topic", "metric",
]
Domain = Literal["business", "technical", "legal", "financial", "general"]
Urgency = Literal["low", "medium", "high", "urgent"]
Complexity = Literal["simple", "moderate", "complex"]
ExpectedResultType = Literal["document", "data", "analysis", "action", "mixed"]
Scope = Literal["personal", "team", "organization", "public"]

INTENT_TYPES: frozenset[str] = frozenset(get_args(IntentType))
ENTITY_TYPES: frozenset[str] = frozenset(get_args(EntityType))


class Span(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: int
    end: int


class Entity(BaseModel):
    """Typed, confidence-scored substring of a query."""

    model_config = ConfigDict(frozen=True)

    type: EntityType
    value: str
    confidence: float = Field(ge=0.0, le=1.0)
    span: Span
    metadata: dict[str, Any] = Field(default_factory=dict)


class TimeRange(BaseModel):
    start: datetime
    end: datetime
    type: Literal["absolute", "relative"]


class QueryParameters(BaseModel):
    time_range: TimeRange | None = None
    filters: dict[str, Any] = Field(default_factory=dict)
    sort_by: str | None = None
    limit: int | None = None
    scope: Scope | None = None


class QueryContext(BaseModel):
    """Keyword-derived situation of the query."""

    domain: Domain = "general"
    urgency: Urgency = "low"
    complexity: Complexity = "simple"
    expected_result_type: ExpectedResultType = "document"


class OrganizationContext(BaseModel):
    id: str = "default"
    name: str = "Default Organization"
    settings: dict[str, Any] = Field(default_factory=dict)


class SearchContext(BaseModel):
    """Caller-side signals forwarded to the remote service."""

    recent_searches: list[str] = Field(default_factory=list)
    active_integrations: list[str] = Field(default_factory=list)
    organization: OrganizationContext | None = None


class QueryOptions(BaseModel):
    include_suggestions: bool = True
    max_suggestions: int = Field(default=5, ge=0)
    include_filters: bool = True
    include_entities: bool = True
    include_intent: bool = True
    language: str = "en"
    domain: Domain = "general"
    user_id: str | None = None
    organization_id: str | None = None
    context: SearchContext = Field(default_factory=SearchContext)


class QueryIntent(BaseModel):
    type: IntentType = "search"
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    entities: list[Entity] = Field(default_factory=list)
    parameters: QueryParameters = Field(default_factory=QueryParameters)
    context: QueryContext = Field(default_factory=QueryContext)


class Interpretation(BaseModel):
    """Result of ``QueryInterpreter.process``."""

    original_query: str
    intent: QueryIntent = Field(default_factory=QueryIntent)
    processed_query: str = ""
    search_terms: list[str] = Field(default_factory=list)
    filters: dict[str, Any] = Field(default_factory=dict)
    suggestions: list[str] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    processing_time_ms: int = 0
    created_at: datetime
    source: Literal["remote", "local", "empty"] = "local"

    @property
    def intent_type(self) -> IntentType:
        return self.intent.type

    @property
    def entities(self) -> list[Entity]:
        return self.intent.entities

    @property
    def parameters(self) -> QueryParameters:
        return self.intent.parameters
