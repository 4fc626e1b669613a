# src/ranking/models.py — v1
"""Ranking types: factors, weights, context, options and ranked results."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator

from searchlens.core.models import SearchResult, as_utc, utc_now

FACTOR_NAMES: tuple[str, ...] = (
    "relevance", "recency", "authority",
    "user_engagement", "content_quality", "personalization",
)

UnitFloat = Annotated[float, Field(ge=0.0, le=1.0)]


class RankingFactors(BaseModel):
    """Six independent scores, each in [0, 1]."""

    relevance: UnitFloat
    recency: UnitFloat
    authority: UnitFloat
    user_engagement: UnitFloat
    content_quality: UnitFloat
    personalization: UnitFloat


class RankingWeights(BaseModel):
    """Non-negative weight per factor."""

    relevance: float = Field(default=0.35, ge=0.0)
    recency: float = Field(default=0.15, ge=0.0)
    authority: float = Field(default=0.15, ge=0.0)
    user_engagement: float = Field(default=0.1, ge=0.0)
    content_quality: float = Field(default=0.1, ge=0.0)
    personalization: float = Field(default=0.15, ge=0.0)


class HistoryContext(BaseModel):
    """Results the user recently opened, most recent first."""

    items: list[SearchResult] = Field(default_factory=list)


class PreferenceContext(BaseModel):
    preferred_sources: list[str] = Field(default_factory=list)
    interested_topics: list[str] = Field(default_factory=list)
    skill_level: Literal["beginner", "intermediate", "advanced"] = "intermediate"
    time_availability: Literal["limited", "moderate", "extensive"] = "moderate"


class RankingContext(BaseModel):
    query: str
    search_time: datetime = Field(default_factory=utc_now)
    history: HistoryContext = Field(default_factory=HistoryContext)
    preferences: PreferenceContext = Field(default_factory=PreferenceContext)
    user_tags: list[str] = Field(default_factory=list)
    search_filters: dict[str, str | int | float | bool | None] = Field(default_factory=dict)

    @field_validator("search_time")
    @classmethod
    def normalize_search_time(cls, v: datetime) -> datetime:  # noqa: N805
        return as_utc(v)


class RankingOptions(BaseModel):
    weights: RankingWeights = Field(default_factory=RankingWeights)
    boost_recent: bool = True
    boost_personalized: bool = True
    boost_high_quality: bool = True
    penalize_low_engagement: bool = True
    max_results: int = Field(default=50, ge=0)
    explain_ranking: bool = True


class RankedResult(SearchResult):
    """A search result with its score breakdown. Never mutated after ranking."""

    score: float = Field(ge=0.0, le=1.0)
    factors: RankingFactors
    explanation: str | None = None
    boosted_by: list[str] = Field(default_factory=list)
    penalized_by: list[str] = Field(default_factory=list)


class RankingRecord(BaseModel):
    """Cached full ranking for one query."""

    query: str
    results: list[RankedResult]
    ranked_at: datetime
    source: Literal["remote", "local"] = "local"


class ReasonCount(BaseModel):
    reason: str
    count: int


class RankingStatistics(BaseModel):
    total_queries: int = 0
    average_results_per_query: float = 0.0
    average_score: float = 0.0
    top_boost_reasons: list[ReasonCount] = Field(default_factory=list)
    top_penalty_reasons: list[ReasonCount] = Field(default_factory=list)
