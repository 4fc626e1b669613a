# src/tagging/models.py — v1
"""Content tagging types."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

TagCategory = Literal["topic", "sentiment", "entity", "action", "custom"]
TaggingDomain = Literal["business", "technical", "legal", "financial", "general"]


class Tag(BaseModel):
    """Descriptive label, unique per (name, category) within one result."""

    name: str
    category: TagCategory
    confidence: float = Field(ge=0.0, le=1.0)
    description: str | None = None


class TaggingOptions(BaseModel):
    include_topics: bool = True
    include_sentiment: bool = True
    include_entities: bool = True
    include_actions: bool = True
    include_custom_tags: bool = True
    max_tags: int = Field(default=20, ge=0)
    min_confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    language: str = "en"
    domain: TaggingDomain = "general"


class TaggingResult(BaseModel):
    document_id: str
    tags: list[Tag] = Field(default_factory=list)
    overall_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    tag_density: float = Field(default=0.0, ge=0.0)
    word_count: int = 0
    category_distribution: dict[str, int] = Field(default_factory=dict)
    processing_time_ms: int = 0
    created_at: datetime


class TagCount(BaseModel):
    name: str
    count: int
    average_confidence: float


class TaggingStatistics(BaseModel):
    total_documents: int = 0
    total_tags: int = 0
    average_tags_per_document: float = 0.0
    average_confidence: float = 0.0
    category_distribution: dict[str, int] = Field(default_factory=dict)
    most_common_tags: list[TagCount] = Field(default_factory=list)
