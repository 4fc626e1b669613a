# src/core/models.py — v2
"""Shared Pydantic domain models used across modules.

Search results and taggable documents arrive from the retrieval layer and
from host applications; both are validated once here at the boundary.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so age arithmetic never mixes kinds."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SearchResult(BaseModel):
    """A candidate result returned by a connected source."""

    id: str
    title: str
    content: str = ""
    source: str
    url: str | None = None
    author: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    tags: list[str] = Field(default_factory=list)
    content_type: str | None = None
    visibility: Literal["public", "private", "shared", "restricted"] | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timezone(cls, v: datetime | None) -> datetime | None:  # noqa: N805
        return as_utc(v) if v is not None else None


class Document(BaseModel):
    """A document submitted for content tagging."""

    id: str
    title: str = ""
    content: str = ""
    source: str | None = None
    author: str | None = None
    created_at: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
