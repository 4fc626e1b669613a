# src/llm/models.py — v2
"""Remote-service types: chat messages, normalized responses and the
JSON schemas the intelligence service must answer with."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class Message(BaseModel):
    """Single message in a conversation."""

    role: Literal["user", "assistant", "system"]
    content: str


class LLMResponse(BaseModel):
    """Normalized response from any LLM provider."""

    content: str
    input_tokens: int = 0
    output_tokens: int = 0
    model: str
    provider: str
    latency_ms: int = 0
    raw_response: Any = None


# --- Remote response schemas ---


class RemoteIntent(BaseModel):
    type: str
    category: str = "general"
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)


class RemoteEntity(BaseModel):
    type: str
    value: str
    confidence: float = Field(default=0.8, ge=0.0, le=1.0)


class RemoteQueryResponse(BaseModel):
    """Intent classification returned by the remote service."""

    processed_query: str = ""
    intent: RemoteIntent
    entities: list[RemoteEntity] = Field(default_factory=list)
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)


class RemoteRankedItem(BaseModel):
    id: str
    relevance_score: float = Field(ge=0.0, le=1.0)
    ranking_reason: str = ""


class RemoteRankingResponse(BaseModel):
    """Per-result relevance scores returned by the remote service."""

    ranked_results: list[RemoteRankedItem]
    ranking_explanation: str = ""
