# src/llm/intelligence.py — v1
"""Remote intelligence client: query interpretation and result ranking.

Builds prompts from the templates in ``llm/prompts/``, sends them through a
``BaseLLMClient`` with retry, and validates the JSON answer against the
response schemas. Every failure surfaces as a ``RemoteServiceError``
subclass; the caller (always behind a resilience gate) decides what to do.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Sequence

from pydantic import BaseModel, ValidationError

from searchlens.llm.errors import RemoteSchemaError
from searchlens.llm.models import (
    LLMResponse,
    Message,
    RemoteQueryResponse,
    RemoteRankingResponse,
)
from searchlens.llm.retry import retry_configs_for, with_retry

if TYPE_CHECKING:
    from searchlens.config.settings import Settings
    from searchlens.core.models import SearchResult
    from searchlens.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

_PROMPT_DIR = Path(__file__).parent / "prompts"

QUERY_SYSTEM_PROMPT = (
    "You are an AI assistant that processes search queries to understand "
    "user intent and extract relevant entities."
)
RANKING_SYSTEM_PROMPT = (
    "You are an AI assistant that ranks search results based on their "
    "relevance to a user query."
)

RESULT_SUMMARY_CHARS = 200
HISTORY_TITLES_IN_PROMPT = 10


class IntelligenceClient:
    """Typed facade over the remote LLM for the two remote operations."""

    def __init__(
        self,
        llm: BaseLLMClient,
        max_tokens: int = 2048,
        temperature: float = 0.2,
        max_retries: int = 2,
    ) -> None:
        self._llm = llm
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._retry_configs = retry_configs_for(max_retries)
        self._templates: dict[str, str] = {}

    @classmethod
    def from_settings(cls, settings: Settings, llm: BaseLLMClient) -> IntelligenceClient:
        return cls(
            llm,
            max_tokens=settings.remote_max_tokens,
            temperature=settings.remote_temperature,
            max_retries=settings.remote_max_retries,
        )

    @property
    def provider_name(self) -> str:
        return self._llm.provider_name

    async def interpret_query(
        self,
        query: str,
        user_id: str | None = None,
        organization_id: str | None = None,
        recent_searches: Sequence[str] = (),
        connected_sources: Sequence[str] = (),
        organization_context: dict[str, Any] | None = None,
    ) -> RemoteQueryResponse:
        """Ask the remote service for intent and entities of ``query``.

        Raises:
            RemoteRetryExhausted: Transport failure after retries.
            RemoteSchemaError: Answer is not the expected JSON object.
        """
        prompt = self._load_template("query_interpretation").format(
            query=query,
            user_id=user_id or "anonymous",
            organization_id=organization_id or "none",
            recent_searches=", ".join(recent_searches) or "none",
            connected_sources=", ".join(connected_sources) or "none",
            organization_context=json.dumps(organization_context or {}, default=str),
        )
        response = await self._call(prompt, QUERY_SYSTEM_PROMPT, "query_interpretation")
        return self._parse(response.content, RemoteQueryResponse)

    async def rank_results(
        self,
        query: str,
        results: Sequence[SearchResult],
        history: Sequence[SearchResult] = (),
        preferred_sources: Sequence[str] = (),
    ) -> RemoteRankingResponse:
        """Ask the remote service for a relevance score per result.

        Raises:
            RemoteRetryExhausted: Transport failure after retries.
            RemoteSchemaError: Answer is not the expected JSON object.
        """
        prompt = self._load_template("result_ranking").format(
            query=query,
            results=self._summarize_results(results),
            history=", ".join(h.title for h in history[:HISTORY_TITLES_IN_PROMPT]) or "none",
            preferred_sources=", ".join(preferred_sources) or "none",
        )
        response = await self._call(prompt, RANKING_SYSTEM_PROMPT, "result_ranking")
        return self._parse(response.content, RemoteRankingResponse)

    # --- Internal helpers ---

    async def _call(self, prompt: str, system: str, operation: str) -> LLMResponse:
        response: LLMResponse = await with_retry(
            self._llm.complete,
            [Message(role="user", content=prompt)],
            system=system,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
            operation=operation,
            retry_configs=self._retry_configs,
        )
        logger.debug(
            "Remote %s answered in %dms (%d in / %d out tokens)",
            operation, response.latency_ms, response.input_tokens, response.output_tokens,
        )
        return response

    def _load_template(self, name: str) -> str:
        if name not in self._templates:
            path = _PROMPT_DIR / f"{name}.txt"
            self._templates[name] = path.read_text(encoding="utf-8")
        return self._templates[name]

    @staticmethod
    def _summarize_results(results: Sequence[SearchResult]) -> str:
        lines = []
        for index, result in enumerate(results, start=1):
            lines.append(
                f"{index}. [id={result.id}] {result.title}\n"
                f"   Source: {result.source}\n"
                f"   Content: {result.content[:RESULT_SUMMARY_CHARS]}..."
            )
        return "\n\n".join(lines)

    @staticmethod
    def _parse(content: str, schema: type[BaseModel]) -> Any:
        text = content.strip()
        if text.startswith("```"):
            lines = text.split("\n")
            lines = [ln for ln in lines if not ln.strip().startswith("```")]
            text = "\n".join(lines)
        if not text:
            raise RemoteSchemaError(f"Empty response for {schema.__name__}")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise RemoteSchemaError(f"Response is not JSON: {e}") from e
        try:
            return schema.model_validate(data)
        except ValidationError as e:
            raise RemoteSchemaError(
                f"Response does not match {schema.__name__}: {e.error_count()} errors"
            ) from e
