# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides a controllable clock, an in-memory cache, a resilience gate, a
mock LLM client and sample search results / documents.
No external dependencies — all I/O is mocked.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from searchlens.cache.memory_store import MemoryKeyValueStore
from searchlens.cache.store import CacheStore
from searchlens.core.models import Document, SearchResult
from searchlens.llm.intelligence import IntelligenceClient
from searchlens.llm.models import LLMResponse
from searchlens.resilience.gate import ResilienceGate

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable epoch-seconds clock that only moves when told to."""

    def __init__(self, start: datetime = NOW) -> None:
        self.now = start.timestamp()

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def llm_response(payload: object) -> LLMResponse:
    """Wrap a JSON-serializable payload (or raw text) as an LLMResponse."""
    content = payload if isinstance(payload, str) else json.dumps(payload)
    return LLMResponse(content=content, model="mock-model", provider="mock")


# === FIXTURES: Infrastructure ===


@pytest.fixture
def clock() -> FakeClock:
    """Clock frozen at 2026-03-15 12:00 UTC."""
    return FakeClock()


@pytest.fixture
def kv_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def cache_store(kv_store: MemoryKeyValueStore, clock: FakeClock) -> CacheStore:
    """CacheStore with default 5 MB / 1000 item budget."""
    return CacheStore(kv_store, clock=clock)


@pytest.fixture
def gate(clock: FakeClock) -> ResilienceGate:
    """Gate with threshold 3 and a 300s cooldown."""
    return ResilienceGate(failure_threshold=3, cooldown_s=300.0, clock=clock)


@pytest.fixture
def mock_llm_client() -> AsyncMock:
    """Mock LLM client answering with an empty JSON object."""
    client = AsyncMock()
    client.provider_name = "mock"
    client.complete.return_value = llm_response({})
    return client


@pytest.fixture
def intelligence(mock_llm_client: AsyncMock) -> IntelligenceClient:
    """Intelligence client over the mock LLM, with retries disabled."""
    return IntelligenceClient(mock_llm_client, max_retries=0)


# === FIXTURES: Sample data ===


@pytest.fixture
def recent_result() -> SearchResult:
    """Fresh, well-titled result that matches "budget planning" exactly."""
    return SearchResult(
        id="r1",
        title="Budget Planning Guide",
        content="How to approach budget planning for the next fiscal quarter.",
        source="notion",
        url="https://notion.so/budget-planning",
        author="Dana Lee",
        created_at=NOW - timedelta(hours=2),
        tags=["budget", "planning"],
    )


@pytest.fixture
def stale_result() -> SearchResult:
    """Old result that only partially matches "budget planning"."""
    return SearchResult(
        id="r2",
        title="Planning",
        content="General notes.",
        source="trello",
        created_at=NOW - timedelta(days=400),
    )


@pytest.fixture
def sample_results(recent_result: SearchResult, stale_result: SearchResult) -> list[SearchResult]:
    return [stale_result, recent_result]


@pytest.fixture
def sample_document() -> Document:
    """Business document with positive and negative wording."""
    return Document(
        id="doc-1",
        title="Q1 review",
        content=(
            "The budget review meeting went well. Revenue increased and the "
            "project was completed. One risk remains: the vendor contract "
            "expires March 31, 2026 and costs $12,500. Please review and approve."
        ),
        source="confluence",
        author="Sam Ortiz",
    )


@pytest.fixture
def respond(mock_llm_client: AsyncMock):
    """Script the mock LLM: each argument is one answer (payload or exception)."""

    def _script(*answers: object) -> AsyncMock:
        mock_llm_client.complete.side_effect = [
            a if isinstance(a, Exception) else llm_response(a) for a in answers
        ]
        return mock_llm_client

    return _script
