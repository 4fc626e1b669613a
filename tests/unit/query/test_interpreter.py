# tests/unit/query/test_interpreter.py — v1
"""Tests for query/interpreter.py — remote/local intent, caching and blank queries."""

from __future__ import annotations

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest

from searchlens.cache.memory_store import MemoryKeyValueStore
from searchlens.cache.store import CacheStore
from searchlens.query.interpreter import QueryInterpreter, clean_query, extract_search_terms
from searchlens.query.models import QueryOptions
from searchlens.resilience.gate import ResilienceGate
from searchlens.resilience.models import CircuitStatus

QUERY = "Q4 budget planning last week"


def _remote_answer(intent_type: str = "search", **extra) -> dict:
    answer = {
        "processed_query": "budget planning",
        "intent": {"type": intent_type, "category": "financial", "confidence": 0.9},
        "entities": [
            {"type": "date", "value": "last week", "confidence": 0.95},
            {"type": "colour", "value": "blue", "confidence": 0.5},
        ],
        "confidence": 0.9,
    }
    answer.update(extra)
    return answer


@pytest.fixture
def local_interpreter(gate, cache_store, clock) -> QueryInterpreter:
    return QueryInterpreter(gate, cache_store, client=None, clock=clock)


@pytest.fixture
def remote_interpreter(gate, cache_store, intelligence, clock) -> QueryInterpreter:
    return QueryInterpreter(gate, cache_store, client=intelligence, clock=clock)


class TestHelpers:
    def test_clean_query_drops_stop_words(self):
        assert clean_query("  the budget  for the team ") == "budget team"

    def test_search_terms(self):
        assert extract_search_terms("Q4 budget planning") == ["budget", "planning"]


class TestLocalInterpretation:
    @pytest.mark.asyncio
    async def test_budget_scenario(self, local_interpreter, clock):
        result = await local_interpreter.process(QUERY)

        assert result.source == "local"
        assert result.intent_type == "search"
        assert [e.value for e in result.entities] == ["last week"]
        assert result.entities[0].type == "date"
        time_range = result.parameters.time_range
        assert time_range.type == "relative"
        assert time_range.end - time_range.start == timedelta(days=7)
        assert result.intent.context.domain == "financial"
        assert result.search_terms == ["budget", "planning", "last", "week"]
        assert "date_range" in result.filters
        assert result.confidence == pytest.approx(0.685)
        assert result.suggestions[-1] == "Find documents from last week"

    @pytest.mark.asyncio
    async def test_deterministic(self, gate, clock):
        first = QueryInterpreter(gate, CacheStore(MemoryKeyValueStore(), clock=clock), clock=clock)
        second = QueryInterpreter(gate, CacheStore(MemoryKeyValueStore(), clock=clock), clock=clock)
        a = await first.process(QUERY)
        b = await second.process(QUERY)
        assert a.model_dump(exclude={"processing_time_ms"}) == b.model_dump(
            exclude={"processing_time_ms"}
        )

    @pytest.mark.asyncio
    async def test_options_disable_parts(self, local_interpreter):
        options = QueryOptions(
            include_entities=False, include_filters=False, include_suggestions=False
        )
        result = await local_interpreter.process(QUERY, options)
        assert result.entities == []
        assert result.filters == {}
        assert result.parameters.filters == {}
        assert result.suggestions == []

    @pytest.mark.asyncio
    async def test_default_domain_option(self, local_interpreter):
        result = await local_interpreter.process("weekly notes", QueryOptions(domain="legal"))
        assert result.intent.context.domain == "legal"


class TestBlankQuery:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   ", "\n\t"])
    async def test_blank_short_circuits(self, remote_interpreter, gate, kv_store, mock_llm_client, query):
        with patch.object(gate, "execute_with_fallback", AsyncMock()) as execute:
            result = await remote_interpreter.process(query)

        assert result.source == "empty"
        assert result.confidence == 0.0
        assert result.search_terms == []
        execute.assert_not_called()
        mock_llm_client.complete.assert_not_called()
        assert await kv_store.keys() == []


class TestCaching:
    @pytest.mark.asyncio
    async def test_second_call_served_from_cache(self, remote_interpreter, respond):
        llm = respond(_remote_answer(), _remote_answer())
        first = await remote_interpreter.process(QUERY)
        second = await remote_interpreter.process(QUERY)
        assert first == second
        assert llm.complete.await_count == 1

    @pytest.mark.asyncio
    async def test_different_options_are_separate_entries(self, local_interpreter, kv_store):
        await local_interpreter.process(QUERY)
        await local_interpreter.process(QUERY, QueryOptions(max_suggestions=1))
        assert len(await kv_store.keys()) == 2

    @pytest.mark.asyncio
    async def test_cache_statistics_and_clear(self, local_interpreter, cache_store):
        await local_interpreter.process(QUERY)
        await local_interpreter.process("quarterly roadmap")
        await cache_store.set("tagging:doc", {"tags": []}, ttl_s=None)

        stats = await local_interpreter.cache_statistics()
        assert stats.item_count == 2
        assert 0 < stats.used_bytes < (await cache_store.stats()).used_bytes

        assert await local_interpreter.clear_cache() == 2
        assert (await local_interpreter.cache_statistics()).item_count == 0
        assert (await cache_store.stats()).item_count == 1

    @pytest.mark.asyncio
    async def test_expired_entry_recomputed(self, remote_interpreter, respond, clock):
        llm = respond(_remote_answer(), _remote_answer())
        await remote_interpreter.process(QUERY)
        clock.advance(3601)
        await remote_interpreter.process(QUERY)
        assert llm.complete.await_count == 2


class TestRemoteInterpretation:
    @pytest.mark.asyncio
    async def test_remote_intent_mapped(self, remote_interpreter, respond):
        respond(_remote_answer())
        result = await remote_interpreter.process(QUERY)

        assert result.source == "remote"
        assert result.intent.confidence == pytest.approx(0.9)
        # Unknown entity types are dropped.
        assert [e.value for e in result.entities] == ["last week"]
        assert (result.entities[0].span.start, result.entities[0].span.end) == (19, 28)
        assert result.parameters.time_range is not None
        assert result.confidence == 1.0

    @pytest.mark.asyncio
    async def test_remote_entity_outside_query_dropped(self, remote_interpreter, respond):
        respond(_remote_answer(entities=[
            {"type": "date", "value": "Last Week", "confidence": 0.9},
            {"type": "project", "value": "Apollo", "confidence": 0.8},
        ]))
        result = await remote_interpreter.process(QUERY)

        assert [e.value for e in result.entities] == ["Last Week"]
        assert (result.entities[0].span.start, result.entities[0].span.end) == (19, 28)

    @pytest.mark.asyncio
    async def test_unknown_intent_falls_back(self, remote_interpreter, respond, gate):
        respond(_remote_answer(intent_type="purchase"))
        result = await remote_interpreter.process(QUERY)
        assert result.source == "local"
        assert result.intent_type == "search"
        assert gate.state.failure_count == 1

    @pytest.mark.asyncio
    async def test_malformed_answer_falls_back(self, remote_interpreter, respond, gate):
        respond("not json at all")
        result = await remote_interpreter.process(QUERY)
        assert result.source == "local"
        assert gate.state.failure_count == 1

    @pytest.mark.asyncio
    async def test_include_intent_false_skips_remote(self, remote_interpreter, mock_llm_client):
        result = await remote_interpreter.process(QUERY, QueryOptions(include_intent=False))
        assert result.source == "local"
        mock_llm_client.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_gate_opens_after_repeated_failures(self, remote_interpreter, respond, gate):
        llm = respond(*[ConnectionError("connection refused")] * 4)
        for query in ("budget one", "budget two", "budget three"):
            assert (await remote_interpreter.process(query)).source == "local"
        assert gate.state.status is CircuitStatus.OPEN

        result = await remote_interpreter.process("budget four")
        assert result.source == "local"
        assert llm.complete.await_count == 3

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self, cache_store, intelligence, mock_llm_client, clock):
        async def slow(*args, **kwargs):
            await asyncio.sleep(5)

        mock_llm_client.complete.side_effect = slow
        gate = ResilienceGate(clock=clock)
        interpreter = QueryInterpreter(
            gate, cache_store, client=intelligence, remote_timeout_s=0.01, clock=clock
        )
        result = await interpreter.process(QUERY)
        assert result.source == "local"
        assert gate.state.failure_count == 1
