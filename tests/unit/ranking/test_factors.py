# tests/unit/ranking/test_factors.py — v1
"""Tests for ranking/factors.py — the six local scoring factors."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from searchlens.core.models import SearchResult
from searchlens.ranking.factors import (
    authority,
    compute_factors,
    content_quality,
    personalization,
    recency,
    relevance,
    user_engagement,
)
from searchlens.ranking.models import HistoryContext, PreferenceContext, RankingContext

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


def _result(**overrides) -> SearchResult:
    fields = {
        "id": "x",
        "title": "Untitled",
        "content": "",
        "source": "unknown",
        "created_at": NOW,
    }
    fields.update(overrides)
    return SearchResult(**fields)


def _context(**overrides) -> RankingContext:
    fields = {"query": "budget planning", "search_time": NOW}
    fields.update(overrides)
    return RankingContext(**fields)


class TestRelevance:
    def test_exact_title_match_saturates(self, recent_result):
        assert relevance(recent_result, "budget planning") == 1.0

    def test_partial_title_match(self, stale_result):
        assert relevance(stale_result, "budget planning") == pytest.approx(0.3)

    def test_content_frequency(self):
        result = _result(content="budget one two three")
        # Word frequency in content plus the whole-query substring bonus.
        assert relevance(result, "budget") == pytest.approx(0.05 + 0.2)

    def test_tag_matches(self):
        result = _result(tags=["budget", "other"])
        assert relevance(result, "budget") == pytest.approx(0.05)

    def test_no_overlap(self):
        assert relevance(_result(content="nothing here"), "budget") == 0.0


class TestRecency:
    @pytest.mark.parametrize(
        ("age", "expected"),
        [
            (timedelta(hours=2), 1.0),
            (timedelta(days=1), 1.0),
            (timedelta(days=3), 0.8),
            (timedelta(days=7), 0.8),
            (timedelta(days=20), 0.6),
            (timedelta(days=60), 0.4),
            (timedelta(days=200), 0.2),
            (timedelta(days=400), 0.1),
        ],
    )
    def test_steps(self, age, expected):
        assert recency(_result(created_at=NOW - age), _context()) == expected

    def test_naive_timestamps_treated_as_utc(self):
        result = _result(created_at=datetime(2026, 3, 15, 10, 0))
        assert recency(result, _context()) == 1.0


class TestAuthority:
    def test_known_and_unknown_sources(self):
        assert authority(_result(source="Google"), _context()) == pytest.approx(0.9)
        assert authority(_result(source="dropbox"), _context()) == pytest.approx(0.5)

    def test_author_in_history(self):
        seen = _result(id="h1", author="Dana")
        context = _context(history=HistoryContext(items=[seen]))
        assert authority(_result(author="Dana"), context) == pytest.approx(0.6)

    def test_long_content_and_trusted_url(self):
        result = _result(
            content=" ".join(["word"] * 600),
            url="https://github.com/acme/repo",
        )
        assert authority(result, _context()) == pytest.approx(0.8)

    def test_clamped(self):
        result = _result(
            source="google",
            content=" ".join(["word"] * 600),
            url="https://docs.google.com/x",
        )
        assert authority(result, _context()) == 1.0


class TestUserEngagement:
    def test_baseline(self):
        assert user_engagement(_result(), _context()) == pytest.approx(0.5)

    def test_history_preference_and_recent_view(self):
        result = _result(id="r9", source="slack", content="quarterly budget review notes")
        context = _context(
            history=HistoryContext(items=[_result(id="r9", content="quarterly budget review")]),
            preferences=PreferenceContext(preferred_sources=["slack"]),
        )
        assert user_engagement(result, context) == pytest.approx(1.0)

    def test_topic_matches(self):
        result = _result(tags=["finance", "hiring"])
        context = _context(preferences=PreferenceContext(interested_topics=["finance"]))
        assert user_engagement(result, context) == pytest.approx(0.55)


class TestContentQuality:
    def test_short_bare_content(self):
        assert content_quality(_result(title="Tiny")) == pytest.approx(0.3)

    def test_rich_content(self):
        result = _result(
            title="Quarterly Budget Plan",
            content="1. Goals\n" + " ".join(["word"] * 600),
            tags=["budget"],
            author="Dana",
            url="https://notion.so/plan",
        )
        assert content_quality(result) == 1.0

    def test_medium_length(self):
        result = _result(content=" ".join(["word"] * 200))
        assert content_quality(result) == pytest.approx(0.6)


class TestPersonalization:
    def test_none(self):
        assert personalization(_result(), _context()) == 0.0

    def test_user_tags_and_preferred_source(self):
        result = _result(tags=["Budget", "misc"], source="notion")
        context = _context(
            user_tags=["budget"],
            preferences=PreferenceContext(preferred_sources=["notion"]),
        )
        assert personalization(result, context) == pytest.approx(0.15 + 0.2)

    def test_history_similarity(self):
        result = _result(content="alpha beta")
        context = _context(history=HistoryContext(items=[_result(id="h", content="alpha beta")]))
        assert personalization(result, context) == pytest.approx(0.4)


class TestComputeFactors:
    def test_all_in_unit_interval(self, recent_result, stale_result):
        for result in (recent_result, stale_result):
            factors = compute_factors(result, _context())
            for value in factors.model_dump().values():
                assert 0.0 <= value <= 1.0

    def test_recent_result_factors(self, recent_result):
        factors = compute_factors(recent_result, _context())
        assert factors.relevance == 1.0
        assert factors.recency == 1.0
        assert factors.authority == pytest.approx(0.9)
        assert factors.user_engagement == pytest.approx(0.5)
        assert factors.content_quality == pytest.approx(0.7)
        assert factors.personalization == 0.0
