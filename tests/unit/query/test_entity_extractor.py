# tests/unit/query/test_entity_extractor.py — v1
"""Tests for query/entity_extractor.py and query/dates.py."""

from __future__ import annotations

from datetime import datetime, timezone

from searchlens.query.dates import normalize_date, parse_absolute, shift_months
from searchlens.query.entity_extractor import extract_entities

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


def _by_type(entities, entity_type):
    return [e for e in entities if e.type == entity_type]


class TestDateEntities:
    def test_relative_phrase(self):
        entities = extract_entities("Q4 budget planning last week", NOW)
        assert len(entities) == 1
        date = entities[0]
        assert date.type == "date"
        assert date.value == "last week"
        assert (date.span.start, date.span.end) == (19, 28)
        assert date.confidence == 0.9
        assert date.metadata["normalized_date"] == "2026-03-08T12:00:00+00:00"

    def test_month_name_date(self):
        dates = _by_type(extract_entities("minutes from March 5, 2026", NOW), "date")
        assert [d.value for d in dates] == ["March 5, 2026"]
        assert dates[0].metadata["normalized_date"] == "2026-03-05T00:00:00+00:00"

    def test_slash_and_iso_dates(self):
        dates = _by_type(extract_entities("from 03/01/2026 to 2026-04-01", NOW), "date")
        assert [d.value for d in dates] == ["03/01/2026", "2026-04-01"]
        assert dates[1].metadata["normalized_date"] == "2026-04-01T00:00:00+00:00"

    def test_unparseable_date_keeps_text(self):
        dates = _by_type(extract_entities("due 13/45/2026", NOW), "date")
        assert dates[0].metadata["normalized_date"] == "13/45/2026"


class TestOtherEntities:
    def test_metrics(self):
        metrics = _by_type(extract_entities("spend rose 15% to $1,200.50", NOW), "metric")
        kinds = {m.value: m.metadata["kind"] for m in metrics}
        assert kinds == {"$1,200.50": "monetary", "15%": "percentage"}

    def test_capitalized_project(self):
        projects = _by_type(extract_entities("status of Apollo Launch", NOW), "project")
        assert [p.value for p in projects] == ["Apollo Launch"]
        assert projects[0].confidence == 0.7

    def test_common_and_short_words_skipped(self):
        assert _by_type(extract_entities("The plan for Ops", NOW), "project") == []

    def test_document_types(self):
        docs = _by_type(extract_entities("latest Spreadsheet and email", NOW), "document")
        assert sorted(d.value for d in docs) == ["Spreadsheet", "email"]

    def test_spans_point_into_query(self):
        query = "budget report for Apollo Launch"
        for entity in extract_entities(query, NOW):
            assert query[entity.span.start:entity.span.end] == entity.value

    def test_no_entities(self):
        assert extract_entities("quarterly numbers", NOW) == []


class TestDates:
    def test_shift_months_clamps_day(self):
        moment = datetime(2026, 3, 31, tzinfo=timezone.utc)
        assert shift_months(moment, -1) == datetime(2026, 2, 28, tzinfo=timezone.utc)

    def test_shift_months_across_year(self):
        moment = datetime(2026, 1, 10, tzinfo=timezone.utc)
        assert shift_months(moment, -12) == datetime(2025, 1, 10, tzinfo=timezone.utc)

    def test_parse_absolute_invalid(self):
        assert parse_absolute("February 30, 2026") is None

    def test_normalize_relative(self):
        assert normalize_date("tomorrow", NOW) == "2026-03-16T12:00:00+00:00"
        assert normalize_date("last year", NOW) == "2025-03-15T12:00:00+00:00"
