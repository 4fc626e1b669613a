# src/query/parameter_extractor.py — v1
"""Time range, sort, limit, scope and filter extraction."""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Any

from searchlens.core.text_utils import contains_word
from searchlens.query.dates import MONTH_DATE, parse_absolute, shift_months
from searchlens.query.models import QueryParameters, Scope, TimeRange

FILE_TYPES = ("pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "txt", "md", "html")
SOURCES = ("google", "notion", "slack", "github", "confluence", "jira", "asana", "trello")

AUTHOR = re.compile(r"(?:by|from)\s+([a-zA-Z\s]+)", re.IGNORECASE)
LIMIT = re.compile(r"(?:show|display|list)\s+(\d+)", re.IGNORECASE)

SORT_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("newest", "recent"), "date_desc"),
    (("oldest",), "date_asc"),
    (("alphabetical", "a-z"), "title_asc"),
    (("z-a",), "title_desc"),
    (("relevance",), "relevance"),
]
SCOPE_KEYWORDS: list[tuple[tuple[str, ...], Scope]] = [
    (("my", "personal"), "personal"),
    (("team",), "team"),
    (("organization", "company"), "organization"),
    (("public",), "public"),
]


def extract_time_range(query: str, now: datetime) -> TimeRange | None:
    """Relative phrase first ("last week/month/year"), else two month-name dates."""
    lowered = query.lower()
    if "last week" in lowered:
        return TimeRange(start=now - timedelta(days=7), end=now, type="relative")
    if "last month" in lowered:
        return TimeRange(start=shift_months(now, -1), end=now, type="relative")
    if "last year" in lowered:
        return TimeRange(start=shift_months(now, -12), end=now, type="relative")

    dates = [parse_absolute(m.group(0), now.tzinfo) for m in MONTH_DATE.finditer(query)]
    dates = [d for d in dates if d is not None]
    if len(dates) >= 2:
        return TimeRange(start=dates[0], end=dates[1], type="absolute")
    return None


def extract_sort(query: str) -> str | None:
    lowered = query.lower()
    for keywords, sort_key in SORT_KEYWORDS:
        if any(k in lowered for k in keywords):
            return sort_key
    return None


def extract_limit(query: str) -> int | None:
    match = LIMIT.search(query)
    if match:
        limit = int(match.group(1))
        return limit or None
    return None


def extract_scope(query: str) -> Scope | None:
    lowered = query.lower()
    for keywords, scope in SCOPE_KEYWORDS:
        if any(contains_word(lowered, k) for k in keywords):
            return scope
    return None


def extract_filters(query: str, now: datetime) -> dict[str, Any]:
    """File type, source, author and date range filters.

    When several file types or sources appear, the last one in list order
    wins. Values are JSON-ready so cached and fresh results compare equal.
    """
    filters: dict[str, Any] = {}
    lowered = query.lower()

    for file_type in FILE_TYPES:
        if contains_word(lowered, file_type):
            filters["file_type"] = file_type

    for source in SOURCES:
        if source in lowered:
            filters["source"] = source

    author = AUTHOR.search(query)
    if author and author.group(1).strip():
        filters["author"] = author.group(1).strip()

    time_range = extract_time_range(query, now)
    if time_range is not None:
        filters["date_range"] = time_range.model_dump(mode="json")

    return filters


def extract_parameters(
    query: str, now: datetime, include_filters: bool = True
) -> QueryParameters:
    return QueryParameters(
        time_range=extract_time_range(query, now),
        filters=extract_filters(query, now) if include_filters else {},
        sort_by=extract_sort(query),
        limit=extract_limit(query),
        scope=extract_scope(query),
    )
