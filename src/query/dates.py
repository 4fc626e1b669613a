# src/query/dates.py — v1
"""Date phrase parsing shared by entity and parameter extraction."""

from __future__ import annotations

import calendar
import re
from datetime import datetime, timedelta

MONTH_NAMES = (
    "january", "february", "march", "april", "may", "june", "july",
    "august", "september", "october", "november", "december",
)

MONTH_DATE = re.compile(
    r"\b(?:" + "|".join(MONTH_NAMES) + r")\s+\d{1,2},?\s+\d{4}\b", re.IGNORECASE
)
SLASH_DATE = re.compile(r"\b\d{1,2}/\d{1,2}/\d{4}\b")
ISO_DATE = re.compile(r"\b\d{4}-\d{2}-\d{2}\b")
RELATIVE_DATE = re.compile(
    r"\b(?:yesterday|today|tomorrow|last week|next week|last month"
    r"|next month|last year|next year)\b",
    re.IGNORECASE,
)

DATE_PATTERNS: tuple[re.Pattern[str], ...] = (MONTH_DATE, SLASH_DATE, ISO_DATE, RELATIVE_DATE)


def shift_months(moment: datetime, months: int) -> datetime:
    """Move ``moment`` by whole months, clamping the day to the target month."""
    index = moment.month - 1 + months
    year = moment.year + index // 12
    month = index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def resolve_relative(phrase: str, now: datetime) -> datetime:
    """Anchor a relative date phrase on ``now``."""
    phrase = phrase.lower()
    offsets = {
        "yesterday": timedelta(days=-1),
        "today": timedelta(0),
        "tomorrow": timedelta(days=1),
        "last week": timedelta(days=-7),
        "next week": timedelta(days=7),
    }
    if phrase in offsets:
        return now + offsets[phrase]
    months = {"last month": -1, "next month": 1, "last year": -12, "next year": 12}
    return shift_months(now, months[phrase])


def parse_absolute(text: str, tzinfo=None) -> datetime | None:
    """Parse a month-name, M/D/YYYY or YYYY-MM-DD date, None if invalid."""
    cleaned = " ".join(text.replace(",", " ").split())
    for fmt in ("%B %d %Y", "%m/%d/%Y", "%Y-%m-%d"):
        try:
            return datetime.strptime(cleaned, fmt).replace(tzinfo=tzinfo)
        except ValueError:
            continue
    return None


def normalize_date(text: str, now: datetime) -> str:
    """ISO form of a date phrase; the phrase itself when it cannot be parsed."""
    if RELATIVE_DATE.fullmatch(text):
        return resolve_relative(text, now).isoformat()
    parsed = parse_absolute(text, now.tzinfo)
    return parsed.isoformat() if parsed else text
