# src/core/text_utils.py — v1
"""Small text helpers shared by the interpreter, ranker and classifier."""

from __future__ import annotations

import re

STOP_WORDS: frozenset[str] = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at",
    "to", "for", "of", "with", "by",
})

_WHITESPACE = re.compile(r"\s+")


def split_words(text: str) -> list[str]:
    """Lowercased whitespace tokens, empty strings dropped."""
    return [w for w in _WHITESPACE.split(text.lower()) if w]


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def jaccard_similarity(text1: str, text2: str) -> float:
    """Word-set Jaccard similarity of two texts, 0.0 when both are empty."""
    words1 = set(split_words(text1))
    words2 = set(split_words(text2))
    union = words1 | words2
    if not union:
        return 0.0
    return len(words1 & words2) / len(union)


def contains_word(text: str, word: str) -> bool:
    """Case-insensitive whole-word match."""
    return re.search(rf"\b{re.escape(word)}\b", text, re.IGNORECASE) is not None
