# src/tagging/__init__.py — v1
"""Rule-based content tagging."""

from searchlens.tagging.classifier import ContentClassifier
from searchlens.tagging.models import Tag, TaggingOptions, TaggingResult

__all__ = ["ContentClassifier", "Tag", "TaggingOptions", "TaggingResult"]
