# src/__init__.py — v1
"""searchlens: query interpretation, relevance ranking and content tagging."""

from searchlens.version import __version__

__all__ = ["__version__"]
