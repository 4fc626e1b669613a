# src/query/__init__.py — v1
"""Query interpretation: intent, entities, parameters and search terms."""

from searchlens.query.interpreter import QueryInterpreter
from searchlens.query.models import Interpretation, QueryOptions

__all__ = ["Interpretation", "QueryInterpreter", "QueryOptions"]
