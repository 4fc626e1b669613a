# src/ranking/__init__.py — v1
"""Six-factor relevance ranking."""

from searchlens.ranking.models import RankedResult, RankingContext, RankingOptions
from searchlens.ranking.ranker import RelevanceRanker

__all__ = ["RankedResult", "RankingContext", "RankingOptions", "RelevanceRanker"]
