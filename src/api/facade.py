# src/api/facade.py — v2
"""Public API facade: the three inbound operations.

Usage:
    from searchlens.api.services import build_services
    from searchlens.api.facade import interpret_query

    services = build_services()
    interpretation = await interpret_query(services, "Q4 budget last week")
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Sequence

from searchlens.logging.context import set_component_context, set_request_context
from searchlens.query.models import Interpretation, QueryOptions
from searchlens.ranking.models import RankedResult, RankingContext, RankingOptions
from searchlens.tagging.models import TaggingOptions, TaggingResult

if TYPE_CHECKING:
    from searchlens.api.services import SearchServices
    from searchlens.core.models import Document, SearchResult

logger = logging.getLogger(__name__)


def _begin(operation: str, component: str, request_id: str | None) -> str:
    request_id = request_id or uuid.uuid4().hex[:12]
    set_request_context(request_id, operation)
    set_component_context(component)
    logger.debug("Request %s started: %s", request_id, operation)
    return request_id


async def interpret_query(
    services: SearchServices,
    query: str,
    options: QueryOptions | None = None,
    request_id: str | None = None,
) -> Interpretation:
    """Classify intent and extract entities, parameters and search terms."""
    _begin("interpret_query", "query", request_id)
    return await services.interpreter.process(query, options)


async def rank_results(
    services: SearchServices,
    results: Sequence[SearchResult],
    context: RankingContext,
    options: RankingOptions | None = None,
    request_id: str | None = None,
) -> list[RankedResult]:
    """Order candidate results by six-factor score."""
    _begin("rank_results", "ranking", request_id)
    return await services.ranker.rank(results, context, options)


async def tag_content(
    services: SearchServices,
    document: Document,
    options: TaggingOptions | None = None,
    request_id: str | None = None,
) -> TaggingResult:
    """Tag one document, reusing a cached result for identical options."""
    _begin("tag_content", "tagging", request_id)
    return await services.classifier.tag(document, options)
