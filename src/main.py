# src/main.py — v3
"""CLI entry point: interpret, rank and tag commands.

Usage:
    searchlens interpret "<query>" [--domain financial]
    searchlens rank <results.json> --query "<query>" [--max-results 10]
    searchlens tag <document.json> [--domain technical]

Results are printed to stdout as JSON; logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from searchlens.logging.logger import setup_logging_from_settings
from searchlens.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = _load_settings(args)
        setup_logging_from_settings(settings, args.verbose)
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="searchlens",
        description=f"searchlens v{__version__}: query interpretation, ranking and tagging",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--offline", action="store_true",
        help="Disable the remote intelligence service (local rules only)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- interpret ---
    p_interpret = subparsers.add_parser("interpret", help="Interpret a search query")
    p_interpret.add_argument("query", help="Raw search phrase")
    p_interpret.add_argument(
        "--domain", default="general",
        help="Default domain: business, technical, legal, financial, general",
    )
    p_interpret.add_argument(
        "--max-suggestions", type=int, default=5,
        help="Maximum number of suggestions (default: 5)",
    )
    p_interpret.set_defaults(func=_cmd_interpret)

    # --- rank ---
    p_rank = subparsers.add_parser("rank", help="Rank search results from a JSON file")
    p_rank.add_argument("results_file", type=Path, help="JSON array of search results")
    p_rank.add_argument("-q", "--query", required=True, help="Query the results answer")
    p_rank.add_argument(
        "--max-results", type=int, default=50,
        help="Maximum results returned (default: 50)",
    )
    p_rank.add_argument(
        "--no-explain", action="store_true",
        help="Skip natural-language ranking explanations",
    )
    p_rank.set_defaults(func=_cmd_rank)

    # --- tag ---
    p_tag = subparsers.add_parser("tag", help="Tag a document from a JSON file")
    p_tag.add_argument("document_file", type=Path, help="JSON document object")
    p_tag.add_argument(
        "--domain", default="general",
        help="Domain lexicon: business, technical, legal, financial, general",
    )
    p_tag.add_argument(
        "--min-confidence", type=float, default=0.5,
        help="Drop tags below this confidence (default: 0.5)",
    )
    p_tag.set_defaults(func=_cmd_tag)

    return parser


async def _cmd_interpret(args: argparse.Namespace, settings: Any) -> int:
    from searchlens.api.facade import interpret_query
    from searchlens.api.services import build_services
    from searchlens.query.models import QueryOptions

    options = QueryOptions(domain=args.domain, max_suggestions=args.max_suggestions)
    services = build_services(settings)
    try:
        result = await interpret_query(services, args.query, options)
    finally:
        await services.close()
    _print_json(result.model_dump(mode="json"))
    return 0


async def _cmd_rank(args: argparse.Namespace, settings: Any) -> int:
    from pydantic import TypeAdapter

    from searchlens.api.facade import rank_results
    from searchlens.api.services import build_services
    from searchlens.core.models import SearchResult
    from searchlens.ranking.models import RankingContext, RankingOptions

    results_file: Path = args.results_file
    if not results_file.is_file():
        logger.error("File not found: %s", results_file)
        return 1

    results = TypeAdapter(list[SearchResult]).validate_json(
        results_file.read_text(encoding="utf-8")
    )
    options = RankingOptions(
        max_results=args.max_results, explain_ranking=not args.no_explain
    )
    services = build_services(settings)
    try:
        ranked = await rank_results(
            services, results, RankingContext(query=args.query), options
        )
    finally:
        await services.close()
    _print_json([r.model_dump(mode="json") for r in ranked])
    return 0


async def _cmd_tag(args: argparse.Namespace, settings: Any) -> int:
    from searchlens.api.facade import tag_content
    from searchlens.api.services import build_services
    from searchlens.core.models import Document
    from searchlens.tagging.models import TaggingOptions

    document_file: Path = args.document_file
    if not document_file.is_file():
        logger.error("File not found: %s", document_file)
        return 1

    document = Document.model_validate_json(document_file.read_text(encoding="utf-8"))
    options = TaggingOptions(domain=args.domain, min_confidence=args.min_confidence)
    services = build_services(settings)
    try:
        result = await tag_content(services, document, options)
    finally:
        await services.close()
    _print_json(result.model_dump(mode="json"))
    return 0


def _load_settings(args: argparse.Namespace) -> Any:
    from searchlens.config.settings import load_settings

    overrides: dict[str, Any] = {}
    if args.offline:
        overrides["remote_enabled"] = False
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    return load_settings(**overrides)


def _print_json(payload: Any) -> None:
    json.dump(payload, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


if __name__ == "__main__":
    sys.exit(main())
