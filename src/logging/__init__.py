# src/logging/__init__.py — v2
"""Structured logging for searchlens."""

from searchlens.logging.context import (
    clear_context,
    get_context,
    set_component_context,
    set_request_context,
)
from searchlens.logging.logger import get_logger, setup_logging, setup_logging_from_settings

__all__ = [
    "clear_context",
    "get_context",
    "get_logger",
    "set_component_context",
    "set_request_context",
    "setup_logging",
    "setup_logging_from_settings",
]
