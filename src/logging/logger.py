# src/logging/logger.py — v3
"""Log formatting for the ``searchlens`` logger tree.

Every record is stamped with the request context set by ``api.facade``
(request id, public operation, component) so lines emitted deep inside the
gate, the cache or a component can be tied back to the call that caused
them. JSON is the default; the text format is meant for a terminal.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from searchlens.logging.context import get_context

if TYPE_CHECKING:
    from searchlens.config.settings import Settings

_ROOT_LOGGER = "searchlens"
_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "anthropic")


def _record_time(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    Keys: ``timestamp``, ``level``, ``logger``, ``message``; ``context`` when
    a request is in progress; ``data`` when the call site passed
    ``extra={"data": {...}}``; ``exception`` with the formatted traceback.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": _record_time(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = get_context().as_dict()
        if context:
            entry["context"] = context

        data = getattr(record, "data", None)
        if data:
            entry["data"] = data

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """``<time> [LEVEL] <logger> [component] (request) - message``."""

    def format(self, record: logging.LogRecord) -> str:
        context = get_context()
        line = [
            _record_time(record).strftime("%Y-%m-%d %H:%M:%S"),
            f"[{record.levelname:8s}]",
            record.name,
        ]
        if context.component:
            line.append(f"[{context.component}]")
        if context.request_id:
            line.append(f"({context.request_id})")
        line.append(f"- {record.getMessage()}")
        text = " ".join(line)
        if record.exc_info and record.exc_info[1] is not None:
            text += "\n" + self.formatException(record.exc_info)
        return text


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}")


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
    log_file: str | None = None,
    rotation: str = "10MB",
    retention: int = 30,
) -> None:
    """(Re)configure the ``searchlens`` logger.

    Handlers from a previous call are replaced. The console handler writes
    to stderr because the CLI prints its results on stdout.

    Args:
        level: Log level name; unknown names fall back to INFO.
        log_format: "json" or "text".
        log_file: Optional path of a size-rotated log file.
        rotation: Size that triggers rotation, e.g. "10MB".
        retention: Number of rotated files kept.
    """
    root_logger = logging.getLogger(_ROOT_LOGGER)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()

    formatter: logging.Formatter = (
        JsonFormatter() if log_format == "json" else TextFormatter()
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        from searchlens.logging.handlers import create_rotating_handler

        file_handler = create_rotating_handler(
            log_file, rotation=rotation, retention=retention
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def setup_logging_from_settings(settings: Settings, verbose: bool = False) -> None:
    """Apply the ``log_*`` settings; ``verbose`` forces DEBUG."""
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
