# src/logging/context.py — v2
"""Contextual logging support: attach request_id, operation and component to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per inbound call.
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)
_component: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "component", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    operation: str | None = None
    component: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        operation=_operation.get(),
        component=_component.get(),
    )


def set_request_context(request_id: str, operation: str | None = None) -> None:
    """Set request-level context (called once per facade call)."""
    _request_id.set(request_id)
    _operation.set(operation)


def set_component_context(component: str) -> None:
    """Set the component currently handling the request."""
    _component.set(component)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _operation.set(None)
    _component.set(None)
