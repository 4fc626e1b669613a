# src/resilience/models.py — v1
"""Circuit state owned by a single ResilienceGate."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CircuitStatus(str, Enum):
    """Whether calls are routed to the remote service."""

    CLOSED = "closed"
    OPEN = "open"


@dataclass
class CircuitState:
    """Mutable breaker state. Only the owning gate mutates it."""

    status: CircuitStatus = CircuitStatus.CLOSED
    failure_count: int = 0
    last_failure_at: float | None = None


@dataclass(frozen=True)
class GateStatus:
    """Read-only snapshot for observability."""

    status: CircuitStatus
    failure_count: int
    last_failure_at: float | None
    failure_threshold: int
    cooldown_s: float
    available: bool
