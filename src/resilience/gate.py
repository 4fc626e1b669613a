# src/resilience/gate.py — v2
"""Circuit breaker guarding every call to the remote intelligence service.

While Closed, ``primary`` is awaited; any exception (including a timeout)
counts as a failure and the synchronous ``fallback`` answers instead. After
``failure_threshold`` consecutive failures the gate opens and skips
``primary`` entirely until ``cooldown_s`` has elapsed, at which point it
closes again with a zeroed failure count. A single success resets the count.
Outcomes of calls still in flight when the gate opened are ignored, so the
cooldown stays anchored at the opening failure.

The gate never retries; retry policy belongs to the caller of ``primary``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import replace
from typing import TYPE_CHECKING, Awaitable, Callable, TypeVar

from searchlens.resilience.models import CircuitState, CircuitStatus, GateStatus

if TYPE_CHECKING:
    from searchlens.config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_FAILURE_THRESHOLD = 3
DEFAULT_COOLDOWN_S = 300.0


class ResilienceGate:
    """Circuit breaker with deterministic fallback."""

    def __init__(
        self,
        failure_threshold: int = DEFAULT_FAILURE_THRESHOLD,
        cooldown_s: float = DEFAULT_COOLDOWN_S,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be >= 1")
        self._failure_threshold = failure_threshold
        self._cooldown_s = cooldown_s
        self._clock = clock
        self._state = CircuitState()

    @classmethod
    def from_settings(
        cls, settings: Settings, clock: Callable[[], float] = time.time
    ) -> ResilienceGate:
        return cls(
            failure_threshold=settings.resilience_failure_threshold,
            cooldown_s=settings.resilience_cooldown_s,
            clock=clock,
        )

    @property
    def state(self) -> CircuitState:
        """Copy of the current circuit state."""
        self._maybe_close()
        return replace(self._state)

    @property
    def is_available(self) -> bool:
        """True when the next call would reach the remote service."""
        self._maybe_close()
        return self._state.status is CircuitStatus.CLOSED

    def status(self) -> GateStatus:
        self._maybe_close()
        return GateStatus(
            status=self._state.status,
            failure_count=self._state.failure_count,
            last_failure_at=self._state.last_failure_at,
            failure_threshold=self._failure_threshold,
            cooldown_s=self._cooldown_s,
            available=self._state.status is CircuitStatus.CLOSED,
        )

    def reset(self) -> None:
        """Manual recovery: close the circuit and forget past failures."""
        self._state = CircuitState()
        logger.info("Remote service manually reset")

    async def execute_with_fallback(
        self,
        primary: Callable[[], Awaitable[T]],
        fallback: Callable[[], T],
        label: str = "remote operation",
        timeout: float | None = None,
    ) -> T:
        """Run ``primary`` through the breaker, answering with ``fallback`` on failure.

        Args:
            primary: Zero-argument coroutine factory calling the remote service.
            fallback: Synchronous, total local computation.
            label: Operation name used in logs.
            timeout: Seconds after which ``primary`` is abandoned and counted
                as a failure. None waits indefinitely.

        Returns:
            The primary result, or the fallback result.
        """
        self._maybe_close()

        if self._state.status is CircuitStatus.OPEN:
            logger.warning(
                "Remote service disabled, using fallback for %s (failures=%d)",
                label, self._state.failure_count,
            )
            return fallback()

        try:
            if timeout is None:
                result = await primary()
            else:
                result = await asyncio.wait_for(primary(), timeout=timeout)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._record_failure(label, exc)
            return fallback()

        self._record_success(label)
        return result

    # --- Internal helpers ---

    def _record_success(self, label: str) -> None:
        if self._state.status is CircuitStatus.OPEN:
            logger.debug("Ignoring late success on %s while circuit is open", label)
            return
        if self._state.failure_count > 0:
            logger.info(
                "Remote service recovered on %s, resetting failure count (was %d)",
                label, self._state.failure_count,
            )
            self._state.failure_count = 0
        else:
            logger.debug("Remote operation successful: %s", label)

    def _record_failure(self, label: str, exc: Exception) -> None:
        if self._state.status is CircuitStatus.OPEN:
            # In-flight call that started before the circuit opened.
            logger.debug("Ignoring late failure on %s while circuit is open: %s", label, exc)
            return
        logger.warning(
            "Remote operation failed: %s (failures=%d): %s: %s",
            label, self._state.failure_count, type(exc).__name__, exc,
        )
        self._state.failure_count += 1
        self._state.last_failure_at = self._clock()

        if self._state.failure_count >= self._failure_threshold:
            self._state.status = CircuitStatus.OPEN
            logger.warning(
                "Remote service disabled after %d failures, cooldown %.0fs",
                self._state.failure_count, self._cooldown_s,
            )

    def _maybe_close(self) -> None:
        """Apply the scheduled Open -> Closed transition once the cooldown elapsed."""
        if self._state.status is not CircuitStatus.OPEN:
            return
        opened_at = self._state.last_failure_at or 0.0
        if self._clock() - opened_at >= self._cooldown_s:
            self._state = CircuitState()
            logger.info("Remote service re-enabled after cooldown period")
