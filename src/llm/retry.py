# src/llm/retry.py — v2
"""Retry policy with exponential backoff for remote completions.

Retries belong to the remote caller. The resilience gate itself never
retries; it only sees the final outcome of ``with_retry``.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable

from searchlens.llm.errors import RemoteRetryExhausted

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration for a specific error type."""

    max_retries: int
    base_delay_s: float
    backoff_factor: float = 2.0
    jitter: bool = True


DEFAULT_RETRY_CONFIGS: dict[str, RetryConfig] = {
    "rate_limit": RetryConfig(max_retries=2, base_delay_s=2.0),
    "timeout": RetryConfig(max_retries=1, base_delay_s=1.0, backoff_factor=1.0),
    "server_error": RetryConfig(max_retries=2, base_delay_s=1.0),
    "connection": RetryConfig(max_retries=2, base_delay_s=0.5),
}


def classify_error(error: Exception) -> str:
    """Classify an exception into a retry error type."""
    msg = str(error).lower()
    name = type(error).__name__.lower()

    if "429" in msg or "rate" in msg:
        return "rate_limit"
    if "timeout" in name or "timeout" in msg:
        return "timeout"
    if any(c in msg for c in ("500", "502", "503", "504", "server")):
        return "server_error"
    if "connect" in name or "connection" in msg:
        return "connection"
    if "auth" in name or "401" in msg or "403" in msg:
        return "auth"
    return "unknown"


def retry_configs_for(max_retries: int) -> dict[str, RetryConfig]:
    """Default configs with every error class capped at ``max_retries``."""
    return {
        name: replace(cfg, max_retries=min(cfg.max_retries, max_retries))
        for name, cfg in DEFAULT_RETRY_CONFIGS.items()
    }


def _compute_delay(config: RetryConfig, attempt: int) -> float:
    """Compute delay for a given attempt (0-based)."""
    delay = config.base_delay_s * (config.backoff_factor ** attempt)
    if config.jitter:
        delay *= 0.5 + random.random()  # noqa: S311
    return delay


async def with_retry(
    fn: Callable[..., Awaitable[Any]],
    *args: Any,
    operation: str = "remote",
    retry_configs: dict[str, RetryConfig] | None = None,
    **kwargs: Any,
) -> Any:
    """Execute an async function with retry logic.

    Raises:
        RemoteRetryExhausted: If the error is not retryable or all retries
            are exhausted.
    """
    configs = DEFAULT_RETRY_CONFIGS if retry_configs is None else retry_configs
    attempts = 0

    while True:
        try:
            return await fn(*args, **kwargs)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            error_type = classify_error(e)
            attempts += 1
            config = configs.get(error_type)

            if config is None or attempts > config.max_retries:
                raise RemoteRetryExhausted(operation, error_type, attempts, e) from e

            delay = _compute_delay(config, attempts - 1)
            logger.warning(
                "Remote '%s': %s (attempt %d/%d), retrying in %.1fs",
                operation, error_type, attempts, config.max_retries, delay,
            )
            await asyncio.sleep(delay)
