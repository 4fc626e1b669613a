# src/llm/errors.py — v1
"""Errors raised by the remote intelligence client.

None of these reach callers of the interpreter or the ranker: the
resilience gate catches them and routes to the local fallback.
"""

from __future__ import annotations


class RemoteServiceError(Exception):
    """Base class for remote intelligence failures."""


class RemoteSchemaError(RemoteServiceError):
    """Remote response could not be parsed into the expected schema."""


class RemoteRetryExhausted(RemoteServiceError):
    """All retries exhausted for a remote call."""

    def __init__(self, operation: str, error_type: str, attempts: int, last_error: Exception):
        self.operation = operation
        self.error_type = error_type
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Remote operation '{operation}' failed after {attempts} attempts "
            f"({error_type}): {last_error}"
        )
