# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for resilience, remote service, cache budget,
per-component cache TTLs and logging. Every value has a default so the
library works offline with no .env file at all.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Resilience gate ===
    resilience_failure_threshold: int = 3
    resilience_cooldown_ms: int = 300_000

    # === Remote intelligence service ===
    remote_enabled: bool = True
    remote_provider: Literal["openai", "anthropic"] = "openai"
    remote_model: str = "llama3.1-8b"
    remote_api_key: str = ""
    remote_base_url: str = "https://api.cerebras.ai/v1"
    remote_timeout_s: float = 30.0
    remote_max_retries: int = 2
    remote_temperature: float = 0.2
    remote_max_tokens: int = 2048

    # === Cache ===
    cache_backend: Literal["memory", "json", "sqlite", "redis"] = "memory"
    cache_root: Path = Path("~/.searchlens/cache")
    cache_redis_url: str = ""
    cache_key_prefix: str = "searchlens:"
    cache_max_bytes: int = 5 * 1024 * 1024
    cache_max_items: int = 1000
    cache_cleanup_threshold: float = 0.8

    # Per-component TTLs (seconds)
    query_cache_ttl_s: float = 60 * 60
    ranking_cache_ttl_s: float = 24 * 60 * 60
    tagging_cache_ttl_s: float = 7 * 24 * 60 * 60

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("remote_timeout_s")
    @classmethod
    def validate_remote_timeout(cls, v: float) -> float:  # noqa: N805
        """Remote timeout must be strictly positive."""
        if v <= 0:
            raise ValueError("remote_timeout_s must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.resilience_failure_threshold < 1:
            errors.append("RESILIENCE_FAILURE_THRESHOLD must be >= 1")

        if self.resilience_cooldown_ms < 0:
            errors.append("RESILIENCE_COOLDOWN_MS must be >= 0")

        if not 0 < self.cache_cleanup_threshold <= 1:
            errors.append("CACHE_CLEANUP_THRESHOLD must be in (0, 1]")

        if self.cache_max_bytes <= 0:
            errors.append("CACHE_MAX_BYTES must be > 0")

        if self.cache_max_items <= 0:
            errors.append("CACHE_MAX_ITEMS must be > 0")

        if self.cache_backend == "redis" and not self.cache_redis_url:
            errors.append("CACHE_REDIS_URL must be set when CACHE_BACKEND=redis")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def resilience_cooldown_s(self) -> float:
        """Cooldown expressed in seconds."""
        return self.resilience_cooldown_ms / 1000.0


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or embedding hosts).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
