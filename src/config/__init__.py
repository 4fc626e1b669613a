# src/config/__init__.py — v1
"""Typed configuration."""

from searchlens.config.settings import ConfigurationError, Settings, load_settings

__all__ = ["ConfigurationError", "Settings", "load_settings"]
