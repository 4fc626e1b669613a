# src/resilience/__init__.py — v1
"""Circuit breaker for the remote intelligence service."""
