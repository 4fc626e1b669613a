# src/api/__init__.py — v1
"""Service wiring and public facade."""
