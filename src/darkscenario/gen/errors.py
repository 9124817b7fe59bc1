from __future__ import annotations


class InvalidConfig(ValueError):
    """Malformed generation input; raised before any draw is made."""


class CatalogExhausted(RuntimeError):
    """A required catalog filter left no candidates for a draw."""
