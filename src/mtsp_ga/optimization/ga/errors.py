"""Exceptions raised by the route genetic algorithm."""

from __future__ import annotations

__all__ = ["ConfigurationError", "InfeasibleConstraintError"]


class ConfigurationError(ValueError):
    """Raised when engine inputs are malformed or inconsistent."""


class InfeasibleConstraintError(ValueError):
    """Raised when no partition satisfies the minimum tour length."""
