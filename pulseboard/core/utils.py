"""Shared helpers for PulseBoard core modules: error types and rounding."""

from __future__ import annotations

import math


class ValidationError(ValueError):
    """Raised when user-supplied input fails validation."""


class NotFoundError(LookupError):
    """Raised when a referenced user or setting does not exist."""


class ConflictError(Exception):
    """Raised when a write would violate a uniqueness rule (e.g. duplicate email)."""


class AuthenticationError(Exception):
    """Raised for bad credentials or an invalid/expired token."""


def js_round(value: float) -> int:
    """Round half toward +inf, matching the dashboard client's Math.round.

    Python's round() uses banker's rounding, which disagrees on .5 cases
    (round(2.5) == 2, Math.round(2.5) == 3).
    """
    return math.floor(value + 0.5)


def round1(value: float) -> float:
    """Round to one decimal place with js_round semantics."""
    return js_round(value * 10) / 10
