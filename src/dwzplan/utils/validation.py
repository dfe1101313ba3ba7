"""Boundary checks for raw numeric inputs to the solvers.

Configuration objects are validated by pydantic when they are built. The
solver functions also accept plain numbers (balances at retirement, ages,
spend levels), and those are checked here before any iteration starts so
that NaN or infinity can never leak into a bisection loop.
"""

from __future__ import annotations

import math

from dwzplan.utils.exceptions import InvalidInputError


def ensure_finite(name: str, value: float) -> float:
    """Return ``value`` as a float, raising if it is NaN or infinite."""
    try:
        result = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(result):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    return result


def ensure_non_negative(name: str, value: float) -> float:
    """Return ``value`` as a finite float, raising if it is negative."""
    result = ensure_finite(name, value)
    if result < 0:
        raise InvalidInputError(f"{name} must be >= 0, got {result}")
    return result


def ensure_age_order(younger_name: str, younger: int, older_name: str, older: int) -> None:
    """Raise unless ``younger < older``."""
    if younger >= older:
        raise InvalidInputError(
            f"{younger_name} ({younger}) must be less than {older_name} ({older})"
        )
