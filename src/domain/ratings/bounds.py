"""Clamping helper shared by the rating and form engines."""

from __future__ import annotations


def clamp(value: float, lower: float, upper: float) -> float:
    """Bound ``value`` to the closed interval ``[lower, upper]``."""
    if lower > upper:
        raise ValueError(f"clamp bounds are inverted: lower={lower} > upper={upper}")
    return max(lower, min(value, upper))


__all__ = ["clamp"]
