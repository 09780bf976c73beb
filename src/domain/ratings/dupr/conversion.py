"""Map legacy Elo-scale ratings onto the DUPR scale."""

from __future__ import annotations

import math

from domain.ratings.bounds import clamp

LEGACY_ELO_THRESHOLD = 10.0


def looks_like_elo(rating: float) -> bool:
    """DUPR ratings never exceed 10, so anything above it is a legacy Elo value."""
    return rating > LEGACY_ELO_THRESHOLD


def convert_elo_to_dupr(
    elo_rating: float,
    *,
    min_elo: float = 1000.0,
    max_elo: float = 2000.0,
    min_rating: float = 2.0,
    max_rating: float = 8.0,
) -> float:
    """Linear map of a clamped Elo rating, rounded half-up to one decimal place."""
    if min_elo >= max_elo:
        raise ValueError(f"min_elo must be < max_elo, got {min_elo} >= {max_elo}")

    clamped = clamp(elo_rating, min_elo, max_elo)
    rating = min_rating + ((clamped - min_elo) / (max_elo - min_elo)) * (max_rating - min_rating)
    return math.floor(rating * 10.0 + 0.5) / 10.0


__all__ = ["LEGACY_ELO_THRESHOLD", "convert_elo_to_dupr", "looks_like_elo"]
