"""Rating-system domain modules."""

from domain.ratings.bounds import clamp
from domain.ratings.common import (
    GameType,
    MatchResult,
    PlayerTally,
    RatingSnapshot,
    TeamResult,
)

__all__ = [
    "GameType",
    "MatchResult",
    "PlayerTally",
    "RatingSnapshot",
    "TeamResult",
    "clamp",
]
