"""Rating and form domain modules."""

from domain.ratings.common import GameType, MatchResult, PlayerTally, RatingSnapshot, TeamResult

__all__ = ["GameType", "MatchResult", "PlayerTally", "RatingSnapshot", "TeamResult"]
