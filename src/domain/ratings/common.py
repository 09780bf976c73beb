"""Shared types for the rating and form engines."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum


class GameType(str, Enum):
    """Match format; decides the expected roster size of each team."""

    SINGLES = "Singles"
    DOUBLES = "Doubles"

    @property
    def team_size(self) -> int:
        return 1 if self is GameType.SINGLES else 2


@dataclass(frozen=True)
class TeamResult:
    """One side of a finished match."""

    player_ids: tuple[str, ...]
    score: int


@dataclass(frozen=True)
class RatingSnapshot:
    """Rating immediately before and after one specific match."""

    before: float
    after: float

    @property
    def delta(self) -> float:
        return self.after - self.before


@dataclass(frozen=True)
class MatchResult:
    """Canonical finished-match payload consumed by both engines."""

    match_id: str
    event_time: datetime
    game_type: GameType
    team1: TeamResult
    team2: TeamResult
    rating_snapshots: Mapping[str, RatingSnapshot] = field(default_factory=dict)

    @property
    def player_ids(self) -> tuple[str, ...]:
        return self.team1.player_ids + self.team2.player_ids

    @property
    def is_draw(self) -> bool:
        return self.team1.score == self.team2.score

    def involves(self, player_id: str) -> bool:
        return player_id in self.team1.player_ids or player_id in self.team2.player_ids

    def side_of(self, player_id: str) -> tuple[TeamResult, TeamResult]:
        """Return ``(own_team, opponent_team)`` for one participant."""
        if player_id in self.team1.player_ids:
            return self.team1, self.team2
        if player_id in self.team2.player_ids:
            return self.team2, self.team1
        raise ValueError(f"player_id={player_id} did not play in match_id={self.match_id}")

    def with_snapshots(self, snapshots: Mapping[str, RatingSnapshot]) -> MatchResult:
        return replace(self, rating_snapshots=dict(snapshots))


@dataclass(frozen=True)
class PlayerTally:
    """Player aggregate: current rating plus cumulative results."""

    player_id: str
    rating: float
    wins: int = 0
    losses: int = 0
    draws: int = 0
    points_for: int = 0
    points_against: int = 0

    @classmethod
    def unrated(cls, player_id: str, default_rating: float) -> PlayerTally:
        return cls(player_id=player_id, rating=default_rating)

    @property
    def games_played(self) -> int:
        return self.wins + self.losses + self.draws


__all__ = [
    "GameType",
    "MatchResult",
    "PlayerTally",
    "RatingSnapshot",
    "TeamResult",
]
