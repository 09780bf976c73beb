"""Stateful chronological replay of player ratings."""

from __future__ import annotations

from domain.ratings.common import MatchResult, PlayerTally
from domain.ratings.dupr.calculator import (
    PlayerRatingEvent,
    RatingParameters,
    explain_rating_update,
)
from domain.recording import apply_snapshots, validate_match


class PlayerRatingCalculator:
    """Match-by-match player rating calculator.

    Every player starts at ``default_rating``; matches must be fed in
    chronological order so each snapshot's ``before`` is the rating at that time.
    """

    def __init__(self, params: RatingParameters, *, allow_draws: bool = True) -> None:
        self.params = params
        self.allow_draws = allow_draws
        self._tallies: dict[str, PlayerTally] = {}

    def get_rating(self, player_id: str) -> float:
        tally = self._tallies.get(player_id)
        return self.params.default_rating if tally is None else tally.rating

    def tracked_entity_count(self) -> int:
        return len(self._tallies)

    def ratings(self) -> dict[str, float]:
        """Return a snapshot of current player ratings."""
        return {player_id: tally.rating for player_id, tally in self._tallies.items()}

    def tallies(self) -> dict[str, PlayerTally]:
        return dict(self._tallies)

    def process_match(
        self,
        match: MatchResult,
        *,
        allow_draws: bool | None = None,
    ) -> list[PlayerRatingEvent]:
        """Apply one match; ``allow_draws`` overrides the calculator default for this match only."""
        draws_allowed = self.allow_draws if allow_draws is None else allow_draws
        validate_match(match, allow_draws=draws_allowed)

        ratings_before = {player_id: self.get_rating(player_id) for player_id in match.player_ids}
        events = explain_rating_update(match, ratings_before, self.params)
        snapshots = {event.player_id: event.snapshot() for event in events}
        self._tallies.update(
            apply_snapshots(match, self._tallies, snapshots, self.params.default_rating)
        )
        return events


__all__ = ["PlayerRatingCalculator"]
