"""Replay stored games under two parameter sets and compare the rating deltas."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from domain.ratings.common import MatchResult
from domain.ratings.dupr.calculator import RatingParameters, explain_rating_update


@dataclass(frozen=True)
class DeltaComparison:
    match_id: str
    player_id: str
    team_number: int
    won: bool
    pre_rating: float
    baseline_delta: float
    candidate_delta: float

    @property
    def difference(self) -> float:
        return self.candidate_delta - self.baseline_delta


@dataclass(frozen=True)
class ComparisonSummary:
    compared_games: int
    skipped_games: int
    comparisons: tuple[DeltaComparison, ...]

    @property
    def average_absolute_difference(self) -> float:
        if not self.comparisons:
            return 0.0
        return sum(abs(item.difference) for item in self.comparisons) / len(self.comparisons)


def ratings_at_game(
    match: MatchResult,
    current_ratings: Mapping[str, float],
    default_rating: float,
) -> dict[str, float]:
    """Pre-match ratings from snapshots, then current ratings, then ``default_rating``."""
    ratings: dict[str, float] = {}
    for player_id in match.player_ids:
        snapshot = match.rating_snapshots.get(player_id)
        if snapshot is not None:
            ratings[player_id] = snapshot.before
        else:
            ratings[player_id] = current_ratings.get(player_id, default_rating)
    return ratings


def compare_match(
    match: MatchResult,
    ratings_before: Mapping[str, float],
    baseline: RatingParameters,
    candidate: RatingParameters,
) -> list[DeltaComparison]:
    baseline_events = explain_rating_update(match, ratings_before, baseline)
    candidate_events = {
        event.player_id: event for event in explain_rating_update(match, ratings_before, candidate)
    }
    return [
        DeltaComparison(
            match_id=match.match_id,
            player_id=event.player_id,
            team_number=event.team_number,
            won=event.won,
            pre_rating=event.pre_rating,
            baseline_delta=event.rating_delta,
            candidate_delta=candidate_events[event.player_id].rating_delta,
        )
        for event in baseline_events
    ]


def compare_parameter_sets(
    matches: Iterable[MatchResult],
    current_ratings: Mapping[str, float],
    baseline: RatingParameters,
    candidate: RatingParameters,
) -> ComparisonSummary:
    """Compare both parameter sets on every decided game that carries snapshots.

    Each game is evaluated independently from its stored pre-match ratings, so
    the result does not depend on replay order. Draws and games recorded
    without snapshots are skipped.
    """
    comparisons: list[DeltaComparison] = []
    compared = 0
    skipped = 0
    for match in matches:
        if match.is_draw or not match.rating_snapshots:
            skipped += 1
            continue
        ratings_before = ratings_at_game(match, current_ratings, baseline.default_rating)
        comparisons.extend(compare_match(match, ratings_before, baseline, candidate))
        compared += 1
    return ComparisonSummary(
        compared_games=compared,
        skipped_games=skipped,
        comparisons=tuple(comparisons),
    )


__all__ = [
    "ComparisonSummary",
    "DeltaComparison",
    "compare_match",
    "compare_parameter_sets",
    "ratings_at_game",
]
