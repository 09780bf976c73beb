"""Tests for comparing two rating parameter sets on stored games."""

from __future__ import annotations

from datetime import datetime

import pytest

from domain.ratings.common import GameType, MatchResult, RatingSnapshot, TeamResult
from domain.ratings.dupr.calculator import RatingParameters
from domain.ratings.dupr.simulation import compare_parameter_sets, ratings_at_game

NO_UNDERDOG = RatingParameters(
    underdog_coefficient=0.0,
    winner_individual_coefficient=0.0,
    individual_coefficient=0.0,
)


def _match(
    match_id: str,
    score1: int,
    score2: int,
    snapshots: dict[str, RatingSnapshot],
) -> MatchResult:
    return MatchResult(
        match_id=match_id,
        event_time=datetime(2026, 6, 1, 10, 0, 0),
        game_type=GameType.SINGLES,
        team1=TeamResult(player_ids=("low",), score=score1),
        team2=TeamResult(player_ids=("high",), score=score2),
        rating_snapshots=snapshots,
    )


def test_ratings_at_game_prefers_snapshots() -> None:
    match = _match("g1", 11, 5, {"low": RatingSnapshot(before=2.5, after=2.7)})
    ratings = ratings_at_game(match, {"high": 6.0}, 3.5)
    assert ratings == {"low": 2.5, "high": 6.0}
    assert ratings_at_game(match, {}, 3.5)["high"] == pytest.approx(3.5)


def test_identical_parameter_sets_have_no_difference() -> None:
    match = _match("g1", 11, 5, {"low": RatingSnapshot(2.5, 2.6), "high": RatingSnapshot(6.0, 5.9)})
    summary = compare_parameter_sets([match], {}, RatingParameters(), RatingParameters())
    assert summary.compared_games == 1
    assert summary.average_absolute_difference == pytest.approx(0.0)


def test_underdog_weighting_boosts_upset_winner() -> None:
    snapshots = {"low": RatingSnapshot(2.5, 2.8), "high": RatingSnapshot(6.0, 5.7)}
    summary = compare_parameter_sets(
        [_match("g1", 11, 5, snapshots)],
        {},
        NO_UNDERDOG,
        RatingParameters(),
    )

    by_player = {item.player_id: item for item in summary.comparisons}
    assert by_player["low"].won
    assert by_player["low"].candidate_delta > by_player["low"].baseline_delta > 0.0
    assert by_player["high"].candidate_delta < by_player["high"].baseline_delta < 0.0
    assert summary.average_absolute_difference > 0.0


def test_draws_and_games_without_snapshots_are_skipped() -> None:
    draw = _match("draw", 9, 9, {"low": RatingSnapshot(3.0, 3.0), "high": RatingSnapshot(4.0, 4.0)})
    legacy = _match("legacy", 11, 2, {})
    summary = compare_parameter_sets([draw, legacy], {}, NO_UNDERDOG, RatingParameters())

    assert summary.compared_games == 0
    assert summary.skipped_games == 2
    assert summary.comparisons == ()
    assert summary.average_absolute_difference == pytest.approx(0.0)
