"""Unit tests for the recent-form score."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from domain.form.calculator import (
    FormParameters,
    FormTrend,
    GameOutcome,
    RatingSource,
    classify_trend,
    compute_player_form,
    explain_player_form,
    margin_factor,
    opponent_rating_at_game,
    quality_multiplier,
)
from domain.ratings.common import GameType, MatchResult, RatingSnapshot, TeamResult

START = datetime(2026, 4, 1, 9, 0, 0)


def _game(
    index: int,
    own_score: int,
    opponent_score: int,
    *,
    opponent_before: float | None = 3.5,
) -> MatchResult:
    snapshots = {}
    if opponent_before is not None:
        snapshots = {
            "me": RatingSnapshot(before=3.5, after=3.5),
            "opp": RatingSnapshot(before=opponent_before, after=opponent_before),
        }
    return MatchResult(
        match_id=f"g{index}",
        event_time=START + timedelta(days=index),
        game_type=GameType.SINGLES,
        team1=TeamResult(player_ids=("me",), score=own_score),
        team2=TeamResult(player_ids=("opp",), score=opponent_score),
        rating_snapshots=snapshots,
    )


def test_no_games_has_no_form() -> None:
    assert compute_player_form("me", [], 3.5) is None
    assert explain_player_form("me", [_game(1, 11, 5)], 3.5) is not None
    assert compute_player_form("someone_else", [_game(1, 11, 5)], 3.5) is None


def test_quality_multiplier_rewards_stronger_opponents() -> None:
    assert quality_multiplier(3.5, 4.5, True) == pytest.approx(1.25)
    assert quality_multiplier(3.5, 2.5, False) == pytest.approx(1.25)
    assert quality_multiplier(3.5, 7.5, True) == pytest.approx(1.5)
    assert quality_multiplier(3.5, 7.5, False) == pytest.approx(0.5)


def test_margin_factor_caps_at_three_tenths() -> None:
    assert margin_factor(1) == pytest.approx(0.8)
    assert margin_factor(2) == pytest.approx(0.9)
    assert margin_factor(6) == pytest.approx(1.0)
    assert margin_factor(11) == pytest.approx(1.0)


def test_classify_trend_thresholds_are_inclusive() -> None:
    assert classify_trend(65.0) is FormTrend.UP
    assert classify_trend(64.9) is FormTrend.NEUTRAL
    assert classify_trend(35.0) is FormTrend.DOWN
    assert classify_trend(50.0) is FormTrend.NEUTRAL


def test_all_wins_against_equals_gives_upward_form() -> None:
    games = [_game(index, 11, 5) for index in range(10)]
    form = explain_player_form("me", games, 3.5)

    assert form is not None
    assert form.score == pytest.approx(75.0)
    assert form.trend is FormTrend.UP
    assert (form.recent_wins, form.recent_losses, form.recent_draws) == (10, 0, 0)
    assert form.win_rate == 100


def test_all_losses_against_equals_gives_downward_form() -> None:
    games = [_game(index, 5, 11) for index in range(10)]
    assert compute_player_form("me", games, 3.5) == pytest.approx(25.0)


def test_single_quality_win_breakdown() -> None:
    form = explain_player_form("me", [_game(1, 11, 9, opponent_before=4.5)], 3.5)

    assert form is not None
    game = form.games[0]
    assert game.result is GameOutcome.WIN
    assert game.opponent_avg_rating == pytest.approx(4.5)
    assert game.rating_diff == pytest.approx(1.0)
    assert game.quality_multiplier == pytest.approx(1.25)
    assert game.margin_factor == pytest.approx(0.9)
    assert game.game_score == pytest.approx(1.125)
    assert form.score == pytest.approx(78.125)


def test_draws_count_as_games_but_score_nothing() -> None:
    games = [_game(1, 11, 5), _game(2, 8, 8)]
    form = explain_player_form("me", games, 3.5)

    assert form is not None
    assert form.games_played == 2
    assert form.recent_draws == 1
    assert form.win_rate == 50
    assert form.games[0].result is GameOutcome.DRAW
    assert form.games[0].game_score == pytest.approx(0.0)
    assert form.score == pytest.approx(62.5)


def test_only_draws_gives_neutral_form() -> None:
    form = explain_player_form("me", [_game(index, 6, 6, opponent_before=7.0) for index in range(4)], 3.5)

    assert form is not None
    assert form.score == pytest.approx(50.0)
    assert form.trend is FormTrend.NEUTRAL
    assert form.total_quality_points == pytest.approx(0.0)
    assert form.win_rate == 0


def test_only_most_recent_window_counts() -> None:
    old_losses = [_game(index, 0, 11) for index in range(5)]
    recent_wins = [_game(index, 11, 5) for index in range(5, 15)]
    form = explain_player_form("me", old_losses + recent_wins, 3.5)

    assert form is not None
    assert form.games_played == 10
    assert form.score == pytest.approx(75.0)
    assert form.games[0].match_id == "g14"


def test_window_size_is_configurable() -> None:
    games = [_game(1, 0, 11), _game(2, 11, 5)]
    form = explain_player_form("me", games, 3.5, FormParameters(window_size=1))
    assert form is not None
    assert form.games_played == 1
    assert form.score == pytest.approx(75.0)


def test_missing_snapshot_falls_back_to_current_rating() -> None:
    match = _game(1, 11, 5, opponent_before=None)
    historical = opponent_rating_at_game(match, "opp", 4.2)
    assert historical.value == pytest.approx(4.2)
    assert historical.source is RatingSource.APPROXIMATED

    form = explain_player_form("me", [match], 4.2)
    assert form is not None
    assert form.approximated_games == 1
    assert form.games[0].approximated
    assert form.games[0].quality_multiplier == pytest.approx(1.0)


def test_snapshot_before_value_is_used() -> None:
    historical = opponent_rating_at_game(_game(1, 11, 5, opponent_before=5.0), "opp", 3.0)
    assert historical.value == pytest.approx(5.0)
    assert historical.source is RatingSource.SNAPSHOT


def test_score_is_clamped_to_range() -> None:
    params = FormParameters(scale=100.0)
    games = [_game(index, 11, 0, opponent_before=6.0) for index in range(3)]
    assert compute_player_form("me", games, 3.5, params) == pytest.approx(100.0)


def test_score_is_clamped_at_zero_for_losses_to_weaker_players() -> None:
    params = FormParameters(scale=100.0)
    games = [_game(index, 0, 11, opponent_before=2.0) for index in range(3)]
    form = explain_player_form("me", games, 3.5, params)

    assert form is not None
    assert form.games[0].quality_multiplier == pytest.approx(1.375)
    assert form.score == pytest.approx(0.0)
    assert form.trend is FormTrend.DOWN


def test_form_is_idempotent_and_order_independent() -> None:
    games = [_game(1, 11, 7), _game(2, 6, 11, opponent_before=2.5), _game(3, 11, 10)]
    first = compute_player_form("me", games, 3.5)
    second = compute_player_form("me", list(reversed(games)), 3.5)
    assert first == pytest.approx(second)
