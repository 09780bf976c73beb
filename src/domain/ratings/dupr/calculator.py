"""DUPR-scale player rating logic with margin, performance and underdog weighting."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime

from domain.ratings.bounds import clamp
from domain.ratings.common import GameType, MatchResult, RatingSnapshot, TeamResult


@dataclass(frozen=True)
class RatingParameters:
    default_rating: float = 3.5
    min_rating: float = 2.0
    max_rating: float = 8.0
    k_factor: float = 0.08
    scale_factor: float = 2.0
    margin_base: float = 0.7
    margin_per_point: float = 0.075
    margin_min: float = 0.5
    margin_max: float = 1.5
    performance_coefficient: float = 0.25
    performance_min: float = 0.6
    performance_max: float = 1.4
    underdog_coefficient: float = 0.10
    winner_individual_coefficient: float = 0.15
    winner_individual_min: float = 0.8
    winner_individual_max: float = 1.2
    winner_combined_min: float = 0.7
    winner_combined_max: float = 1.5
    individual_coefficient: float = 0.45
    loser_individual_min: float = 0.5
    loser_individual_max: float = 1.5
    loser_combined_min: float = 0.5
    loser_combined_max: float = 1.6


@dataclass(frozen=True)
class PlayerRatingEvent:
    player_id: str
    match_id: str
    event_time: datetime
    team_number: int
    won: bool
    drew: bool
    actual_score: float
    expected_score: float
    margin_multiplier: float
    performance_multiplier: float
    underdog_multiplier: float
    pre_rating: float
    rating_delta: float
    post_rating: float
    k_factor: float

    def snapshot(self) -> RatingSnapshot:
        return RatingSnapshot(before=self.pre_rating, after=self.post_rating)


def calculate_expected_score(rating: float, opponent_rating: float, scale_factor: float = 2.0) -> float:
    """Logistic win probability for one side, scaled for the 2.0-8.0 range."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def score_margin_multiplier(
    winner_score: int,
    loser_score: int,
    params: RatingParameters = RatingParameters(),
) -> float:
    """A one-point win gives the base multiplier; each extra point adds a step up to the cap."""
    margin = winner_score - loser_score
    multiplier = params.margin_base + (margin - 1) * params.margin_per_point
    return clamp(multiplier, params.margin_min, params.margin_max)


def performance_multiplier(
    player_rating: float,
    team_rating: float,
    game_type: GameType,
    is_winner: bool,
    params: RatingParameters = RatingParameters(),
) -> float:
    """Weight a doubles player's swing by their rating relative to their own team.

    Weaker-than-partner winners gain more; stronger-than-partner losers lose more.
    Singles always returns 1.0.
    """
    if game_type is GameType.SINGLES:
        return 1.0

    rating_difference = player_rating - team_rating
    if is_winner:
        multiplier = 1.0 - rating_difference * params.performance_coefficient
    else:
        multiplier = 1.0 + rating_difference * params.performance_coefficient
    return clamp(multiplier, params.performance_min, params.performance_max)


def underdog_multiplier(
    player_rating: float,
    own_team_rating: float,
    opponent_team_rating: float,
    is_winner: bool,
    params: RatingParameters = RatingParameters(),
) -> float:
    """Combine the team-level and individual-level underdog adjustments.

    ``team_diff`` is positive when the player's team was favoured. ``global_diff``
    measures the player against ``default_rating``: low-rated winners earn a
    bonus, high-rated losers take a heavier penalty.
    """
    team_diff = own_team_rating - opponent_team_rating
    global_diff = player_rating - params.default_rating

    if is_winner:
        team_multiplier = 1.0 - team_diff * params.underdog_coefficient
        individual_bonus = clamp(
            1.0 - global_diff * params.winner_individual_coefficient,
            params.winner_individual_min,
            params.winner_individual_max,
        )
        return clamp(
            team_multiplier * individual_bonus,
            params.winner_combined_min,
            params.winner_combined_max,
        )

    team_multiplier = 1.0 + team_diff * params.underdog_coefficient
    individual_multiplier = clamp(
        1.0 + global_diff * params.individual_coefficient,
        params.loser_individual_min,
        params.loser_individual_max,
    )
    return clamp(
        team_multiplier * individual_multiplier,
        params.loser_combined_min,
        params.loser_combined_max,
    )


def team_rating(
    team: TeamResult,
    ratings: Mapping[str, float],
    params: RatingParameters = RatingParameters(),
) -> float:
    """Arithmetic mean of the members' ratings; unrated members count as ``default_rating``."""
    member_ratings = [ratings.get(player_id, params.default_rating) for player_id in team.player_ids]
    return sum(member_ratings) / float(len(member_ratings))


def new_rating(
    rating: float,
    expected_score: float,
    actual_score: float,
    *,
    margin: float = 1.0,
    performance: float = 1.0,
    underdog: float = 1.0,
    params: RatingParameters = RatingParameters(),
) -> float:
    base_change = params.k_factor * (actual_score - expected_score) * 2.0
    rating_change = base_change * margin * performance * underdog
    return clamp(rating + rating_change, params.min_rating, params.max_rating)


def explain_rating_update(
    match: MatchResult,
    ratings_before: Mapping[str, float],
    params: RatingParameters = RatingParameters(),
) -> list[PlayerRatingEvent]:
    """Per-participant breakdown of one match's rating update.

    Draws use an actual score of 0.5 with every multiplier fixed at 1.0.
    Inputs are assumed valid (see ``domain.recording.validate_match``).
    """
    team1_rating = team_rating(match.team1, ratings_before, params)
    team2_rating = team_rating(match.team2, ratings_before, params)

    team1_expected = calculate_expected_score(team1_rating, team2_rating, params.scale_factor)
    team2_expected = calculate_expected_score(team2_rating, team1_rating, params.scale_factor)

    is_draw = match.is_draw
    team1_won = match.team1.score > match.team2.score
    if is_draw:
        team1_actual, team2_actual = 0.5, 0.5
        margin = 1.0
    else:
        team1_actual = 1.0 if team1_won else 0.0
        team2_actual = 1.0 - team1_actual
        winner, loser = (match.team1, match.team2) if team1_won else (match.team2, match.team1)
        margin = score_margin_multiplier(winner.score, loser.score, params)

    sides = (
        (1, match.team1, team1_rating, team2_rating, team1_expected, team1_actual),
        (2, match.team2, team2_rating, team1_rating, team2_expected, team2_actual),
    )

    events: list[PlayerRatingEvent] = []
    for team_number, team, own_rating, opponent_rating, expected, actual in sides:
        is_winner = actual == 1.0
        for player_id in team.player_ids:
            pre_rating = ratings_before.get(player_id, params.default_rating)
            if is_draw:
                performance = 1.0
                underdog = 1.0
            else:
                performance = performance_multiplier(
                    pre_rating, own_rating, match.game_type, is_winner, params
                )
                underdog = underdog_multiplier(
                    pre_rating, own_rating, opponent_rating, is_winner, params
                )

            post_rating = new_rating(
                pre_rating,
                expected,
                actual,
                margin=margin,
                performance=performance,
                underdog=underdog,
                params=params,
            )
            events.append(
                PlayerRatingEvent(
                    player_id=player_id,
                    match_id=match.match_id,
                    event_time=match.event_time,
                    team_number=team_number,
                    won=is_winner,
                    drew=is_draw,
                    actual_score=actual,
                    expected_score=expected,
                    margin_multiplier=margin,
                    performance_multiplier=performance,
                    underdog_multiplier=underdog,
                    pre_rating=pre_rating,
                    rating_delta=post_rating - pre_rating,
                    post_rating=post_rating,
                    k_factor=params.k_factor,
                )
            )

    return events


def compute_rating_update(
    match: MatchResult,
    ratings_before: Mapping[str, float],
    params: RatingParameters = RatingParameters(),
) -> dict[str, RatingSnapshot]:
    """Return ``{player_id: RatingSnapshot}`` for every participant of ``match``."""
    return {
        event.player_id: event.snapshot()
        for event in explain_rating_update(match, ratings_before, params)
    }


__all__ = [
    "PlayerRatingEvent",
    "RatingParameters",
    "calculate_expected_score",
    "compute_rating_update",
    "explain_rating_update",
    "new_rating",
    "performance_multiplier",
    "score_margin_multiplier",
    "team_rating",
    "underdog_multiplier",
]
