"""Recent-form scoring over a player's latest matches."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from domain.ratings.bounds import clamp
from domain.ratings.common import MatchResult


@dataclass(frozen=True)
class FormParameters:
    window_size: int = 10
    quality_coefficient: float = 0.25
    quality_min: float = 0.5
    quality_max: float = 1.5
    margin_base: float = 0.7
    margin_cap: float = 0.3
    margin_divisor: float = 10.0
    baseline: float = 50.0
    scale: float = 25.0
    min_score: float = 0.0
    max_score: float = 100.0
    up_threshold: float = 65.0
    down_threshold: float = 35.0


class GameOutcome(str, Enum):
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


class FormTrend(str, Enum):
    UP = "up"
    NEUTRAL = "neutral"
    DOWN = "down"


class RatingSource(str, Enum):
    """Where an at-the-time rating came from."""

    SNAPSHOT = "snapshot"
    APPROXIMATED = "approximated"


@dataclass(frozen=True)
class HistoricalRating:
    value: float
    source: RatingSource


@dataclass(frozen=True)
class GameFormBreakdown:
    match_id: str
    event_time: datetime
    result: GameOutcome
    player_score: int
    opponent_score: int
    opponent_avg_rating: float
    rating_diff: float
    score_margin: int
    base_points: float
    quality_multiplier: float
    margin_factor: float
    game_score: float
    opponent_rating_sources: tuple[RatingSource, ...]

    @property
    def approximated(self) -> bool:
        return RatingSource.APPROXIMATED in self.opponent_rating_sources


@dataclass(frozen=True)
class PlayerForm:
    player_id: str
    score: float
    trend: FormTrend
    games_played: int
    recent_wins: int
    recent_losses: int
    recent_draws: int
    win_rate: int
    total_quality_points: float
    avg_quality_per_game: float
    approximated_games: int
    games: tuple[GameFormBreakdown, ...]


def opponent_rating_at_game(
    match: MatchResult,
    player_id: str,
    fallback_rating: float,
) -> HistoricalRating:
    """Rating ``player_id`` had going into ``match``.

    Uses the stored snapshot when the match carries one; otherwise falls back to
    ``fallback_rating`` and marks the value as approximated. Matches recorded
    before snapshots existed are always approximated.
    """
    snapshot = match.rating_snapshots.get(player_id)
    if snapshot is not None:
        return HistoricalRating(value=snapshot.before, source=RatingSource.SNAPSHOT)
    return HistoricalRating(value=fallback_rating, source=RatingSource.APPROXIMATED)


def quality_multiplier(
    player_rating: float,
    opponent_avg_rating: float,
    is_win: bool,
    params: FormParameters = FormParameters(),
) -> float:
    """Beating stronger opponents scores higher; losing to weaker ones costs more."""
    rating_diff = opponent_avg_rating - player_rating
    if is_win:
        multiplier = 1.0 + rating_diff * params.quality_coefficient
    else:
        multiplier = 1.0 - rating_diff * params.quality_coefficient
    return clamp(multiplier, params.quality_min, params.quality_max)


def margin_factor(score_margin: int, params: FormParameters = FormParameters()) -> float:
    return params.margin_base + min(score_margin / params.margin_divisor, params.margin_cap)


def classify_trend(score: float, params: FormParameters = FormParameters()) -> FormTrend:
    if score >= params.up_threshold:
        return FormTrend.UP
    if score <= params.down_threshold:
        return FormTrend.DOWN
    return FormTrend.NEUTRAL


def recent_matches(
    player_id: str,
    matches: Iterable[MatchResult],
    window_size: int,
) -> list[MatchResult]:
    """Most recent ``window_size`` matches involving ``player_id``, newest first."""
    involved = [match for match in matches if match.involves(player_id)]
    involved.sort(key=lambda match: match.event_time, reverse=True)
    return involved[:window_size]


def _analyze_game(
    match: MatchResult,
    player_id: str,
    current_rating: float,
    params: FormParameters,
) -> GameFormBreakdown:
    own_team, opponent_team = match.side_of(player_id)
    opponent_ratings = [
        opponent_rating_at_game(match, opponent_id, current_rating)
        for opponent_id in opponent_team.player_ids
    ]
    opponent_avg_rating = sum(rating.value for rating in opponent_ratings) / float(len(opponent_ratings))

    if own_team.score > opponent_team.score:
        result = GameOutcome.WIN
    elif own_team.score < opponent_team.score:
        result = GameOutcome.LOSS
    else:
        result = GameOutcome.DRAW

    score_margin = abs(own_team.score - opponent_team.score)
    if result is GameOutcome.DRAW:
        base_points = 0.0
        quality = 1.0
        margin = 1.0
        game_score = 0.0
    else:
        is_win = result is GameOutcome.WIN
        base_points = 1.0 if is_win else -1.0
        quality = quality_multiplier(current_rating, opponent_avg_rating, is_win, params)
        margin = margin_factor(score_margin, params)
        game_score = base_points * quality * margin

    return GameFormBreakdown(
        match_id=match.match_id,
        event_time=match.event_time,
        result=result,
        player_score=own_team.score,
        opponent_score=opponent_team.score,
        opponent_avg_rating=opponent_avg_rating,
        rating_diff=opponent_avg_rating - current_rating,
        score_margin=score_margin,
        base_points=base_points,
        quality_multiplier=quality,
        margin_factor=margin,
        game_score=game_score,
        opponent_rating_sources=tuple(rating.source for rating in opponent_ratings),
    )


def explain_player_form(
    player_id: str,
    matches: Iterable[MatchResult],
    current_rating: float,
    params: FormParameters = FormParameters(),
) -> PlayerForm | None:
    """Full per-game form breakdown, or ``None`` when the player has no games."""
    window = recent_matches(player_id, matches, params.window_size)
    if not window:
        return None

    games = tuple(_analyze_game(match, player_id, current_rating, params) for match in window)
    games_played = len(games)
    wins = sum(1 for game in games if game.result is GameOutcome.WIN)
    losses = sum(1 for game in games if game.result is GameOutcome.LOSS)
    draws = games_played - wins - losses

    # Draws count toward the denominator but add nothing to the numerator.
    total_quality_points = sum(game.game_score for game in games)
    avg_quality_per_game = total_quality_points / games_played
    score = clamp(
        params.baseline + avg_quality_per_game * params.scale,
        params.min_score,
        params.max_score,
    )

    return PlayerForm(
        player_id=player_id,
        score=score,
        trend=classify_trend(score, params),
        games_played=games_played,
        recent_wins=wins,
        recent_losses=losses,
        recent_draws=draws,
        win_rate=round(wins / games_played * 100),
        total_quality_points=total_quality_points,
        avg_quality_per_game=avg_quality_per_game,
        approximated_games=sum(1 for game in games if game.approximated),
        games=games,
    )


def compute_player_form(
    player_id: str,
    matches: Iterable[MatchResult],
    current_rating: float,
    params: FormParameters = FormParameters(),
) -> float | None:
    """0-100 form score over the latest window, or ``None`` with no games."""
    form = explain_player_form(player_id, matches, current_rating, params)
    return None if form is None else form.score


__all__ = [
    "FormParameters",
    "FormTrend",
    "GameFormBreakdown",
    "GameOutcome",
    "HistoricalRating",
    "PlayerForm",
    "RatingSource",
    "classify_trend",
    "compute_player_form",
    "explain_player_form",
    "margin_factor",
    "opponent_rating_at_game",
    "quality_multiplier",
    "recent_matches",
]
