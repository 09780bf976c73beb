"""Apply one finished match to the players' rating and result tallies."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace

from domain.ratings.common import MatchResult, PlayerTally, RatingSnapshot
from domain.ratings.dupr.calculator import RatingParameters, compute_rating_update


@dataclass(frozen=True)
class RecordedMatch:
    """Match with its snapshots attached, plus the updated player tallies."""

    match: MatchResult
    tallies: dict[str, PlayerTally]

    @property
    def rating_snapshots(self) -> Mapping[str, RatingSnapshot]:
        return self.match.rating_snapshots


def validate_match(match: MatchResult, *, allow_draws: bool = False) -> None:
    """Reject rosters, scores and outcomes the rating engine does not accept."""
    expected_size = match.game_type.team_size
    for label, team in (("team1", match.team1), ("team2", match.team2)):
        if len(team.player_ids) != expected_size:
            raise ValueError(
                f"match_id={match.match_id} {label} has {len(team.player_ids)} players; "
                f"{match.game_type.value} requires {expected_size}"
            )
        if team.score < 0:
            raise ValueError(f"match_id={match.match_id} {label} score must be >= 0, got {team.score}")

    player_ids = match.player_ids
    if len(set(player_ids)) != len(player_ids):
        raise ValueError(
            f"match_id={match.match_id} lists a player more than once: {list(player_ids)}"
        )

    if match.is_draw and not allow_draws:
        raise ValueError(f"match_id={match.match_id}: Match cannot end in a tie")


def _tally_after(
    tally: PlayerTally,
    match: MatchResult,
    snapshot: RatingSnapshot,
) -> PlayerTally:
    own_team, opponent_team = match.side_of(tally.player_id)
    won = own_team.score > opponent_team.score
    lost = own_team.score < opponent_team.score
    return replace(
        tally,
        rating=snapshot.after,
        wins=tally.wins + (1 if won else 0),
        losses=tally.losses + (1 if lost else 0),
        draws=tally.draws + (1 if not won and not lost else 0),
        points_for=tally.points_for + own_team.score,
        points_against=tally.points_against + opponent_team.score,
    )


def apply_snapshots(
    match: MatchResult,
    tallies: Mapping[str, PlayerTally],
    snapshots: Mapping[str, RatingSnapshot],
    default_rating: float,
) -> dict[str, PlayerTally]:
    """New tallies for every participant, taking ratings from ``snapshots``."""
    return {
        player_id: _tally_after(
            tallies.get(player_id) or PlayerTally.unrated(player_id, default_rating),
            match,
            snapshots[player_id],
        )
        for player_id in match.player_ids
    }


def record_match(
    match: MatchResult,
    tallies: Mapping[str, PlayerTally],
    params: RatingParameters = RatingParameters(),
    *,
    allow_draws: bool = False,
) -> RecordedMatch:
    """Validate ``match`` and return the snapshots and tallies to persist together.

    Players missing from ``tallies`` start unrated at ``params.default_rating``.
    ``tallies`` is not modified.
    """
    validate_match(match, allow_draws=allow_draws)

    ratings_before = {
        player_id: tallies[player_id].rating if player_id in tallies else params.default_rating
        for player_id in match.player_ids
    }
    snapshots = compute_rating_update(match, ratings_before, params)
    updated = apply_snapshots(match, tallies, snapshots, params.default_rating)
    return RecordedMatch(match=match.with_snapshots(snapshots), tallies=updated)


__all__ = ["RecordedMatch", "apply_snapshots", "record_match", "validate_match"]
