"""Read/write helpers that move games and players between the database and the domain types."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from domain.ratings.common import GameType, MatchResult, PlayerTally, RatingSnapshot, TeamResult
from models import Game, Player, PlayerRatingChange


def _build_cutoff_time(lookback_days: int | None) -> datetime | None:
    if lookback_days is None or lookback_days <= 0:
        return None
    return datetime.now(UTC).replace(tzinfo=None) - timedelta(days=lookback_days)


def game_to_match(game: Game, snapshots: Mapping[str, RatingSnapshot] | None = None) -> MatchResult:
    if not isinstance(game.event_time, datetime):
        raise ValueError(f"game_id={game.id} has invalid event_time={game.event_time!r}")
    return MatchResult(
        match_id=game.id,
        event_time=game.event_time,
        game_type=GameType(game.game_type),
        team1=TeamResult(player_ids=tuple(game.team1_player_ids), score=game.team1_score),
        team2=TeamResult(player_ids=tuple(game.team2_player_ids), score=game.team2_score),
        rating_snapshots=dict(snapshots or {}),
    )


def _snapshots_by_game(
    session: Session,
    game_ids: Iterable[str],
    rating_system_id: int,
) -> dict[str, dict[str, RatingSnapshot]]:
    ids = list(game_ids)
    if not ids:
        return {}
    rows = session.execute(
        select(
            PlayerRatingChange.game_id,
            PlayerRatingChange.player_id,
            PlayerRatingChange.pre_rating,
            PlayerRatingChange.post_rating,
        ).where(
            PlayerRatingChange.rating_system_id == rating_system_id,
            PlayerRatingChange.game_id.in_(ids),
        )
    ).all()

    snapshots: dict[str, dict[str, RatingSnapshot]] = defaultdict(dict)
    for game_id, player_id, pre_rating, post_rating in rows:
        snapshots[game_id][player_id] = RatingSnapshot(before=pre_rating, after=post_rating)
    return snapshots


def fetch_games(session: Session, *, lookback_days: int | None = None) -> list[Game]:
    """Fetch game rows in deterministic chronological order."""
    statement = select(Game).order_by(Game.event_time, Game.id)
    cutoff_time = _build_cutoff_time(lookback_days)
    if cutoff_time is not None:
        statement = statement.where(Game.event_time >= cutoff_time)
    return list(session.execute(statement).scalars().all())


def fetch_match_results(session: Session, *, lookback_days: int | None = None) -> list[MatchResult]:
    """Fetch every game as a ``MatchResult`` in chronological order, without snapshots."""
    return [game_to_match(game) for game in fetch_games(session, lookback_days=lookback_days)]


def fetch_player_history(
    session: Session,
    player_id: str,
    *,
    rating_system_id: int | None = None,
) -> list[MatchResult]:
    """All games involving ``player_id``, with that system's snapshots attached when given."""
    # Roster membership lives in JSON columns, so filter in Python for dialect portability.
    games = [
        game
        for game in fetch_games(session)
        if player_id in game.team1_player_ids or player_id in game.team2_player_ids
    ]
    if rating_system_id is None:
        return [game_to_match(game) for game in games]

    snapshots = _snapshots_by_game(session, (game.id for game in games), rating_system_id)
    return [game_to_match(game, snapshots.get(game.id)) for game in games]


def fetch_recent_match_results(
    session: Session,
    *,
    limit: int,
    rating_system_id: int,
) -> list[MatchResult]:
    """The newest ``limit`` games, newest first, with that system's snapshots attached."""
    games = list(
        session.execute(
            select(Game).order_by(Game.event_time.desc(), Game.id.desc()).limit(limit)
        ).scalars().all()
    )
    snapshots = _snapshots_by_game(session, (game.id for game in games), rating_system_id)
    return [game_to_match(game, snapshots.get(game.id)) for game in games]


def fetch_player(session: Session, query: str) -> Player | None:
    """Look a player up by id, then by exact name, then by unique partial name (case-insensitive)."""
    player = session.get(Player, query)
    if player is not None:
        return player

    lowered = query.strip().lower()
    exact = session.execute(select(Player).where(func.lower(Player.name) == lowered)).scalars().all()
    if len(exact) == 1:
        return exact[0]

    partial = session.execute(
        select(Player)
        .where(func.lower(Player.name).contains(lowered, autoescape=True))
        .order_by(Player.name)
    ).scalars().all()
    if len(partial) > 1:
        names = [candidate.name for candidate in partial]
        raise ValueError(f"Player query {query!r} is ambiguous; matches: {names}")
    return partial[0] if partial else None


def load_player_tallies(session: Session) -> dict[str, PlayerTally]:
    players = session.execute(select(Player)).scalars().all()
    return {
        player.id: PlayerTally(
            player_id=player.id,
            rating=player.rating,
            wins=player.wins,
            losses=player.losses,
            draws=player.draws,
            points_for=player.points_for,
            points_against=player.points_against,
        )
        for player in players
    }


def apply_player_tallies(session: Session, tallies: Mapping[str, PlayerTally]) -> int:
    """Write ratings and result tallies onto existing player rows; return rows changed."""
    if not tallies:
        return 0

    players = session.execute(select(Player).where(Player.id.in_(list(tallies)))).scalars().all()
    updated = 0
    for player in players:
        tally = tallies[player.id]
        values = {
            "rating": tally.rating,
            "wins": tally.wins,
            "losses": tally.losses,
            "draws": tally.draws,
            "points_for": tally.points_for,
            "points_against": tally.points_against,
        }
        if all(getattr(player, key) == value for key, value in values.items()):
            continue
        for key, value in values.items():
            setattr(player, key, value)
        player.updated_at = datetime.now(UTC).replace(tzinfo=None)
        updated += 1
    session.flush()
    return updated


def fetch_latest_ratings(session: Session, *, rating_system_id: int) -> dict[str, float]:
    """Each player's ``post_rating`` from their most recent game in one system."""
    rows = session.execute(
        select(
            PlayerRatingChange.player_id,
            PlayerRatingChange.post_rating,
        )
        .where(PlayerRatingChange.rating_system_id == rating_system_id)
        .order_by(PlayerRatingChange.event_time, PlayerRatingChange.game_id)
    ).all()
    return {player_id: post_rating for player_id, post_rating in rows}


def sync_player_ratings(session: Session, *, rating_system_id: int) -> int:
    """Copy each player's latest ``post_rating`` in one system onto their row; keep tallies."""
    latest = fetch_latest_ratings(session, rating_system_id=rating_system_id)
    tallies = load_player_tallies(session)
    synced = {
        player_id: replace(tally, rating=latest[player_id])
        for player_id, tally in tallies.items()
        if player_id in latest
    }
    return apply_player_tallies(session, synced)


__all__ = [
    "apply_player_tallies",
    "fetch_games",
    "fetch_latest_ratings",
    "fetch_match_results",
    "fetch_player",
    "fetch_player_history",
    "fetch_recent_match_results",
    "game_to_match",
    "load_player_tallies",
    "sync_player_ratings",
]
