"""Rebuild pipeline for configured DUPR rating systems."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.ratings.dupr.calculator import PlayerRatingEvent
from domain.ratings.dupr.config import DuprSystemConfig
from domain.ratings.dupr.player_calculator import PlayerRatingCalculator
from models import Game, Player
from repositories.ratings.common import apply_player_tallies, fetch_games, game_to_match
from repositories.ratings.definitions import PLAYER_RATING_REPOSITORY

PROGRESS_EVERY = 10_000


@dataclass(frozen=True)
class RebuildSummary:
    """Outcome for one rebuilt system config."""

    system_name: str
    config_file: str
    system_id: int
    processed_games: int
    inserted_events: int
    tracked_players: int
    synced_players: int
    dry_run: bool


def _check_rosters(session: Session, games: list[Game]) -> None:
    known = set(session.execute(select(Player.id)).scalars())
    for game in games:
        for player_id in (*game.team1_player_ids, *game.team2_player_ids):
            if player_id not in known:
                raise ValueError(f"game_id={game.id} references unknown player_id={player_id}")


def rebuild_rating_system(
    *,
    session_factory,
    system_config: DuprSystemConfig,
    batch_size: int = 5000,
    dry_run: bool = False,
    sync_players: bool = False,
    echo: Callable[[str], None] | None = None,
) -> RebuildSummary:
    """Recompute one system from scratch by replaying every game in chronological order.

    Each game's ``allow_draw`` flag decides whether a tied score is accepted.
    With ``sync_players`` the final ratings and result tallies are written back
    to the ``players`` table in the same transaction as the events.
    Every roster id must exist in ``players``; otherwise ``ValueError`` is raised
    before the system row or any event is written.
    """
    if batch_size <= 0:
        raise ValueError("batch_size must be greater than 0")

    repository = PLAYER_RATING_REPOSITORY
    calculator = PlayerRatingCalculator(system_config.parameters, allow_draws=False)
    config_file = system_config.file_path.name

    with session_factory() as session:
        games = fetch_games(session)
        total_games = len(games)
        _check_rosters(session, games)

        system = repository.upsert_system(
            session,
            name=system_config.name,
            description=system_config.description,
            config_json=system_config.as_config_json(),
        )
        system_id = int(system.id)

        if dry_run:
            try:
                for game in games:
                    calculator.process_match(game_to_match(game), allow_draws=game.allow_draw)
            finally:
                session.rollback()

            tracked_players = calculator.tracked_entity_count()
            if echo is not None:
                echo(
                    f"[dry-run] config={config_file} "
                    f"system={system_config.name} "
                    f"processed_games={total_games} "
                    f"tracked_players={tracked_players}"
                )
            return RebuildSummary(
                system_name=system_config.name,
                config_file=config_file,
                system_id=system_id,
                processed_games=total_games,
                inserted_events=0,
                tracked_players=tracked_players,
                synced_players=0,
                dry_run=True,
            )

        inserted_events = 0
        synced_players = 0
        buffered_events: list[PlayerRatingEvent] = []
        try:
            repository.delete_events_for_system(session, system_id)

            for index, game in enumerate(games, start=1):
                match = game_to_match(game)
                buffered_events.extend(calculator.process_match(match, allow_draws=game.allow_draw))

                if len(buffered_events) >= batch_size:
                    repository.insert_events(session, buffered_events, system_id=system_id)
                    inserted_events += len(buffered_events)
                    buffered_events = []

                if echo is not None and index % PROGRESS_EVERY == 0:
                    echo(f"config={config_file} processed_games={index}/{total_games}")

            if buffered_events:
                repository.insert_events(session, buffered_events, system_id=system_id)
                inserted_events += len(buffered_events)
                buffered_events = []

            if sync_players:
                synced_players = apply_player_tallies(session, calculator.tallies())

            session.commit()
        except Exception:
            session.rollback()
            raise

        tracked_players = repository.count_tracked_entities(session, system_id=system_id)
        if echo is not None:
            echo(
                "completed "
                f"config={config_file} "
                f"system={system_config.name} "
                f"system_id={system_id} "
                f"processed_games={total_games} "
                f"inserted_events={inserted_events} "
                f"tracked_players={tracked_players} "
                f"synced_players={synced_players}"
            )

        return RebuildSummary(
            system_name=system_config.name,
            config_file=config_file,
            system_id=system_id,
            processed_games=total_games,
            inserted_events=inserted_events,
            tracked_players=tracked_players,
            synced_players=synced_players,
            dry_run=False,
        )


__all__ = ["PROGRESS_EVERY", "RebuildSummary", "rebuild_rating_system"]
