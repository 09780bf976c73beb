"""Rebuild pipeline tests against an in-memory SQLite database."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest
from sqlalchemy import func, select

from db import create_db_engine, create_session_factory
from domain.form.calculator import FormParameters
from domain.pipeline import rebuild_rating_system
from domain.ratings.dupr.calculator import RatingParameters
from domain.ratings.dupr.config import DuprSystemConfig
from models import Game, Player, PlayerRatingChange, RatingSystem
from repositories import PLAYER_RATING_REPOSITORY

START = datetime(2026, 5, 1, 18, 0, 0)


def _config(name: str = "test_system", **overrides: float) -> DuprSystemConfig:
    return DuprSystemConfig(
        name=name,
        description="pipeline test",
        file_path=Path(f"{name}.toml"),
        parameters=RatingParameters(**overrides),
        form=FormParameters(),
    )


def _game(
    game_id: str,
    day: int,
    team1: list[str],
    team2: list[str],
    score1: int,
    score2: int,
    *,
    allow_draw: bool = False,
) -> Game:
    return Game(
        id=game_id,
        game_type="Singles" if len(team1) == 1 else "Doubles",
        event_time=START + timedelta(days=day),
        team1_player_ids=team1,
        team2_player_ids=team2,
        team1_score=score1,
        team2_score=score2,
        allow_draw=allow_draw,
    )


@pytest.fixture
def session_factory():
    engine = create_db_engine("sqlite://")
    PLAYER_RATING_REPOSITORY.ensure_schema(engine)
    factory = create_session_factory(engine)
    with factory() as session:
        session.add_all(
            [
                Player(id="a", name="Alice Moreau"),
                Player(id="b", name="Bruno Costa"),
                Player(id="c", name="Chen Wei"),
                Player(id="d", name="Dana Alvarez"),
            ]
        )
        session.add_all(
            [
                # Inserted out of order on purpose; replay must sort by event_time.
                _game("g3", 3, ["a", "c"], ["b", "d"], 11, 6),
                _game("g1", 1, ["a"], ["b"], 11, 9),
                _game("g2", 2, ["c"], ["a"], 11, 4),
            ]
        )
        session.commit()
    yield factory
    engine.dispose()


def test_rebuild_writes_one_event_per_player_per_game(session_factory) -> None:
    lines: list[str] = []
    summary = rebuild_rating_system(
        session_factory=session_factory,
        system_config=_config(),
        echo=lines.append,
    )

    assert summary.processed_games == 3
    assert summary.inserted_events == 8
    assert summary.tracked_players == 4
    assert not summary.dry_run
    assert lines[-1].startswith("completed config=test_system.toml")
    assert "inserted_events=8" in lines[-1]

    with session_factory() as session:
        first = session.execute(
            select(PlayerRatingChange).where(
                PlayerRatingChange.game_id == "g1",
                PlayerRatingChange.player_id == "a",
            )
        ).scalar_one()
        assert first.pre_rating == pytest.approx(3.5)
        assert first.post_rating == pytest.approx(3.562)
        assert first.won

        second = session.execute(
            select(PlayerRatingChange).where(
                PlayerRatingChange.game_id == "g2",
                PlayerRatingChange.player_id == "a",
            )
        ).scalar_one()
        assert second.pre_rating == pytest.approx(first.post_rating)

        system = session.execute(select(RatingSystem)).scalar_one()
        assert system.config_json["rating"]["k_factor"] == pytest.approx(0.08)


def test_rebuild_is_repeatable(session_factory) -> None:
    first = rebuild_rating_system(session_factory=session_factory, system_config=_config(), batch_size=3)
    second = rebuild_rating_system(session_factory=session_factory, system_config=_config(), batch_size=3)

    assert first.system_id == second.system_id
    with session_factory() as session:
        total = session.scalar(select(func.count()).select_from(PlayerRatingChange))
        assert total == 8


def test_dry_run_writes_nothing(session_factory) -> None:
    lines: list[str] = []
    summary = rebuild_rating_system(
        session_factory=session_factory,
        system_config=_config(),
        dry_run=True,
        echo=lines.append,
    )

    assert summary.dry_run
    assert summary.inserted_events == 0
    assert summary.tracked_players == 4
    assert lines == [
        "[dry-run] config=test_system.toml system=test_system processed_games=3 tracked_players=4"
    ]
    with session_factory() as session:
        assert session.scalar(select(func.count()).select_from(PlayerRatingChange)) == 0
        assert session.scalar(select(func.count()).select_from(RatingSystem)) == 0


def test_sync_players_writes_final_ratings_and_tallies(session_factory) -> None:
    summary = rebuild_rating_system(
        session_factory=session_factory,
        system_config=_config(),
        sync_players=True,
    )
    assert summary.synced_players == 4

    with session_factory() as session:
        alice = session.get(Player, "a")
        latest = session.execute(
            select(PlayerRatingChange.post_rating).where(
                PlayerRatingChange.game_id == "g3",
                PlayerRatingChange.player_id == "a",
            )
        ).scalar_one()
        assert alice.rating == pytest.approx(latest)
        assert (alice.wins, alice.losses, alice.draws) == (2, 1, 0)
        assert (alice.points_for, alice.points_against) == (26, 26)


def test_disallowed_tie_rolls_back(session_factory) -> None:
    with session_factory() as session:
        session.add(_game("g4", 4, ["a"], ["b"], 7, 7))
        session.commit()

    with pytest.raises(ValueError, match="Match cannot end in a tie"):
        rebuild_rating_system(session_factory=session_factory, system_config=_config())

    with session_factory() as session:
        assert session.scalar(select(func.count()).select_from(PlayerRatingChange)) == 0
        assert session.scalar(select(func.count()).select_from(RatingSystem)) == 0


def test_allowed_tie_is_rated_as_draw(session_factory) -> None:
    with session_factory() as session:
        session.add(_game("g4", 4, ["a"], ["b"], 7, 7, allow_draw=True))
        session.commit()

    summary = rebuild_rating_system(session_factory=session_factory, system_config=_config())
    assert summary.inserted_events == 10

    with session_factory() as session:
        draw_rows = session.execute(
            select(PlayerRatingChange).where(PlayerRatingChange.game_id == "g4")
        ).scalars().all()
        assert all(row.drew for row in draw_rows)
        assert all(row.actual_score == pytest.approx(0.5) for row in draw_rows)


def test_invalid_batch_size_raises(session_factory) -> None:
    with pytest.raises(ValueError, match="batch_size"):
        rebuild_rating_system(session_factory=session_factory, system_config=_config(), batch_size=0)


@pytest.mark.parametrize("dry_run", [False, True])
def test_unknown_roster_player_is_rejected_before_writing(session_factory, dry_run: bool) -> None:
    with session_factory() as session:
        session.add(_game("g4", 4, ["a"], ["zz"], 11, 3))
        session.commit()

    with pytest.raises(ValueError, match="game_id=g4 references unknown player_id=zz"):
        rebuild_rating_system(session_factory=session_factory, system_config=_config(), dry_run=dry_run)

    with session_factory() as session:
        assert session.scalar(select(func.count()).select_from(PlayerRatingChange)) == 0
        assert session.scalar(select(func.count()).select_from(RatingSystem)) == 0
