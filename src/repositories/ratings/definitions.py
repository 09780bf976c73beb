"""Concrete repository instance for persisted player rating snapshots."""

from __future__ import annotations

from typing import Any

from domain.ratings.dupr.calculator import PlayerRatingEvent
from models import Game, Player, PlayerRatingChange, RatingSystem
from repositories.ratings.base import BaseRatingRepository


def _event_to_row(event: PlayerRatingEvent, rating_system_id: int) -> dict[str, Any]:
    return {
        "rating_system_id": rating_system_id,
        "player_id": event.player_id,
        "game_id": event.match_id,
        "event_time": event.event_time,
        "team_number": event.team_number,
        "won": event.won,
        "drew": event.drew,
        "actual_score": event.actual_score,
        "expected_score": event.expected_score,
        "pre_rating": event.pre_rating,
        "rating_delta": event.rating_delta,
        "post_rating": event.post_rating,
        "margin_multiplier": event.margin_multiplier,
        "performance_multiplier": event.performance_multiplier,
        "underdog_multiplier": event.underdog_multiplier,
        "k_factor": event.k_factor,
    }


PLAYER_RATING_REPOSITORY = BaseRatingRepository[RatingSystem, PlayerRatingChange, PlayerRatingEvent](
    system_model=RatingSystem,
    event_model=PlayerRatingChange,
    system_id_column="rating_system_id",
    entity_id_column="player_id",
    event_to_row=_event_to_row,
    dependency_tables=(Player.__table__, Game.__table__),
)

__all__ = ["PLAYER_RATING_REPOSITORY"]
