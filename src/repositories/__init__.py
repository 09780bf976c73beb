"""Database repository helpers."""

from repositories.ratings.common import (
    apply_player_tallies,
    fetch_games,
    fetch_latest_ratings,
    fetch_match_results,
    fetch_player,
    fetch_player_history,
    fetch_recent_match_results,
    game_to_match,
    load_player_tallies,
    sync_player_ratings,
)
from repositories.ratings.definitions import PLAYER_RATING_REPOSITORY

__all__ = [
    "PLAYER_RATING_REPOSITORY",
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
