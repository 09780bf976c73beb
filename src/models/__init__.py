"""ORM models."""

from models.base import Base
from models.game import Game
from models.player import Player
from models.ratings import PlayerRatingChange, RatingSystem

__all__ = [
    "Base",
    "Game",
    "Player",
    "PlayerRatingChange",
    "RatingSystem",
]
