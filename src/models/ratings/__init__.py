"""Rating-system ORM models."""

from models.ratings.event import PlayerRatingChange
from models.ratings.system import RatingSystem

__all__ = ["PlayerRatingChange", "RatingSystem"]
