"""DUPR-scale rating modules."""

from domain.ratings.dupr.calculator import (
    PlayerRatingEvent,
    RatingParameters,
    calculate_expected_score,
    compute_rating_update,
    explain_rating_update,
    performance_multiplier,
    score_margin_multiplier,
    underdog_multiplier,
)
from domain.ratings.dupr.config import (
    DuprSystemConfig,
    load_dupr_system_config,
    load_dupr_system_configs,
)
from domain.ratings.dupr.conversion import convert_elo_to_dupr, looks_like_elo

__all__ = [
    "DuprSystemConfig",
    "PlayerRatingEvent",
    "RatingParameters",
    "calculate_expected_score",
    "compute_rating_update",
    "convert_elo_to_dupr",
    "explain_rating_update",
    "load_dupr_system_config",
    "load_dupr_system_configs",
    "looks_like_elo",
    "performance_multiplier",
    "score_margin_multiplier",
    "underdog_multiplier",
]
