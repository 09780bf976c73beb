"""Recent-form modules."""

from domain.form.calculator import (
    FormParameters,
    FormTrend,
    GameFormBreakdown,
    GameOutcome,
    PlayerForm,
    RatingSource,
    compute_player_form,
    explain_player_form,
    opponent_rating_at_game,
)

__all__ = [
    "FormParameters",
    "FormTrend",
    "GameFormBreakdown",
    "GameOutcome",
    "PlayerForm",
    "RatingSource",
    "compute_player_form",
    "explain_player_form",
    "opponent_rating_at_game",
]
