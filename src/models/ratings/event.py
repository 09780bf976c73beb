"""player_rating_changes table model."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Float, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.ratings.mixins import PlayerGameEventMixin


class PlayerRatingChange(PlayerGameEventMixin, Base):
    """Rating snapshot of one player for one game (before/after plus the multipliers used)."""

    __tablename__ = "player_rating_changes"
    __table_args__ = (
        UniqueConstraint(
            "rating_system_id",
            "player_id",
            "game_id",
            name="uq_player_rating_changes_system_player_game",
        ),
        CheckConstraint(
            "actual_score IN (0.0, 0.5, 1.0)",
            name="ck_player_rating_changes_actual_score",
        ),
        CheckConstraint(
            "expected_score >= 0.0 AND expected_score <= 1.0",
            name="ck_player_rating_changes_expected_score",
        ),
        Index("idx_player_rating_changes_system", "rating_system_id"),
        Index(
            "idx_player_rating_changes_system_player_event",
            "rating_system_id",
            "player_id",
            "event_time",
            "game_id",
        ),
        Index("idx_player_rating_changes_game", "game_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    rating_system_id: Mapped[int] = mapped_column(ForeignKey("rating_systems.id"), nullable=False)
    pre_rating: Mapped[float] = mapped_column(Float, nullable=False)
    rating_delta: Mapped[float] = mapped_column(Float, nullable=False)
    post_rating: Mapped[float] = mapped_column(Float, nullable=False)
    margin_multiplier: Mapped[float] = mapped_column(Float, nullable=False)
    performance_multiplier: Mapped[float] = mapped_column(Float, nullable=False)
    underdog_multiplier: Mapped[float] = mapped_column(Float, nullable=False)
    k_factor: Mapped[float] = mapped_column(Float, nullable=False)
