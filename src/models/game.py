"""games table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Enum, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, JSONType


class Game(Base):
    """One finished singles or doubles match."""

    __tablename__ = "games"
    __table_args__ = (
        CheckConstraint("team1_score >= 0 AND team2_score >= 0", name="ck_games_scores_non_negative"),
        Index("idx_games_event_time", "event_time", "id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    game_type: Mapped[str] = mapped_column(
        Enum("Singles", "Doubles", name="game_type", native_enum=False),
        nullable=False,
    )
    event_time: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    team1_player_ids: Mapped[list[str]] = mapped_column(JSONType, nullable=False)
    team2_player_ids: Mapped[list[str]] = mapped_column(JSONType, nullable=False)
    team1_score: Mapped[int] = mapped_column(Integer, nullable=False)
    team2_score: Mapped[int] = mapped_column(Integer, nullable=False)
    tournament_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    allow_draw: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
