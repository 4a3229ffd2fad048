"""Play records and the points ledger. Both tables are append-only."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from casino.db.database import Base


class CasinoGame(Base):
    __tablename__ = "casino_games"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    challenge_id: Mapped[int] = mapped_column(Integer)  # 0 / -1 / catalog row id
    user_answer: Mapped[int] = mapped_column(Integer)
    bet_points: Mapped[int] = mapped_column(Integer)
    is_correct: Mapped[bool] = mapped_column(Boolean)
    points_won: Mapped[int] = mapped_column(Integer)  # signed
    played_at: Mapped[datetime] = mapped_column(DateTime)


class Score(Base):
    """One signed entry in a user's points ledger. Balance = SUM(points)."""
    __tablename__ = "scores"
    __table_args__ = (Index("ix_scores_user_game_type", "user_id", "game_type"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    game_type: Mapped[str] = mapped_column(String(30))  # GameType value
    points: Mapped[int] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime)
