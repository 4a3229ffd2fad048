"""Per-user rolling statistics that feed the streak bonus."""

from datetime import date, datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from casino.db.database import Base


class UserStats(Base):
    __tablename__ = "user_stats"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True)

    total_games_played: Mapped[int] = mapped_column(Integer, default=0)
    games_won: Mapped[int] = mapped_column(Integer, default=0)
    current_streak: Mapped[int] = mapped_column(Integer, default=0)
    best_streak: Mapped[int] = mapped_column(Integer, default=0)
    total_points_earned: Mapped[int] = mapped_column(Integer, default=0)
    total_points_lost: Mapped[int] = mapped_column(Integer, default=0)

    last_played_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    played_today: Mapped[bool] = mapped_column(Boolean, default=False)

    def refresh_played_today(self, today: date) -> None:
        """played_today only holds for the calendar day of the last play."""
        if self.last_played_at is None or self.last_played_at.date() < today:
            self.played_today = False

    @property
    def win_rate(self) -> float:
        if not self.total_games_played:
            return 0
        return round(self.games_won / self.total_games_played * 100, 1)
