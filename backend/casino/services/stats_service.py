"""User stats service - streaks and win/loss totals per user."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from casino.core.clock import utcnow
from casino.db.database import insert_ignoring_conflicts
from casino.models.user_stats import UserStats


class StatsService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(self, user_id: int) -> UserStats | None:
        """Read-only lookup; does not create a row."""
        result = await self.db.execute(select(UserStats).where(UserStats.user_id == user_id))
        return result.scalar_one_or_none()

    async def find_many(self, user_ids: list[int]) -> dict[int, UserStats]:
        if not user_ids:
            return {}
        result = await self.db.execute(select(UserStats).where(UserStats.user_id.in_(user_ids)))
        return {s.user_id: s for s in result.scalars()}

    async def get_or_init(self, user_id: int, now: datetime | None = None) -> UserStats:
        """Return the user's stats, creating a zeroed row on first access.

        Safe under concurrent first access: the insert skips an existing row
        and everyone re-reads the single surviving row.
        """
        stats = await self.find(user_id)
        if stats is None:
            await self.db.execute(
                insert_ignoring_conflicts(self.db, UserStats, ["user_id"], user_id=user_id)
            )
            stats = await self.find(user_id)

        stats.refresh_played_today((now or utcnow()).date())
        return stats

    async def record_play(
        self, user_id: int, won: bool, points_delta: int, now: datetime | None = None
    ) -> UserStats:
        """Apply one resolved play to the user's stats (caller commits)."""
        now = now or utcnow()
        stats = await self.get_or_init(user_id, now)

        stats.total_games_played += 1
        stats.last_played_at = now
        stats.played_today = True

        if won:
            stats.games_won += 1
            stats.current_streak += 1
            stats.best_streak = max(stats.best_streak, stats.current_streak)
            stats.total_points_earned += max(0, points_delta)
        else:
            stats.current_streak = 0
            stats.total_points_lost += abs(min(0, points_delta))

        await self.db.flush()
        return stats
