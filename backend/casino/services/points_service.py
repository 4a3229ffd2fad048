"""Points service - user balances over the Score ledger, cached in Redis."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from casino.config import settings
from casino.core.challenge import GameType
from casino.core.clock import utcnow
from casino.models.game import Score
from casino.services.cache_service import CacheService, points_key


class PointsService:
    def __init__(self, db: AsyncSession, cache: CacheService, ttl: int | None = None):
        self.db = db
        self.cache = cache
        self.ttl = ttl if ttl is not None else settings.POINTS_CACHE_TTL

    async def ledger_balance(self, user_id: int) -> int:
        """Ground truth: the sum of every ledger entry for the user."""
        result = await self.db.execute(
            select(func.coalesce(func.sum(Score.points), 0)).where(Score.user_id == user_id)
        )
        return int(result.scalar_one())

    async def get_balance(self, user_id: int) -> int:
        """Cache-aside read of the user's balance."""
        cached = await self.cache.get_int(points_key(user_id))
        if cached is not None:
            return cached
        return await self.refresh_balance(user_id)

    async def refresh_balance(self, user_id: int) -> int:
        """Recompute from the ledger and push the new total to the cache."""
        total = await self.ledger_balance(user_id)
        await self.cache.set(points_key(user_id), str(total), ttl=self.ttl)
        return total

    def add_entry(self, user_id: int, game_type: GameType, points: int) -> Score:
        """Stage a ledger entry in the current transaction."""
        score = Score(user_id=user_id, game_type=game_type.value, points=points, created_at=utcnow())
        self.db.add(score)
        return score
