"""Leaderboard service - ranks users by ledger total, cached as one JSON blob.

The cached blob is only refreshed on a miss, so a new play shows up once the
entry expires (``LEADERBOARD_CACHE_TTL``). Users tied on points keep whatever
order the database returns.
"""

import structlog
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from casino.config import settings
from casino.core.challenge import GameType
from casino.models.game import Score
from casino.models.user import User
from casino.schemas.leaderboard import LeaderboardEntry
from casino.services.cache_service import LEADERBOARD_KEY, CacheService
from casino.services.stats_service import StatsService

logger = structlog.get_logger()


def _count_of(game_type: GameType):
    return func.sum(case((Score.game_type == game_type.value, 1), else_=0))


class LeaderboardService:
    def __init__(self, db: AsyncSession, cache: CacheService, ttl: int | None = None):
        self.db = db
        self.cache = cache
        self.ttl = ttl if ttl is not None else settings.LEADERBOARD_CACHE_TTL

    @staticmethod
    def cache_key(limit: int) -> str:
        return f"{LEADERBOARD_KEY}:{limit}"

    async def get_top(self, limit: int | None = None) -> list[LeaderboardEntry]:
        limit = limit or settings.LEADERBOARD_SIZE
        key = self.cache_key(limit)

        cached = await self.cache.get_json(key)
        if isinstance(cached, list):
            return [LeaderboardEntry.model_validate(item) for item in cached]

        entries = await self.compute_top(limit)
        await self.cache.set_json(key, [e.model_dump(mode="json") for e in entries], ttl=self.ttl)
        logger.info("leaderboard_recomputed", limit=limit, entries=len(entries))
        return entries

    async def compute_top(self, limit: int) -> list[LeaderboardEntry]:
        """Group the ledger by user, rank by total points, enrich with profile and stats."""
        total = func.sum(Score.points).label("total_points")
        result = await self.db.execute(
            select(
                Score.user_id,
                total,
                func.sum(case((Score.game_type != GameType.INITIAL.value, 1), else_=0)).label("games_played"),
                _count_of(GameType.AI_CHALLENGE).label("ai_games"),
                _count_of(GameType.DOCUMENT_CHALLENGE).label("document_games"),
                _count_of(GameType.CASINO).label("catalog_games"),
            )
            .group_by(Score.user_id)
            .order_by(total.desc())
            .limit(limit)
        )
        rows = result.all()
        if not rows:
            return []

        user_ids = [row.user_id for row in rows]
        users_result = await self.db.execute(select(User).where(User.id.in_(user_ids)))
        users = {u.id: u for u in users_result.scalars()}
        stats = await StatsService(self.db).find_many(user_ids)

        entries = []
        for row in rows:
            user = users.get(row.user_id)
            user_stats = stats.get(row.user_id)
            entries.append(LeaderboardEntry(
                username=user.username if user else "Unknown",
                first_name=user.first_name if user else "Unknown",
                zodiac_sign=user.zodiac_sign if user else "Unknown",
                total_points=int(row.total_points or 0),
                games_played=int(row.games_played or 0),
                ai_games=int(row.ai_games or 0),
                document_games=int(row.document_games or 0),
                catalog_games=int(row.catalog_games or 0),
                current_streak=user_stats.current_streak if user_stats else 0,
                best_streak=user_stats.best_streak if user_stats else 0,
                win_rate=user_stats.win_rate if user_stats else 0,
            ))
        return entries
