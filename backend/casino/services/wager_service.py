"""Wager service - resolves a bet on a challenge into a ledger entry.

A play writes three things in one transaction: the CasinoGame record, the
Score ledger entry and the user's updated stats. The cached balance is
dropped before the commit; derived views (refreshed balance, global
counters, active users) are pushed only after it.
"""

from dataclasses import dataclass

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from casino.core.challenge import STATELESS_SOURCE_BY_ID, Challenge, SourceKind
from casino.core.clock import utcnow
from casino.core.errors import ChallengeNotFound, InsufficientFunds, UserNotFound
from casino.core.wager import WagerBreakdown, compute_payout
from casino.core.zodiac import luck_multiplier
from casino.models.game import CasinoGame
from casino.models.user import User
from casino.schemas.challenge import ChallengeData
from casino.services.cache_service import CacheService, active_users_key, points_key
from casino.services.challenge_store import ChallengeStore
from casino.services.points_service import PointsService
from casino.services.sourcing_service import ChallengeSourcingPipeline
from casino.services.stats_service import StatsService

logger = structlog.get_logger()

ACTIVE_USERS_TTL = 2 * 24 * 3600


@dataclass(frozen=True)
class PlayResult:
    game: CasinoGame
    breakdown: WagerBreakdown
    new_balance: int
    explanation: str


def result_message(points_won: int, is_correct: bool) -> str:
    if is_correct:
        return f"Correct! +{points_won} points!"
    return f"Not this time. -{abs(points_won)} points"


class WagerService:
    def __init__(
        self,
        db: AsyncSession,
        cache: CacheService,
        sourcing: ChallengeSourcingPipeline,
    ):
        self.db = db
        self.cache = cache
        self.sourcing = sourcing
        self.points = PointsService(db, cache)
        self.stats = StatsService(db)

    async def load_played_challenge(
        self, challenge_id: int, challenge_data: ChallengeData | None
    ) -> Challenge:
        """Rebuild the challenge a client is answering.

        Stateless ids (0, -1) carry their content inline; catalog ids are
        looked up and any inline content is ignored.
        """
        kind = STATELESS_SOURCE_BY_ID.get(challenge_id)
        if kind is not None:
            if challenge_data is None:
                raise ChallengeNotFound("Challenge data is required for AI and document challenges")
            return Challenge(kind, challenge_data.to_content())

        if challenge_id <= 0:
            raise ChallengeNotFound()
        row = await ChallengeStore(self.db).get(challenge_id)
        if row is None:
            raise ChallengeNotFound()
        return row.to_challenge()

    async def resolve(
        self, user_id: int, challenge: Challenge, user_answer: int, bet_points: int
    ) -> PlayResult:
        user = await self.db.get(User, user_id)
        if user is None:
            raise UserNotFound()

        balance = await self.points.get_balance(user_id)
        if balance < bet_points:
            raise InsufficientFunds(balance, bet_points)

        now = utcnow()
        is_correct = user_answer == challenge.content.correct_answer
        daily = await self.sourcing.daily_pointer_for(challenge, now.date())

        try:
            stats = await self.stats.get_or_init(user_id, now)
            breakdown = compute_payout(
                bet_points=bet_points,
                is_correct=is_correct,
                zodiac_multiplier=luck_multiplier(user.zodiac_sign),
                is_ai_challenge=challenge.kind is SourceKind.AI_GENERATED,
                is_daily_challenge=daily is not None,
                daily_multiplier=daily.bonus_multiplier if daily is not None else 1,
                current_streak=stats.current_streak,
            )

            game = CasinoGame(
                user_id=user_id,
                challenge_id=challenge.id,
                user_answer=user_answer,
                bet_points=bet_points,
                is_correct=is_correct,
                points_won=breakdown.points_won,
                played_at=now,
            )
            self.db.add(game)
            self.points.add_entry(user_id, challenge.game_type, breakdown.points_won)
            await self.stats.record_play(user_id, is_correct, breakdown.points_won, now)
            # A failed refresh below must leave a miss, not the pre-play balance
            await self.cache.delete(points_key(user_id))
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error("play_resolution_failed", user_id=user_id, challenge_id=challenge.id, exc_info=True)
            raise

        new_balance = await self.points.refresh_balance(user_id)
        await self.cache.increment_stat("total_games")
        if is_correct:
            await self.cache.increment_stat("games_won")
        await self.cache.add_to_set(active_users_key(now.date()), user_id, ACTIVE_USERS_TTL)

        logger.info(
            "play_resolved",
            user_id=user_id,
            challenge_id=challenge.id,
            source=challenge.kind.value,
            bet_points=bet_points,
            is_correct=is_correct,
            points_won=breakdown.points_won,
            daily=breakdown.daily_bonus_applied,
            streak_bonus=breakdown.streak_bonus,
        )
        return PlayResult(
            game=game,
            breakdown=breakdown,
            new_balance=new_balance,
            explanation=challenge.content.explanation or "Challenge completed!",
        )
