"""Casino endpoints - get a challenge, play it, check points and rankings."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from casino.api.deps import (
    get_cache,
    get_current_user,
    get_sourcing,
    get_wager_service,
)
from casino.core.challenge import Difficulty
from casino.core.errors import NoChallengeAvailable
from casino.db.database import get_db
from casino.models.user import User
from casino.schemas.challenge import ChallengeResponse, ChallengeView, PlayOutcome, PlayRequest
from casino.schemas.leaderboard import LeaderboardResponse
from casino.schemas.user import UserStatsView
from casino.services.cache_service import CacheService
from casino.services.leaderboard_service import LeaderboardService
from casino.services.points_service import PointsService
from casino.services.sourcing_service import ChallengeSourcingPipeline
from casino.services.stats_service import StatsService
from casino.services.wager_service import WagerService, result_message

router = APIRouter()


@router.get("/challenge", response_model=ChallengeResponse)
async def get_challenge(
    user: User = Depends(get_current_user),
    sourcing: ChallengeSourcingPipeline = Depends(get_sourcing),
    cache: CacheService = Depends(get_cache),
    db: AsyncSession = Depends(get_db),
):
    """Get a challenge matching the player's stack and experience level."""
    challenge = await sourcing.get_challenge(user.tech_stack, Difficulty(user.experience_level))
    if challenge is None:
        raise NoChallengeAvailable()

    is_daily = await sourcing.daily_pointer_for(challenge) is not None
    points = await PointsService(db, cache).get_balance(user.id)
    return ChallengeResponse(
        challenge=ChallengeView.from_challenge(challenge, is_daily=is_daily),
        user_points=points,
    )


@router.get("/daily", response_model=ChallengeView)
async def get_daily_challenge(
    user: User = Depends(get_current_user),
    sourcing: ChallengeSourcingPipeline = Depends(get_sourcing),
):
    """Get today's daily challenge (3x payout when answered correctly)."""
    challenge = await sourcing.get_daily_challenge()
    if challenge is None:
        raise NoChallengeAvailable()
    return ChallengeView.from_challenge(challenge, is_daily=True)


@router.post("/play", response_model=PlayOutcome)
async def play(
    req: PlayRequest,
    user: User = Depends(get_current_user),
    wagers: WagerService = Depends(get_wager_service),
):
    """Answer a challenge with a bet and get the payout."""
    challenge = await wagers.load_played_challenge(req.challenge_id, req.challenge_data)
    result = await wagers.resolve(user.id, challenge, req.user_answer, req.bet_points)
    return PlayOutcome(
        is_correct=result.game.is_correct,
        points_won=result.game.points_won,
        new_balance=result.new_balance,
        explanation=result.explanation,
        message=result_message(result.game.points_won, result.game.is_correct),
    )


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    limit: int = Query(default=10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Top players by total points."""
    entries = await LeaderboardService(db, cache).get_top(limit)
    return LeaderboardResponse(leaderboard=entries)


@router.get("/points")
async def get_points(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Current point balance."""
    return {"points": await PointsService(db, cache).get_balance(user.id)}


@router.get("/stats", response_model=UserStatsView)
async def get_stats(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """The player's streak and win/loss stats."""
    stats = await StatsService(db).get_or_init(user.id)
    return UserStatsView.model_validate(stats)
