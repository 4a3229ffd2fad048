"""User endpoints - register a player and read the current profile."""

import secrets

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from casino.api.deps import get_cache, get_current_user
from casino.config import settings
from casino.core.challenge import GameType
from casino.core.clock import utc_today
from casino.db.database import get_db
from casino.models.user import User
from casino.models.user_stats import UserStats
from casino.schemas.user import UserCreate, UserCreated, UserState, UserStatsView
from casino.services.cache_service import CacheService
from casino.services.points_service import PointsService
from casino.services.stats_service import StatsService

router = APIRouter()


def _user_to_response(user: User, points: int, stats: UserStats | None = None) -> UserState:
    """Convert ORM model to response schema with the current balance."""
    return UserState(
        id=user.id,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        tech_stack=user.tech_stack,
        experience_level=user.experience_level,
        zodiac_sign=user.zodiac_sign,
        points=points,
        created_at=user.created_at,
        stats=UserStatsView.model_validate(stats) if stats is not None else None,
    )


@router.post("/", response_model=UserCreated, status_code=201)
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Create a player, grant the starting points and open a session."""
    existing = await db.execute(select(User.id).where(User.username == data.username))
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(status_code=409, detail="Username already taken")

    user = User(
        username=data.username,
        first_name=data.first_name,
        last_name=data.last_name,
        tech_stack=data.tech_stack,
        experience_level=data.experience_level.value,
        zodiac_sign=data.zodiac_sign.value,
    )
    db.add(user)
    await db.flush()

    points = PointsService(db, cache)
    points.add_entry(user.id, GameType.INITIAL, settings.INITIAL_POINTS)
    await db.commit()
    await db.refresh(user)

    token = secrets.token_urlsafe(32)
    if not await cache.create_session(token, user.id, settings.SESSION_TTL):
        raise HTTPException(status_code=503, detail="Session store unavailable")

    return UserCreated(
        user=_user_to_response(user, await points.refresh_balance(user.id)),
        session_token=token,
    )


@router.get("/me", response_model=UserState)
async def get_me(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Get the current player's profile and balance."""
    points = await PointsService(db, cache).get_balance(user.id)
    stats = await StatsService(db).find(user.id)
    if stats is not None:
        stats.refresh_played_today(utc_today())
    return _user_to_response(user, points, stats)
