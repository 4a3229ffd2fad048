"""Shared FastAPI dependencies: current user and service wiring."""

import redis.asyncio as aioredis
from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from casino.db.database import get_db
from casino.db.mongo import get_snippet_collection
from casino.db.redis import get_redis
from casino.models.user import User
from casino.services.ai_service import AIChallengeGenerator, ai_generator
from casino.services.cache_service import CacheService
from casino.services.document_store import DocumentChallengeStore
from casino.services.sourcing_service import ChallengeSourcingPipeline
from casino.services.wager_service import WagerService


async def get_cache(redis: aioredis.Redis = Depends(get_redis)) -> CacheService:
    return CacheService(redis)


async def get_document_store() -> DocumentChallengeStore | None:
    return DocumentChallengeStore(get_snippet_collection())


async def get_ai_generator() -> AIChallengeGenerator | None:
    return ai_generator


async def get_sourcing(
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
    documents: DocumentChallengeStore | None = Depends(get_document_store),
    ai: AIChallengeGenerator | None = Depends(get_ai_generator),
) -> ChallengeSourcingPipeline:
    return ChallengeSourcingPipeline(db, cache, documents, ai)


async def get_wager_service(
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
    sourcing: ChallengeSourcingPipeline = Depends(get_sourcing),
) -> WagerService:
    return WagerService(db, cache, sourcing)


async def get_current_user(
    authorization: str | None = Header(default=None),
    cache: CacheService = Depends(get_cache),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve ``Authorization: Bearer <token>`` to a user via the session cache."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")

    token = authorization.removeprefix("Bearer ").strip()
    user_id = await cache.get_session_user_id(token)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Session expired or invalid")

    user = await db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Session expired or invalid")
    return user
