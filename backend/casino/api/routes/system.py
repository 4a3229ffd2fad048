"""System endpoints - store health and global game counters."""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from casino.api.deps import get_cache, get_document_store
from casino.core.clock import utc_today, utcnow
from casino.db.database import get_db
from casino.services.cache_service import CacheService, active_users_key
from casino.services.document_store import DocumentChallengeStore

logger = structlog.get_logger()

router = APIRouter()


def _state(ok: bool) -> str:
    return "connected" if ok else "disconnected"


@router.get("/health")
async def health_check(
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
    documents: DocumentChallengeStore | None = Depends(get_document_store),
):
    try:
        await db.execute(text("SELECT 1"))
        database_ok = True
    except SQLAlchemyError as exc:
        logger.warning("database_ping_failed", error=str(exc))
        database_ok = False

    mongo_ok = documents is not None and await documents.ping()
    return {
        "status": "ok",
        "timestamp": utcnow().isoformat(),
        "databases": {
            "postgresql": _state(database_ok),
            "redis": _state(await cache.ping()),
            "mongodb": _state(mongo_ok),
        },
    }


@router.get("/api/stats")
async def get_system_stats(cache: CacheService = Depends(get_cache)):
    """Active players today and global play counters."""
    return {
        "active_users_today": await cache.set_size(active_users_key(utc_today())),
        "total_games_played": await cache.get_stat("total_games"),
        "games_won": await cache.get_stat("games_won"),
        "timestamp": utcnow().isoformat(),
    }
