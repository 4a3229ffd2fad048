"""Redis connection pool, opened in the app lifespan."""

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

from casino.config import settings

logger = structlog.get_logger()

_pool: redis.Redis | None = None


async def init_redis(url: str | None = None) -> bool:
    """Open the pool and report whether Redis answers.

    An unreachable server does not block startup: every cache read degrades
    to a miss until it comes back.
    """
    global _pool
    _pool = redis.from_url(url or settings.REDIS_URL, encoding="utf-8", decode_responses=True)
    try:
        await _pool.ping()
    except RedisError as exc:
        logger.warning("redis_unreachable", error=str(exc))
        return False
    return True


async def close_redis() -> None:
    global _pool
    if _pool is not None:
        await _pool.aclose()
        _pool = None


def get_redis() -> redis.Redis:
    """FastAPI dependency for the shared pool."""
    if _pool is None:
        raise RuntimeError("Redis not initialized; init_redis() runs in the app lifespan")
    return _pool
