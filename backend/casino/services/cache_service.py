"""Cache service - Redis-backed sessions, counters and cached views.

The cache is never required for correctness: every read that fails returns
"missing" and every write that fails is logged and dropped, so callers fall
back to the database.
"""

import json
from datetime import date, datetime

import redis.asyncio as aioredis
import structlog
from redis.exceptions import RedisError

logger = structlog.get_logger()

LEADERBOARD_KEY = "casino:leaderboard"
STATS_PREFIX = "stats:"


def points_key(user_id: int) -> str:
    return f"user:points:{user_id}"


def session_key(token: str) -> str:
    return f"session:{token}"


def ai_quota_key(now: datetime) -> str:
    return f"ai_challenge_limit:{now:%Y-%m-%d-%H}"


def active_users_key(day: date) -> str:
    return f"active:users:{day:%Y-%m-%d}"


class CacheService:
    def __init__(self, redis: aioredis.Redis):
        self.redis = redis

    async def get(self, key: str) -> str | None:
        try:
            return await self.redis.get(key)
        except RedisError as exc:
            logger.warning("cache_read_failed", key=key, error=str(exc))
            return None

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        try:
            await self.redis.set(key, value, ex=ttl)
            return True
        except RedisError as exc:
            logger.warning("cache_write_failed", key=key, error=str(exc))
            return False

    async def delete(self, key: str) -> bool:
        try:
            return bool(await self.redis.delete(key))
        except RedisError as exc:
            logger.warning("cache_delete_failed", key=key, error=str(exc))
            return False

    async def get_int(self, key: str) -> int | None:
        raw = await self.get(key)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            return None

    async def get_json(self, key: str):
        raw = await self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("cache_corrupt_entry", key=key)
            return None

    async def set_json(self, key: str, value, ttl: int | None = None) -> bool:
        return await self.set(key, json.dumps(value, ensure_ascii=False, default=str), ttl)

    async def increment(self, key: str, expire_seconds: int | None = None) -> int | None:
        """Atomically INCR a counter; set its expiry when the counter is created."""
        try:
            value = await self.redis.incr(key)
            if expire_seconds is not None and value == 1:
                await self.redis.expire(key, expire_seconds)
            return value
        except RedisError as exc:
            logger.warning("cache_increment_failed", key=key, error=str(exc))
            return None

    async def add_to_set(self, key: str, member: str | int, expire_seconds: int | None = None) -> bool:
        try:
            added = await self.redis.sadd(key, member)
            if expire_seconds is not None:
                await self.redis.expire(key, expire_seconds)
            return bool(added)
        except RedisError as exc:
            logger.warning("cache_set_add_failed", key=key, error=str(exc))
            return False

    async def set_size(self, key: str) -> int:
        try:
            return await self.redis.scard(key)
        except RedisError as exc:
            logger.warning("cache_set_size_failed", key=key, error=str(exc))
            return 0

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except RedisError:
            return False

    # --- Global game counters ---

    async def increment_stat(self, name: str) -> int | None:
        return await self.increment(STATS_PREFIX + name)

    async def get_stat(self, name: str) -> int:
        return await self.get_int(STATS_PREFIX + name) or 0

    # --- Sessions ---

    async def create_session(self, token: str, user_id: int, ttl: int) -> bool:
        return await self.set_json(session_key(token), {"user_id": user_id}, ttl)

    async def get_session_user_id(self, token: str) -> int | None:
        data = await self.get_json(session_key(token))
        if not isinstance(data, dict) or "user_id" not in data:
            return None
        return int(data["user_id"])
