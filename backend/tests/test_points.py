"""Tests for balances - the Score ledger is the truth, Redis is a cache."""

from redis.exceptions import ConnectionError as RedisConnectionError

from casino.core.challenge import GameType
from casino.services.cache_service import CacheService, points_key
from casino.services.points_service import PointsService
from conftest import create_user


class BrokenRedis:
    """Every command fails as if Redis were unreachable."""

    def __getattr__(self, name):
        async def _fail(*args, **kwargs):
            raise RedisConnectionError("redis is down")
        return _fail


async def test_balance_is_ledger_sum(db, cache):
    user = await create_user(db, cache, points=100)
    points = PointsService(db, cache)
    points.add_entry(user.id, GameType.CASINO, 20)
    points.add_entry(user.id, GameType.AI_CHALLENGE, -15)
    await db.flush()

    assert await points.ledger_balance(user.id) == 105
    assert await points.get_balance(user.id) == 105


async def test_unknown_user_has_zero_balance(db, cache):
    assert await PointsService(db, cache).ledger_balance(999) == 0


async def test_balance_read_populates_cache(db, cache, redis):
    user = await create_user(db, cache, points=100)

    await PointsService(db, cache, ttl=1800).get_balance(user.id)

    assert await redis.get(points_key(user.id)) == "100"
    assert 0 < await redis.ttl(points_key(user.id)) <= 1800


async def test_cached_balance_is_served(db, cache, redis):
    user = await create_user(db, cache, points=100)
    await redis.set(points_key(user.id), "42")

    assert await PointsService(db, cache).get_balance(user.id) == 42


async def test_refresh_overwrites_stale_cache(db, cache, redis):
    user = await create_user(db, cache, points=100)
    await redis.set(points_key(user.id), "42")

    assert await PointsService(db, cache).refresh_balance(user.id) == 100
    assert await redis.get(points_key(user.id)) == "100"


async def test_cache_outage_falls_back_to_ledger(db, cache):
    user = await create_user(db, cache, points=100)
    broken = CacheService(BrokenRedis())

    assert await PointsService(db, broken).get_balance(user.id) == 100
