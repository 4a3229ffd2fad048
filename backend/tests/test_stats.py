"""Tests for per-user stats - lazy creation, streak transitions and played_today."""

from datetime import datetime, timedelta

from sqlalchemy import func, select

from casino.models.user_stats import UserStats
from casino.services.stats_service import StatsService
from conftest import create_user
from conftest import test_session_factory as session_factory

NOW = datetime(2024, 5, 1, 9, 0)


async def test_get_or_init_creates_zeroed_row(db, cache):
    user = await create_user(db, cache)
    stats = await StatsService(db).get_or_init(user.id, NOW)

    assert stats.user_id == user.id
    assert stats.total_games_played == 0
    assert stats.current_streak == 0
    assert stats.last_played_at is None
    assert stats.played_today is False
    assert stats.win_rate == 0


async def test_get_or_init_is_idempotent(db, cache):
    user = await create_user(db, cache)
    service = StatsService(db)

    first = await service.get_or_init(user.id, NOW)
    second = await service.get_or_init(user.id, NOW)

    assert first.id == second.id
    count = await db.execute(select(func.count(UserStats.id)).where(UserStats.user_id == user.id))
    assert count.scalar_one() == 1


async def test_find_does_not_create(db, cache):
    user = await create_user(db, cache)
    assert await StatsService(db).find(user.id) is None


async def test_win_extends_streak(db, cache):
    user = await create_user(db, cache)
    service = StatsService(db)

    await service.record_play(user.id, True, 20, NOW)
    stats = await service.record_play(user.id, True, 26, NOW)

    assert stats.total_games_played == 2
    assert stats.games_won == 2
    assert stats.current_streak == 2
    assert stats.best_streak == 2
    assert stats.total_points_earned == 46
    assert stats.total_points_lost == 0
    assert stats.last_played_at == NOW
    assert stats.played_today is True


async def test_loss_resets_streak_but_keeps_best(db, cache):
    user = await create_user(db, cache)
    service = StatsService(db)

    for _ in range(3):
        await service.record_play(user.id, True, 20, NOW)
    stats = await service.record_play(user.id, False, -10, NOW)

    assert stats.current_streak == 0
    assert stats.best_streak == 3
    assert stats.games_won == 3
    assert stats.total_games_played == 4
    assert stats.total_points_lost == 10
    assert stats.win_rate == 75.0


async def test_win_rate_rounds_to_one_decimal(db, cache):
    user = await create_user(db, cache)
    service = StatsService(db)

    await service.record_play(user.id, True, 20, NOW)
    await service.record_play(user.id, True, 20, NOW)
    stats = await service.record_play(user.id, False, -10, NOW)

    assert stats.win_rate == 66.7


async def test_played_today_clears_on_a_new_day(db, cache):
    user = await create_user(db, cache)
    service = StatsService(db)

    await service.record_play(user.id, True, 20, NOW)
    stats = await service.get_or_init(user.id, NOW + timedelta(days=1))

    assert stats.played_today is False
    assert stats.current_streak == 1


async def test_concurrent_first_access_reads_existing_row(db, cache):
    user = await create_user(db, cache)
    user_id = user.id
    await db.commit()

    async with session_factory() as other:
        other.add(UserStats(user_id=user_id, current_streak=4, total_games_played=4, games_won=4))
        await other.commit()

    service = StatsService(db)
    real_find = service.find
    lookups = []

    async def find_before_other_insert(uid):
        # The first lookup ran before the other request committed its row
        lookups.append(uid)
        if len(lookups) == 1:
            return None
        return await real_find(uid)

    service.find = find_before_other_insert
    stats = await service.get_or_init(user_id, NOW)

    assert len(lookups) == 2
    assert stats.current_streak == 4
    count = await db.execute(select(func.count(UserStats.id)).where(UserStats.user_id == user_id))
    assert count.scalar_one() == 1
