"""Tests for the Redis pool lifecycle."""

import pytest

from casino.db import redis as redis_pool


async def test_get_redis_before_init():
    with pytest.raises(RuntimeError):
        redis_pool.get_redis()


async def test_close_without_init_is_a_no_op():
    await redis_pool.close_redis()
    with pytest.raises(RuntimeError):
        redis_pool.get_redis()
