"""Testes do RedisSyncLock com mock assíncrono."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.infra.stores import RedisSyncLock
from utils.errors import PersistenceError


class TestRedisSyncLock:
    @pytest.mark.asyncio
    async def test_acquire_uses_set_nx_with_ttl(self) -> None:
        redis = MagicMock()
        redis.set = AsyncMock(return_value=True)
        lock = RedisSyncLock(redis, ttl_seconds=30)

        owner = await lock.acquire("sync_token:current", 1.0)

        assert owner is not None
        redis.set.assert_awaited_once_with(
            "relay_lock:sync_token:current", owner, nx=True, px=30000
        )

    @pytest.mark.asyncio
    async def test_acquire_returns_none_after_wait(self) -> None:
        redis = MagicMock()
        redis.set = AsyncMock(return_value=None)
        lock = RedisSyncLock(redis, poll_interval_seconds=0.001)

        owner = await lock.acquire("k", 0.01)

        assert owner is None
        assert redis.set.await_count >= 1

    @pytest.mark.asyncio
    async def test_acquire_retries_until_free(self) -> None:
        redis = MagicMock()
        redis.set = AsyncMock(side_effect=[None, None, True])
        lock = RedisSyncLock(redis, poll_interval_seconds=0.001)

        owner = await lock.acquire("k", 1.0)

        assert owner is not None
        assert redis.set.await_count == 3

    @pytest.mark.asyncio
    async def test_release_compares_owner(self) -> None:
        redis = MagicMock()
        redis.eval = AsyncMock(return_value=1)
        lock = RedisSyncLock(redis)

        await lock.release("k", "owner-1")

        args = redis.eval.await_args.args
        assert args[1:] == (1, "relay_lock:k", "owner-1")

    @pytest.mark.asyncio
    async def test_redis_errors_become_persistence_error(self) -> None:
        redis = MagicMock()
        redis.set = AsyncMock(side_effect=ConnectionError("down"))
        lock = RedisSyncLock(redis)

        with pytest.raises(PersistenceError):
            await lock.acquire("k", 0.1)
