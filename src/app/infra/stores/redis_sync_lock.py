"""Redis Sync Lock: serialização single-flight do reconciler.

Usa SET NX PX com valor de owner para aquisição atômica e um script Lua
de compare-and-delete na liberação, para que um lock expirado e
readquirido por outra instância não seja removido por engano.

Keys são constantes internas (ex.: "sync_token:current"), nunca PII.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING
from uuid import uuid4

from app.protocols.sync_lock import SyncLockProtocol
from utils.errors import PersistenceError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

LOCK_PREFIX = "relay_lock:"

_RELEASE_SCRIPT = """
if redis.call('get', KEYS[1]) == ARGV[1] then
    return redis.call('del', KEYS[1])
end
return 0
"""


class RedisSyncLock(SyncLockProtocol):
    """Lock distribuído com TTL usando Redis (Upstash compatível).

    Args:
        async_redis_client: Cliente Redis assíncrono
        ttl_seconds: Expiração do lock (cobre execuções travadas)
        poll_interval_seconds: Intervalo entre tentativas de aquisição
    """

    def __init__(
        self,
        async_redis_client: AsyncRedis[bytes],
        ttl_seconds: float = 180.0,
        poll_interval_seconds: float = 0.1,
    ) -> None:
        self._redis = async_redis_client
        self._ttl_ms = int(ttl_seconds * 1000)
        self._poll_interval = poll_interval_seconds

    def _key(self, key: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{LOCK_PREFIX}{key}"

    async def acquire(self, key: str, wait_seconds: float) -> str | None:
        owner = uuid4().hex
        deadline = time.monotonic() + wait_seconds
        while True:
            try:
                was_set = await self._redis.set(self._key(key), owner, nx=True, px=self._ttl_ms)
            except Exception as exc:
                raise PersistenceError("Falha ao adquirir lock no Redis") from exc
            if was_set:
                logger.debug("sync_lock_acquired", extra={"key": key})
                return owner
            if time.monotonic() >= deadline:
                return None
            await asyncio.sleep(self._poll_interval)

    async def release(self, key: str, owner: str) -> None:
        try:
            await self._redis.eval(_RELEASE_SCRIPT, 1, self._key(key), owner)
        except Exception as exc:
            raise PersistenceError("Falha ao liberar lock no Redis") from exc
        logger.debug("sync_lock_released", extra={"key": key})
