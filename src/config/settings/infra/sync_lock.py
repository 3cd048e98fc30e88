"""Settings do lock single-flight do reconciler."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

SyncLockBackend = Literal["none", "memory", "redis"]


@dataclass(frozen=True)
class SyncLockSettings:
    """Configurações do lock de reconciliação.

    Attributes:
        backend: none (sem serialização), memory (por processo) ou redis
        ttl_seconds: Expiração do lock no Redis (maior que o timeout de fetch)
        wait_seconds: Espera máxima antes de seguir sem o lock
    """

    backend: SyncLockBackend = "memory"
    ttl_seconds: float = 180.0
    wait_seconds: float = 30.0

    def validate(self, redis_url: str) -> list[str]:
        errors: list[str] = []
        if self.backend == "redis" and not redis_url:
            errors.append("SYNC_LOCK_BACKEND=redis requer REDIS_URL")
        if self.wait_seconds >= self.ttl_seconds:
            errors.append("SYNC_LOCK_WAIT_SECONDS deve ser menor que SYNC_LOCK_TTL_SECONDS")
        return errors


def _load_sync_lock_from_env() -> SyncLockSettings:
    backend_str = os.getenv("SYNC_LOCK_BACKEND", "memory").lower()
    backend: SyncLockBackend = (
        backend_str if backend_str in ("none", "memory", "redis") else "memory"
    )
    return SyncLockSettings(
        backend=backend,
        ttl_seconds=float(os.getenv("SYNC_LOCK_TTL_SECONDS", "180")),
        wait_seconds=float(os.getenv("SYNC_LOCK_WAIT_SECONDS", "30")),
    )


@lru_cache(maxsize=1)
def get_sync_lock_settings() -> SyncLockSettings:
    """Retorna instância cacheada de SyncLockSettings."""
    return _load_sync_lock_from_env()
