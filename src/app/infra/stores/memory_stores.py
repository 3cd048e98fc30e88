"""Stores em memória: apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from app.domain.sync import SYNC_TOKEN_KEY, SubscriptionChannel
from app.protocols.continuation_store import ContinuationStoreProtocol
from app.protocols.notification_log import NotificationLogProtocol
from app.protocols.sync_lock import SyncLockProtocol

if TYPE_CHECKING:
    from datetime import datetime


class MemoryContinuationStore(ContinuationStoreProtocol):
    """Store de continuação em memória: apenas para dev/test."""

    def __init__(self) -> None:
        self._channels: dict[str, SubscriptionChannel] = {}
        self._tokens: dict[str, str] = {}

    async def get_active_channel(self) -> str | None:
        for channel in self._channels.values():
            if channel.active:
                return channel.id
        return None

    async def set_active_channel(
        self,
        channel_id: str,
        resource_id: str | None,
        expiration: datetime | None,
    ) -> None:
        # Sem await entre as mutações: nenhuma outra task observa estado parcial.
        for existing in self._channels.values():
            existing.active = False
        self._channels[channel_id] = SubscriptionChannel(
            id=channel_id,
            resource_id=resource_id,
            expiration=expiration,
            active=True,
        )

    async def get_sync_token(self) -> str | None:
        return self._tokens.get(SYNC_TOKEN_KEY)

    async def set_sync_token(self, token: str) -> None:
        self._tokens[SYNC_TOKEN_KEY] = token

    def get_channels(self) -> list[SubscriptionChannel]:
        """Retorna todos os canais (apenas para testes)."""
        return [channel.model_copy() for channel in self._channels.values()]

    def token_rows(self) -> dict[str, str]:
        """Retorna os registros de token (apenas para testes)."""
        return dict(self._tokens)


class MemoryNotificationLog(NotificationLogProtocol):
    """Log de notificações em memória: apenas para dev/test."""

    def __init__(self, max_records: int = 10000) -> None:
        self._records: list[dict[str, Any]] = []
        self._max_records = max_records

    async def append(self, record: dict[str, Any]) -> None:
        self._records.append(dict(record))
        # Limita tamanho para evitar memory leak em dev
        if len(self._records) > self._max_records:
            self._records = self._records[-self._max_records:]

    def get_records(self) -> list[dict[str, Any]]:
        """Retorna todos os registros (apenas para testes)."""
        return list(self._records)


class MemorySyncLock(SyncLockProtocol):
    """Lock single-flight por processo, baseado em asyncio.Lock."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._owners: dict[str, str] = {}

    async def acquire(self, key: str, wait_seconds: float) -> str | None:
        lock = self._locks.setdefault(key, asyncio.Lock())
        try:
            await asyncio.wait_for(lock.acquire(), timeout=wait_seconds)
        except TimeoutError:
            return None
        owner = uuid4().hex
        self._owners[key] = owner
        return owner

    async def release(self, key: str, owner: str) -> None:
        lock = self._locks.get(key)
        if lock is None or self._owners.get(key) != owner or not lock.locked():
            return
        del self._owners[key]
        lock.release()
