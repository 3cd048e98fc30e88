"""Protocolo do store de continuação (canal ativo + sync token).

Interface estreita: duas entidades, quatro operações. Implementações
levantam PersistenceError em qualquer falha de backend; quem chama decide
se a falha é fatal.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


class ContinuationStoreProtocol(ABC):
    """Contrato assíncrono de persistência do estado de sincronização."""

    @abstractmethod
    async def get_active_channel(self) -> str | None:
        """Retorna o ID do canal ativo ou None se nenhum foi estabelecido."""

    @abstractmethod
    async def set_active_channel(
        self,
        channel_id: str,
        resource_id: str | None,
        expiration: datetime | None,
    ) -> None:
        """Ativa o canal e desativa todos os anteriores numa única transação."""

    @abstractmethod
    async def get_sync_token(self) -> str | None:
        """Retorna o sync token atual ou None se nunca houve sync."""

    @abstractmethod
    async def set_sync_token(self, token: str) -> None:
        """Upsert do token na chave singleton (last-write-wins)."""
