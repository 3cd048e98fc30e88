"""Protocolo de log append-only de notificações recebidas."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class NotificationLogProtocol(ABC):
    """Contrato append-only (sem updates, sem deletes)."""

    @abstractmethod
    async def append(self, record: dict[str, Any]) -> None:
        """Adiciona registro ao log.

        Args:
            record: Registro da notificação (sem tokens ou credenciais)
        """
