"""Protocolo de lock single-flight para execuções do reconciler."""

from __future__ import annotations

from abc import ABC, abstractmethod


class SyncLockProtocol(ABC):
    """Serializa execuções concorrentes sobre a mesma chave.

    Método canônico:
    - acquire(key, wait_seconds) -> str | None
      Retorna um owner token se obteve o lock, None se expirou a espera.
    - release(key, owner) -> None
      Libera apenas se o lock ainda pertence ao owner.
    """

    @abstractmethod
    async def acquire(self, key: str, wait_seconds: float) -> str | None:
        """Tenta obter o lock esperando no máximo wait_seconds."""

    @abstractmethod
    async def release(self, key: str, owner: str) -> None:
        """Libera o lock obtido por acquire()."""
