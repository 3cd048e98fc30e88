"""Contrato do provider de mudanças (listagem incremental e completa).

Mantemos apenas o protocolo aqui para permitir trocar o provider sem
impactar o reconciler.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from app.domain.sync import ChangeSet


@runtime_checkable
class ChangeSourceProtocol(Protocol):
    """Contrato para buscar mudanças no provider."""

    async def fetch_since(self, token: str) -> ChangeSet:
        """Mudanças após o token.

        Raises:
            TokenExpiredError: token não é mais resolvível no provider.
            UpstreamError: qualquer outra falha.
        """
        ...

    async def fetch_all(self) -> ChangeSet:
        """Conjunto completo (com tombstones), ordenado por atualização.

        Raises:
            UpstreamError: falha do provider.
        """
        ...
