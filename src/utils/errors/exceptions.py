"""Exceções do relay de notificações de calendário.

Taxonomia:
- PersistenceError: falha no store de continuação (canal ativo / sync token)
- UpstreamError: falha no provider de calendário (fatal para a invocação)
- TokenExpiredError: sync token não resolvível no provider (recuperável)
- DeliveryError: falha ao entregar o change-set ao downstream

Rejeição de canal não é exceção: é um ChannelDecision.REJECT.
"""

from __future__ import annotations


class RelayError(RuntimeError):
    """Base para falhas do relay."""


class PersistenceError(RelayError):
    """Falha ao ler/gravar estado de continuação."""


class UpstreamError(RelayError):
    """Falha ao consultar o provider de calendário."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        strategy: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.strategy = strategy


class TokenExpiredError(UpstreamError):
    """Provider sinalizou que o sync token expirou ou foi revogado."""


class DeliveryError(RelayError):
    """Falha ao entregar change-set ao sistema downstream."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
