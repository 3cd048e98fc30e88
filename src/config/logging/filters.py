"""Filters de logging para injeção de contexto e redação.

Filters são responsáveis por adicionar campos contextuais
aos logs sem que o chamador precise informá-los manualmente.

Campos injetados:
- correlation_id: ID de rastreamento da notificação
- service: Nome do serviço (ex: calendar-relay)

Campos redigidos:
- sync_token / next_token: cursores opacos do provider
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

# Campos de `extra` que carregam cursores de continuação do provider
SENSITIVE_TOKEN_FIELDS = ("sync_token", "next_token")

_VISIBLE_SUFFIX = 4


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    Importante: nunca adicionar payloads brutos de eventos nos logs.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id atual.
            Se não fornecida, usa string vazia como fallback.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Adiciona correlation_id e service ao record.

        Se correlation_id já foi passado via `extra`, preserva o valor.
        """
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class SyncTokenRedactionFilter(logging.Filter):
    """Mascara sync tokens passados via `extra`.

    Mantém apenas os últimos caracteres para permitir correlacionar
    avanços de token entre logs sem expor o cursor.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for field in SENSITIVE_TOKEN_FIELDS:
            value = getattr(record, field, None)
            if isinstance(value, str) and value:
                setattr(record, field, mask_token(value))
        return True


def mask_token(value: str) -> str:
    """Retorna o token mascarado (ex: '***abcd')."""
    if len(value) <= _VISIBLE_SUFFIX:
        return "***"
    return f"***{value[-_VISIBLE_SUFFIX:]}"
