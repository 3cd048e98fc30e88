"""Gerenciamento de correlation_id para rastreamento de notificações.

O correlation_id acompanha uma notificação do webhook até o forward
downstream (header X-Correlation-ID) e é injetado em todos os logs.
Usa ContextVar para ser async-safe.

Uso:
    from app.observability import correlation_scope, get_correlation_id

    with correlation_scope(request.headers.get("x-correlation-id")):
        ...  # processar notificação

    correlation_id = get_correlation_id()
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual ou string vazia."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id; gera UUID se None. Retorna token para reset."""
    value = correlation_id or generate_correlation_id()
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Define o correlation_id durante o bloco e restaura ao sair."""
    token = set_correlation_id(correlation_id)
    try:
        yield _correlation_id.get()
    finally:
        reset_correlation_id(token)


def generate_correlation_id() -> str:
    return str(uuid.uuid4())
