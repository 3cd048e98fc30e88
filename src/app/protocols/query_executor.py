"""Contrato de execução de queries parametrizadas."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence


class QueryExecutorProtocol(Protocol):
    """Executa statement com parâmetros posicionais ($1, $2, ...).

    Valores nunca são interpolados no texto do statement.
    """

    async def execute(
        self,
        statement: str,
        params: Sequence[Any] = (),
    ) -> list[dict[str, Any]]: ...
