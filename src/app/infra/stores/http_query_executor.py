"""Executor de queries via gateway HTTP do Postgres.

O gateway recebe {"query": str, "params": list} e responde {"rows": [...]}.
Statements usam apenas placeholders posicionais; valores seguem em params.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from app.infra.http import HttpClient, HttpError
from app.protocols.query_executor import QueryExecutorProtocol
from utils.errors import PersistenceError

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


class HttpQueryExecutor(QueryExecutorProtocol):
    """Executa statements parametrizados contra o endpoint configurado.

    Args:
        endpoint: URL do gateway (ENDPOINT_POSTGRES)
        http_client: Cliente HTTP com timeout configurado
    """

    def __init__(self, endpoint: str, http_client: HttpClient) -> None:
        if not endpoint:
            msg = "ENDPOINT_POSTGRES não configurado"
            raise ValueError(msg)
        self._endpoint = endpoint
        self._http = http_client

    async def execute(
        self,
        statement: str,
        params: Sequence[Any] = (),
    ) -> list[dict[str, Any]]:
        body = {"query": statement, "params": list(params)}
        try:
            response = await self._http.post(self._endpoint, json=body)
        except HttpError as exc:
            logger.error(
                "query_gateway_error",
                extra={"status_code": exc.status_code, "timeout": exc.is_timeout},
            )
            raise PersistenceError("Falha ao executar query no gateway") from exc

        try:
            data = response.json()
        except json.JSONDecodeError as exc:
            raise PersistenceError("Resposta do gateway não é JSON") from exc

        rows = data.get("rows") if isinstance(data, dict) else None
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise PersistenceError("Resposta do gateway com rows inválido")
        return [row for row in rows if isinstance(row, dict)]
