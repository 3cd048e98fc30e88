"""SQL Continuation Store: canal ativo e sync token no Postgres.

Tabelas:
    google_channels(id, resource_id, expiration, active)
    google_sync_tokens(id, sync_token)

Todas as operações usam parâmetros posicionais. A troca de canal é um
único statement (CTE com UPDATE + INSERT), aplicado atomicamente pelo
Postgres; o índice parcial garante no máximo um canal ativo.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.sync import SYNC_TOKEN_KEY
from app.protocols.continuation_store import ContinuationStoreProtocol

if TYPE_CHECKING:
    from datetime import datetime

    from app.protocols.query_executor import QueryExecutorProtocol

logger = logging.getLogger(__name__)

CHANNELS_TABLE = "google_channels"
TOKENS_TABLE = "google_sync_tokens"


class SqlContinuationStore(ContinuationStoreProtocol):
    """Store de continuação sobre um executor de queries parametrizadas.

    Args:
        executor: Executor de statements (gateway HTTP ou driver)
        channels_table: Nome da tabela de canais
        tokens_table: Nome da tabela de tokens
    """

    def __init__(
        self,
        executor: QueryExecutorProtocol,
        channels_table: str = CHANNELS_TABLE,
        tokens_table: str = TOKENS_TABLE,
    ) -> None:
        # Nomes de tabela vêm de configuração, nunca do request.
        for name in (channels_table, tokens_table):
            if not name.replace("_", "").isalnum():
                msg = f"Nome de tabela inválido: {name}"
                raise ValueError(msg)
        self._executor = executor
        self._channels = channels_table
        self._tokens = tokens_table

    def schema_statements(self) -> list[str]:
        """DDL idempotente das tabelas de continuação."""
        return [
            f"CREATE TABLE IF NOT EXISTS {self._channels} ("
            "id TEXT PRIMARY KEY, resource_id TEXT, expiration TIMESTAMPTZ, "
            "active BOOLEAN NOT NULL DEFAULT FALSE)",
            f"CREATE UNIQUE INDEX IF NOT EXISTS {self._channels}_single_active "
            f"ON {self._channels} (active) WHERE active",
            f"CREATE TABLE IF NOT EXISTS {self._tokens} ("
            "id TEXT PRIMARY KEY, sync_token TEXT)",
        ]

    async def ensure_schema(self) -> None:
        for statement in self.schema_statements():
            await self._executor.execute(statement)
        logger.info("continuation_schema_ensured", extra={"backend": "sql"})

    async def get_active_channel(self) -> str | None:
        rows = await self._executor.execute(
            f"SELECT id FROM {self._channels} WHERE active = true LIMIT 1",
        )
        if not rows:
            return None
        channel_id = rows[0].get("id")
        return str(channel_id) if channel_id else None

    async def set_active_channel(
        self,
        channel_id: str,
        resource_id: str | None,
        expiration: datetime | None,
    ) -> None:
        # O SELECT sobre o CTE força o UPDATE antes do INSERT, senão o
        # índice parcial veria dois canais ativos.
        statement = (
            f"WITH deactivated AS ("
            f"UPDATE {self._channels} SET active = false "
            f"WHERE active = true AND id <> $1::text RETURNING id) "
            f"INSERT INTO {self._channels} (id, resource_id, expiration, active) "
            f"SELECT $1::text, $2::text, $3::timestamptz, true "
            f"FROM (SELECT count(*) FROM deactivated) AS swap "
            f"ON CONFLICT (id) DO UPDATE SET "
            f"resource_id = EXCLUDED.resource_id, "
            f"expiration = EXCLUDED.expiration, "
            f"active = true"
        )
        await self._executor.execute(
            statement,
            [channel_id, resource_id, expiration.isoformat() if expiration else None],
        )
        logger.info("active_channel_replaced", extra={"channel_id": channel_id})

    async def get_sync_token(self) -> str | None:
        rows = await self._executor.execute(
            f"SELECT sync_token FROM {self._tokens} WHERE id = $1 LIMIT 1",
            [SYNC_TOKEN_KEY],
        )
        if not rows:
            return None
        token = rows[0].get("sync_token")
        return str(token) if token else None

    async def set_sync_token(self, token: str) -> None:
        await self._executor.execute(
            f"INSERT INTO {self._tokens} (id, sync_token) VALUES ($1, $2) "
            f"ON CONFLICT (id) DO UPDATE SET sync_token = EXCLUDED.sync_token",
            [SYNC_TOKEN_KEY, token],
        )
