"""Settings do store de continuação.

Backends:
- memory: apenas dev/test
- sql: gateway HTTP do Postgres (ENDPOINT_POSTGRES)
- firestore: collections do Firestore
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

ContinuationBackend = Literal["memory", "sql", "firestore"]


@dataclass(frozen=True)
class ContinuationStoreSettings:
    """Configurações do store de canal ativo + sync token.

    Attributes:
        backend: Backend de persistência (memory|sql|firestore)
        query_endpoint: URL do gateway de queries (backend sql)
        query_timeout_seconds: Timeout de cada query
        channels_table: Tabela de canais (backend sql)
        tokens_table: Tabela do token (backend sql)
    """

    backend: ContinuationBackend = "memory"
    query_endpoint: str = ""
    query_timeout_seconds: float = 10.0
    channels_table: str = "google_channels"
    tokens_table: str = "google_sync_tokens"

    def validate(self, gcp_project: str, is_dev: bool) -> list[str]:
        errors: list[str] = []

        if self.backend == "memory" and not is_dev:
            errors.append("CONTINUATION_STORE_BACKEND=memory proibido em staging/production")

        if self.backend == "sql" and not self.query_endpoint:
            errors.append("CONTINUATION_STORE_BACKEND=sql requer ENDPOINT_POSTGRES")

        if self.backend == "firestore" and not gcp_project:
            errors.append("CONTINUATION_STORE_BACKEND=firestore requer GCP_PROJECT")

        if self.query_timeout_seconds <= 0:
            errors.append("QUERY_TIMEOUT_SECONDS deve ser positivo")

        return errors


def _load_continuation_from_env() -> ContinuationStoreSettings:
    """Carrega ContinuationStoreSettings de variáveis de ambiente."""
    backend_str = os.getenv("CONTINUATION_STORE_BACKEND", "memory").lower()
    backend: ContinuationBackend = (
        backend_str if backend_str in ("memory", "sql", "firestore") else "memory"
    )
    return ContinuationStoreSettings(
        backend=backend,
        query_endpoint=os.getenv("ENDPOINT_POSTGRES", "").strip(),
        query_timeout_seconds=float(os.getenv("QUERY_TIMEOUT_SECONDS", "10")),
        channels_table=os.getenv("CONTINUATION_CHANNELS_TABLE", "google_channels"),
        tokens_table=os.getenv("CONTINUATION_TOKENS_TABLE", "google_sync_tokens"),
    )


@lru_cache(maxsize=1)
def get_continuation_store_settings() -> ContinuationStoreSettings:
    """Retorna instância cacheada de ContinuationStoreSettings."""
    return _load_continuation_from_env()
