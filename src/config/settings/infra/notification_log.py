"""Settings do log de notificações.

Configurações para o rastro append-only de notificações recebidas/aceitas.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

LogBackend = Literal["memory", "firestore"]


@dataclass(frozen=True)
class NotificationLogSettings:
    """Configurações do log de notificações.

    Attributes:
        backend: Backend do rastro (memory|firestore)
        max_records: Limite de registros mantidos no backend em memória
    """

    backend: LogBackend = "memory"
    max_records: int = 10000

    def validate(self, gcp_project: str, is_dev: bool) -> list[str]:
        """Valida configurações do log de notificações.

        Args:
            gcp_project: Projeto GCP.
            is_dev: Se está em desenvolvimento.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend == "memory" and not is_dev:
            errors.append(
                "NOTIFICATION_LOG_BACKEND=memory proibido em staging/production"
            )

        if self.backend == "firestore" and not gcp_project:
            errors.append("NOTIFICATION_LOG_BACKEND=firestore requer GCP_PROJECT")

        if self.max_records < 1:
            errors.append("NOTIFICATION_LOG_MAX_RECORDS deve ser positivo")

        return errors


def _load_notification_log_from_env() -> NotificationLogSettings:
    """Carrega NotificationLogSettings de variáveis de ambiente."""
    backend_str = os.getenv("NOTIFICATION_LOG_BACKEND", "memory").lower()
    backend: LogBackend = backend_str if backend_str in ("memory", "firestore") else "memory"

    return NotificationLogSettings(
        backend=backend,
        max_records=int(os.getenv("NOTIFICATION_LOG_MAX_RECORDS", "10000")),
    )


@lru_cache(maxsize=1)
def get_notification_log_settings() -> NotificationLogSettings:
    """Retorna instância cacheada de NotificationLogSettings."""
    return _load_notification_log_from_env()
