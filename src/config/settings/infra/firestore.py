"""Settings do Firestore.

Configurações para Google Cloud Firestore.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class FirestoreSettings:
    """Configurações do Firestore.

    Attributes:
        project_id: ID do projeto GCP (usa GCP_PROJECT se não definido)
        collection_channels: Collection de canais de push
        collection_sync_tokens: Collection do sync token singleton
        collection_received: Collection do log de notificações recebidas
        collection_accepted: Collection do log de notificações aceitas
    """

    project_id: str = ""
    collection_channels: str = "google_channels"
    collection_sync_tokens: str = "sync_tokens"
    collection_received: str = "notifications_received"
    collection_accepted: str = "notifications_accepted"

    def validate(self, gcp_project: str) -> list[str]:
        """Valida configurações do Firestore.

        Args:
            gcp_project: Projeto GCP padrão para fallback.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []
        effective_project = self.project_id or gcp_project

        if not effective_project:
            errors.append(
                "FIRESTORE_PROJECT_ID ou GCP_PROJECT deve estar configurado"
            )

        if self.collection_received == self.collection_accepted:
            errors.append("Logs de recebidas e aceitas devem usar collections distintas")

        return errors


def _load_firestore_from_env() -> FirestoreSettings:
    """Carrega FirestoreSettings de variáveis de ambiente."""
    return FirestoreSettings(
        project_id=os.getenv("FIRESTORE_PROJECT_ID", ""),
        collection_channels=os.getenv("FIRESTORE_COLLECTION_CHANNELS", "google_channels"),
        collection_sync_tokens=os.getenv("FIRESTORE_COLLECTION_SYNC_TOKENS", "sync_tokens"),
        collection_received=os.getenv(
            "FIRESTORE_COLLECTION_RECEIVED", "notifications_received"
        ),
        collection_accepted=os.getenv(
            "FIRESTORE_COLLECTION_ACCEPTED", "notifications_accepted"
        ),
    )


@lru_cache(maxsize=1)
def get_firestore_settings() -> FirestoreSettings:
    """Retorna instância cacheada de FirestoreSettings."""
    return _load_firestore_from_env()
