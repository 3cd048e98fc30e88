"""Firestore Notification Log: rastro append-only de notificações.

Cada notificação vira um documento novo; nada é atualizado ou removido.
Retenção via Firestore TTL policies sobre o campo created_at.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from app.protocols.notification_log import NotificationLogProtocol

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient

logger = logging.getLogger(__name__)

RECEIVED_COLLECTION = "notifications_received"


class FirestoreNotificationLog(NotificationLogProtocol):
    """Log de notificações usando Firestore.

    Falhas de escrita são logadas e não interrompem o relay.

    Args:
        firestore_client: Cliente Firestore
        collection_name: Nome da collection (default: notifications_received)
    """

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection_name: str = RECEIVED_COLLECTION,
    ) -> None:
        self._db = firestore_client
        self._collection = collection_name

    def append_sync(self, record: dict[str, Any]) -> None:
        now = datetime.now(UTC)
        enriched = {
            **record,
            "timestamp": now.isoformat(),
            "created_at": now,
        }
        channel_id = record.get("channel_id") or "unknown"
        doc_id = f"{now.strftime('%Y%m%d')}_{channel_id}_{uuid4().hex[:12]}"

        try:
            self._db.collection(self._collection).document(doc_id).set(enriched)
            logger.debug(
                "notification_log_appended",
                extra={"doc_id": doc_id, "collection": self._collection},
            )
        except Exception as exc:
            logger.error(
                "notification_log_append_error",
                extra={
                    "doc_id": doc_id,
                    "collection": self._collection,
                    "error_type": type(exc).__name__,
                },
            )

    async def append(self, record: dict[str, Any]) -> None:
        await asyncio.to_thread(self.append_sync, record)
