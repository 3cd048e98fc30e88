"""Firestore Continuation Store: canal ativo e sync token no Firestore.

Estrutura:
    google_channels/{channel_id}   {resource_id, expiration, active, updated_at}
    sync_tokens/current            {sync_token, updated_at}

A troca de canal roda numa transação Firestore: leitura dos canais ativos
e escrita do novo canal são aplicadas juntas ou não são aplicadas.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from app.domain.sync import SYNC_TOKEN_KEY
from app.protocols.continuation_store import ContinuationStoreProtocol
from utils.errors import PersistenceError

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient
    from google.cloud.firestore import CollectionReference, Transaction

logger = logging.getLogger(__name__)

CHANNELS_COLLECTION = "google_channels"
SYNC_TOKENS_COLLECTION = "sync_tokens"


def swap_active_channel(
    transaction: Transaction,
    channels: CollectionReference,
    channel_id: str,
    data: dict[str, Any],
) -> int:
    """Desativa canais ativos diferentes de channel_id e ativa o novo.

    Todas as leituras acontecem antes das escritas, como exige o Firestore.

    Returns:
        Quantidade de canais desativados.
    """
    from google.cloud.firestore_v1.base_query import FieldFilter

    active = list(
        channels.where(filter=FieldFilter("active", "==", True)).stream(transaction=transaction)
    )
    deactivated = 0
    for snapshot in active:
        if snapshot.id == channel_id:
            continue
        transaction.update(snapshot.reference, {"active": False})
        deactivated += 1
    transaction.set(channels.document(channel_id), {**data, "active": True})
    return deactivated


class FirestoreContinuationStore(ContinuationStoreProtocol):
    """Store de continuação usando Firestore.

    Args:
        firestore_client: Cliente Firestore
        channels_collection: Collection de canais
        tokens_collection: Collection do token singleton
    """

    def __init__(
        self,
        firestore_client: FirestoreClient,
        channels_collection: str = CHANNELS_COLLECTION,
        tokens_collection: str = SYNC_TOKENS_COLLECTION,
    ) -> None:
        self._db = firestore_client
        self._channels = channels_collection
        self._tokens = tokens_collection

    async def get_active_channel(self) -> str | None:
        return await self._run(self._get_active_channel_sync, "get_active_channel")

    async def set_active_channel(
        self,
        channel_id: str,
        resource_id: str | None,
        expiration: datetime | None,
    ) -> None:
        data = {
            "resource_id": resource_id,
            "expiration": expiration,
            "updated_at": datetime.now(UTC),
        }
        deactivated = await self._run(
            lambda: self._set_active_channel_sync(channel_id, data),
            "set_active_channel",
        )
        logger.info(
            "active_channel_replaced",
            extra={"channel_id": channel_id, "deactivated": deactivated},
        )

    async def get_sync_token(self) -> str | None:
        return await self._run(self._get_sync_token_sync, "get_sync_token")

    async def set_sync_token(self, token: str) -> None:
        await self._run(lambda: self._set_sync_token_sync(token), "set_sync_token")

    async def _run(self, func: Any, operation: str) -> Any:
        # SDK síncrono: roda em thread para não bloquear o event loop.
        try:
            return await asyncio.to_thread(func)
        except Exception as exc:
            logger.error(
                "firestore_continuation_error",
                extra={"operation": operation, "error_type": type(exc).__name__},
            )
            raise PersistenceError(f"Falha no Firestore em {operation}") from exc

    def _get_active_channel_sync(self) -> str | None:
        from google.cloud.firestore_v1.base_query import FieldFilter

        query = (
            self._db.collection(self._channels)
            .where(filter=FieldFilter("active", "==", True))
            .limit(1)
        )
        for snapshot in query.stream():
            return snapshot.id
        return None

    def _set_active_channel_sync(self, channel_id: str, data: dict[str, Any]) -> int:
        from google.cloud import firestore

        transaction = self._db.transaction()
        apply_swap = firestore.transactional(swap_active_channel)
        return apply_swap(transaction, self._db.collection(self._channels), channel_id, data)

    def _get_sync_token_sync(self) -> str | None:
        snapshot = self._db.collection(self._tokens).document(SYNC_TOKEN_KEY).get()
        if not getattr(snapshot, "exists", False):
            return None
        data = snapshot.to_dict() or {}
        token = data.get("sync_token")
        return str(token) if token else None

    def _set_sync_token_sync(self, token: str) -> None:
        self._db.collection(self._tokens).document(SYNC_TOKEN_KEY).set(
            {"sync_token": token, "updated_at": datetime.now(UTC)}
        )
