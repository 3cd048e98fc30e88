"""Use case de intake de notificações push do Google Calendar.

Fluxo:
1. Registra a notificação no log de recebidas (sempre, qualquer desfecho)
2. Resolve o canal ativo (store ou env, conforme política)
3. Valida o canal; REJECT responde "ignored" (200) ou "rejected" (403)
4. Registra no log de aceitas
5. Reconcilia (incremental ou full resync)
6. Encaminha ao downstream se houver registros e forwarding habilitado
7. Responde com a contagem de registros do change-set

Falha de entrega não desfaz o token já gravado.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from app.domain.sync import ChannelDecision
from app.observability import get_correlation_id, record_notification_outcome
from app.services.channel_validator import validate_channel
from utils.errors import DeliveryError, PersistenceError, UpstreamError

if TYPE_CHECKING:
    from app.domain.sync import InboundNotification
    from app.protocols.continuation_store import ContinuationStoreProtocol
    from app.protocols.forwarder import ForwarderProtocol
    from app.protocols.notification_log import NotificationLogProtocol
    from app.services.sync_reconciler import SyncReconciler, SyncResult

logger = logging.getLogger(__name__)

ChannelSource = Literal["store", "env"]
MismatchPolicy = Literal["ignore", "forbidden"]
AckStatus = Literal["processed", "ignored", "rejected", "error"]
DeliveryStatus = Literal["delivered", "failed", "skipped", "disabled"]

# Estado enviado pelo Google logo após a criação do canal; não indica mudança.
SYNC_HANDSHAKE_STATE = "sync"


@dataclass(frozen=True, slots=True)
class IntakePolicy:
    """Política de validação de canal do intake."""

    channel_source: ChannelSource = "store"
    configured_channel_id: str | None = None
    mismatch_policy: MismatchPolicy = "ignore"


@dataclass(frozen=True, slots=True)
class NotificationAck:
    """Confirmação devolvida ao provider."""

    status_code: int
    status: AckStatus
    count: int = 0
    reason: str | None = None
    strategy: str | None = None
    delivery: DeliveryStatus | None = None
    token_persisted: bool | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"status": self.status, "count": self.count}
        optional = {
            "reason": self.reason,
            "strategy": self.strategy,
            "delivery": self.delivery,
            "token_persisted": self.token_persisted,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        return payload


class HandleNotificationUseCase:
    """Orquestra validação, reconciliação e forward de uma notificação."""

    def __init__(
        self,
        *,
        store: ContinuationStoreProtocol,
        reconciler: SyncReconciler,
        received_log: NotificationLogProtocol,
        accepted_log: NotificationLogProtocol,
        forwarder: ForwarderProtocol | None = None,
        policy: IntakePolicy | None = None,
    ) -> None:
        self._store = store
        self._reconciler = reconciler
        self._received_log = received_log
        self._accepted_log = accepted_log
        self._forwarder = forwarder
        self._policy = policy or IntakePolicy()

    async def execute(self, notification: InboundNotification) -> NotificationAck:
        ack = await self._handle(notification)
        record_notification_outcome(ack.status, ack.status_code, get_correlation_id())
        return ack

    async def _handle(self, notification: InboundNotification) -> NotificationAck:
        await self._append(self._received_log, notification, "received")
        channel_id = notification.channel_id

        try:
            active_channel_id = await self._resolve_active_channel()
        except PersistenceError:
            logger.error(
                "active_channel_read_failed",
                extra={"channel_id": channel_id, "source": self._policy.channel_source},
            )
            return NotificationAck(status_code=500, status="error", reason="persistence_error")

        if validate_channel(channel_id, active_channel_id) is ChannelDecision.REJECT:
            return self._reject(notification, has_active=active_channel_id is not None)

        await self._append(self._accepted_log, notification, "accepted")
        logger.info(
            "notification_accepted",
            extra={"channel_id": channel_id, "resource_state": notification.resource_state},
        )

        if notification.resource_state == SYNC_HANDSHAKE_STATE:
            return NotificationAck(status_code=200, status="ignored", reason="sync_handshake")

        try:
            result = await self._reconciler.reconcile(channel_id=channel_id)
        except UpstreamError as exc:
            logger.error(
                "notification_processing_failed",
                extra={
                    "channel_id": channel_id,
                    "strategy": exc.strategy,
                    "status_code": exc.status_code,
                },
            )
            return NotificationAck(
                status_code=500,
                status="error",
                reason="upstream_error",
                strategy=exc.strategy,
            )

        delivery = await self._deliver(notification, result)
        return NotificationAck(
            status_code=200,
            status="processed",
            count=result.record_count,
            strategy=result.strategy,
            delivery=delivery,
            token_persisted=result.token_persisted,
        )

    async def _resolve_active_channel(self) -> str | None:
        if self._policy.channel_source == "env":
            return self._policy.configured_channel_id or None
        return await self._store.get_active_channel()

    def _reject(self, notification: InboundNotification, *, has_active: bool) -> NotificationAck:
        reason = "channel_mismatch" if has_active else "no_active_channel"
        logger.warning(
            "notification_ignored",
            extra={
                "channel_id": notification.channel_id,
                "reason": reason,
                "policy": self._policy.mismatch_policy,
            },
        )
        if self._policy.mismatch_policy == "forbidden":
            return NotificationAck(status_code=403, status="rejected", reason=reason)
        return NotificationAck(status_code=200, status="ignored", reason=reason)

    async def _deliver(
        self,
        notification: InboundNotification,
        result: SyncResult,
    ) -> DeliveryStatus:
        if self._forwarder is None:
            return "disabled"
        if result.change_set.is_empty:
            return "skipped"

        metadata = {
            "channel_id": notification.channel_id,
            "resource_id": notification.resource_id or "",
            "strategy": result.strategy,
        }
        try:
            await self._forwarder.forward(result.change_set, metadata)
        except DeliveryError as exc:
            logger.error(
                "change_set_delivery_failed",
                extra={
                    "channel_id": notification.channel_id,
                    "strategy": result.strategy,
                    "status_code": exc.status_code,
                    "record_count": result.record_count,
                    "token_persisted": result.token_persisted,
                },
            )
            return "failed"
        return "delivered"

    async def _append(
        self,
        log: NotificationLogProtocol,
        notification: InboundNotification,
        kind: str,
    ) -> None:
        try:
            await log.append({**notification.as_log_record(), "kind": kind})
        except Exception:
            # Auditoria não interrompe o relay.
            logger.exception(
                "notification_log_failed",
                extra={"channel_id": notification.channel_id, "kind": kind},
            )
