"""Factories de stores e adapters baseadas em configuração de ambiente.

Cada factory escolhe o backend pela settings correspondente e loga a
escolha. Backends em memória fora de development/test geram warning
(a validação de startup já bloqueia em staging/production).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.clients import create_async_redis_client, create_firestore_client
from app.infra.calendar.google_calendar_client import create_google_calendar_change_source
from app.infra.forwarding import HttpForwarder
from app.infra.http import HttpClient, HttpClientConfig
from app.infra.stores import (
    FirestoreContinuationStore,
    FirestoreNotificationLog,
    HttpQueryExecutor,
    MemoryContinuationStore,
    MemoryNotificationLog,
    MemorySyncLock,
    RedisSyncLock,
    SqlContinuationStore,
)
from app.services.sync_reconciler import SyncReconciler
from app.use_cases.google_calendar import HandleNotificationUseCase, IntakePolicy
from config.settings import (
    get_base_settings,
    get_continuation_store_settings,
    get_firestore_settings,
    get_google_calendar_settings,
    get_notification_log_settings,
    get_relay_settings,
    get_sync_lock_settings,
)

if TYPE_CHECKING:
    from app.protocols.change_source import ChangeSourceProtocol
    from app.protocols.continuation_store import ContinuationStoreProtocol
    from app.protocols.forwarder import ForwarderProtocol
    from app.protocols.notification_log import NotificationLogProtocol
    from app.protocols.sync_lock import SyncLockProtocol

logger = logging.getLogger(__name__)


def _warn_memory_backend(component: str) -> None:
    environment = get_base_settings().environment
    if environment not in ("development", "test"):
        logger.warning(
            "memory_backend_in_non_dev",
            extra={"component": component, "backend": "memory", "environment": environment},
        )


def create_continuation_store() -> ContinuationStoreProtocol:
    """Cria store de canal ativo + sync token baseado na configuração."""
    settings = get_continuation_store_settings()

    if settings.backend == "sql":
        executor = HttpQueryExecutor(
            settings.query_endpoint,
            HttpClient(HttpClientConfig(timeout_seconds=settings.query_timeout_seconds)),
        )
        store: ContinuationStoreProtocol = SqlContinuationStore(
            executor,
            channels_table=settings.channels_table,
            tokens_table=settings.tokens_table,
        )
    elif settings.backend == "firestore":
        collections = get_firestore_settings()
        store = FirestoreContinuationStore(
            create_firestore_client(),
            channels_collection=collections.collection_channels,
            tokens_collection=collections.collection_sync_tokens,
        )
    else:
        _warn_memory_backend("continuation_store")
        store = MemoryContinuationStore()

    logger.info("continuation_store_created", extra={"backend": settings.backend})
    return store


def create_notification_logs() -> tuple[NotificationLogProtocol, NotificationLogProtocol]:
    """Cria os logs de notificações recebidas e aceitas."""
    settings = get_notification_log_settings()

    if settings.backend == "firestore":
        collections = get_firestore_settings()
        client = create_firestore_client()
        received: NotificationLogProtocol = FirestoreNotificationLog(
            client, collection_name=collections.collection_received
        )
        accepted: NotificationLogProtocol = FirestoreNotificationLog(
            client, collection_name=collections.collection_accepted
        )
    else:
        _warn_memory_backend("notification_log")
        received = MemoryNotificationLog(max_records=settings.max_records)
        accepted = MemoryNotificationLog(max_records=settings.max_records)

    logger.info("notification_logs_created", extra={"backend": settings.backend})
    return received, accepted


def create_change_source() -> ChangeSourceProtocol:
    """Cria adapter do Google Calendar."""
    return create_google_calendar_change_source(get_google_calendar_settings())


def create_forwarder() -> ForwarderProtocol | None:
    """Cria forwarder downstream; None quando forwarding desabilitado."""
    settings = get_relay_settings()
    if not settings.forwarding_enabled:
        logger.info("forwarder_disabled")
        return None
    return HttpForwarder(
        settings.forward_url,
        HttpClient(HttpClientConfig(timeout_seconds=settings.forward_timeout_seconds)),
    )


def create_sync_lock() -> SyncLockProtocol | None:
    """Cria lock single-flight do reconciler."""
    settings = get_sync_lock_settings()
    if settings.backend == "none":
        return None
    if settings.backend == "redis":
        return RedisSyncLock(create_async_redis_client(), ttl_seconds=settings.ttl_seconds)
    return MemorySyncLock()


def create_notification_use_case(
    store: ContinuationStoreProtocol | None = None,
) -> HandleNotificationUseCase:
    """Monta o use case de intake com todas as dependências."""
    relay = get_relay_settings()
    store = store or create_continuation_store()
    received_log, accepted_log = create_notification_logs()
    reconciler = SyncReconciler(
        store=store,
        change_source=create_change_source(),
        sync_lock=create_sync_lock(),
        lock_wait_seconds=get_sync_lock_settings().wait_seconds,
    )
    policy = IntakePolicy(
        channel_source=relay.channel_validation_source,
        configured_channel_id=relay.valid_channel_id,
        mismatch_policy=relay.channel_mismatch_policy,
    )
    return HandleNotificationUseCase(
        store=store,
        reconciler=reconciler,
        received_log=received_log,
        accepted_log=accepted_log,
        forwarder=create_forwarder(),
        policy=policy,
    )
