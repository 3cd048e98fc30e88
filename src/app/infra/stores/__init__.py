"""Stores: implementações concretas de persistência.

Módulos disponíveis:
    - sql_continuation_store: canal ativo + sync token via queries parametrizadas
    - http_query_executor: executor de queries sobre gateway HTTP do Postgres
    - firestore_continuation_store: canal ativo + sync token no Firestore
    - firestore_notification_log: log append-only de notificações no Firestore
    - redis_sync_lock: lock single-flight distribuído
    - memory_stores: Stores em memória para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.firestore_continuation_store import FirestoreContinuationStore
from app.infra.stores.firestore_notification_log import FirestoreNotificationLog
from app.infra.stores.http_query_executor import HttpQueryExecutor
from app.infra.stores.memory_stores import (
    MemoryContinuationStore,
    MemoryNotificationLog,
    MemorySyncLock,
)
from app.infra.stores.redis_sync_lock import RedisSyncLock
from app.infra.stores.sql_continuation_store import SqlContinuationStore

__all__ = [
    # Firestore
    "FirestoreContinuationStore",
    "FirestoreNotificationLog",
    # SQL
    "HttpQueryExecutor",
    # Memory (dev/test)
    "MemoryContinuationStore",
    "MemoryNotificationLog",
    "MemorySyncLock",
    # Redis (Upstash)
    "RedisSyncLock",
    "SqlContinuationStore",
]
