"""Agregador de settings de infraestrutura.

Re-exporta todas as settings de infraestrutura para uso externo.
"""

from __future__ import annotations

from config.settings.infra.continuation import (
    ContinuationBackend,
    ContinuationStoreSettings,
    get_continuation_store_settings,
)
from config.settings.infra.firestore import (
    FirestoreSettings,
    get_firestore_settings,
)
from config.settings.infra.notification_log import (
    LogBackend,
    NotificationLogSettings,
    get_notification_log_settings,
)
from config.settings.infra.sync_lock import (
    SyncLockBackend,
    SyncLockSettings,
    get_sync_lock_settings,
)

__all__ = [
    # Continuation store
    "ContinuationBackend",
    "ContinuationStoreSettings",
    # Firestore
    "FirestoreSettings",
    # Notification log
    "LogBackend",
    "NotificationLogSettings",
    # Sync lock
    "SyncLockBackend",
    "SyncLockSettings",
    "get_continuation_store_settings",
    "get_firestore_settings",
    "get_notification_log_settings",
    "get_sync_lock_settings",
]
