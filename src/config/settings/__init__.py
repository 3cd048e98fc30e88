"""Agregador de settings do relay.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    DEFAULT_SERVICE_NAME,
    BaseSettings,
    Environment,
    get_base_settings,
)

# Provider settings
from config.settings.google_calendar import (
    GOOGLE_TOKEN_URI,
    GoogleCalendarSettings,
    get_google_calendar_settings,
)

# Infrastructure settings
from config.settings.infra import (
    ContinuationBackend,
    ContinuationStoreSettings,
    FirestoreSettings,
    LogBackend,
    NotificationLogSettings,
    SyncLockBackend,
    SyncLockSettings,
    get_continuation_store_settings,
    get_firestore_settings,
    get_notification_log_settings,
    get_sync_lock_settings,
)

# Relay policy settings
from config.settings.relay import (
    RelaySettings,
    get_relay_settings,
)

__all__ = [
    # Constants
    "DEFAULT_SERVICE_NAME",
    "GOOGLE_TOKEN_URI",
    # Base
    "BaseSettings",
    # Infrastructure
    "ContinuationBackend",
    "ContinuationStoreSettings",
    "Environment",
    "FirestoreSettings",
    # Provider
    "GoogleCalendarSettings",
    "LogBackend",
    "NotificationLogSettings",
    # Relay
    "RelaySettings",
    "SyncLockBackend",
    "SyncLockSettings",
    "get_base_settings",
    "get_continuation_store_settings",
    "get_firestore_settings",
    "get_google_calendar_settings",
    "get_notification_log_settings",
    "get_relay_settings",
    "get_sync_lock_settings",
]
