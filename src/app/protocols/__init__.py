"""Protocolos e contratos do core da aplicação."""

from .change_source import ChangeSourceProtocol
from .continuation_store import ContinuationStoreProtocol
from .forwarder import ForwarderProtocol
from .notification_log import NotificationLogProtocol
from .query_executor import QueryExecutorProtocol
from .sync_lock import SyncLockProtocol

__all__ = [
    "ChangeSourceProtocol",
    "ContinuationStoreProtocol",
    "ForwarderProtocol",
    "NotificationLogProtocol",
    "QueryExecutorProtocol",
    "SyncLockProtocol",
]
