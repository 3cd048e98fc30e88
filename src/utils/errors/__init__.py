"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    DeliveryError,
    PersistenceError,
    RelayError,
    TokenExpiredError,
    UpstreamError,
)

__all__ = [
    "DeliveryError",
    "PersistenceError",
    "RelayError",
    "TokenExpiredError",
    "UpstreamError",
]
