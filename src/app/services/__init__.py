"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.channel_validator import validate_channel
from app.services.sync_reconciler import SyncReconciler, SyncResult

__all__ = [
    "SyncReconciler",
    "SyncResult",
    "validate_channel",
]
