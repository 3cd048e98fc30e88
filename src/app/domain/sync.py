"""Modelos de dominio do relay de sincronizacao incremental.

Esses contratos sao compartilhados entre store, adapter do provider,
reconciler e forwarder sem acoplar nenhum deles ao formato da Google API.
"""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - usado em runtime pelo schema do Pydantic
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

SyncStrategy = Literal["incremental", "full"]

# Chave singleton do registro de continuacao.
SYNC_TOKEN_KEY = "current"


class ChannelDecision(str, Enum):
    """Resultado da validacao de canal."""

    ACCEPT = "accept"
    REJECT = "reject"


class SubscriptionChannel(BaseModel):
    """Canal de push registrado no provider."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Identificador do canal (X-Goog-Channel-ID).")
    resource_id: str | None = Field(default=None, description="Recurso observado.")
    expiration: datetime | None = Field(default=None, description="Expiracao do canal.")
    active: bool = Field(default=True, description="Apenas um canal ativo por vez.")


class ChangeRecord(BaseModel):
    """Mutacao de um objeto upstream (criacao, atualizacao ou remocao)."""

    model_config = ConfigDict(extra="ignore")

    record_id: str = Field(..., description="Identificador estavel no provider.")
    status: str = Field(default="confirmed", description="Status informado pelo provider.")
    updated: datetime | None = Field(default=None, description="Ultima atualizacao.")
    payload: dict[str, Any] = Field(default_factory=dict, description="Objeto bruto.")

    @property
    def deleted(self) -> bool:
        return self.status == "cancelled"


class ChangeSet(BaseModel):
    """Colecao ordenada de mutacoes produzida por um fetch."""

    model_config = ConfigDict(extra="ignore")

    records: list[ChangeRecord] = Field(default_factory=list)
    next_token: str | None = Field(
        default=None,
        description="Novo ponto de continuacao; None mantem o token atual.",
    )

    @property
    def is_empty(self) -> bool:
        return not self.records


class InboundNotification(BaseModel):
    """Notificacao push recebida; existe apenas durante uma invocacao."""

    model_config = ConfigDict(extra="ignore")

    channel_id: str
    resource_id: str | None = None
    resource_state: str | None = None
    message_number: str | None = None
    received_at: datetime

    def as_log_record(self) -> dict[str, Any]:
        return {
            "channel_id": self.channel_id,
            "resource_id": self.resource_id,
            "resource_state": self.resource_state,
            "message_number": self.message_number,
            "received_at": self.received_at.isoformat(),
        }


__all__ = [
    "SYNC_TOKEN_KEY",
    "ChangeRecord",
    "ChangeSet",
    "ChannelDecision",
    "InboundNotification",
    "SubscriptionChannel",
    "SyncStrategy",
]
