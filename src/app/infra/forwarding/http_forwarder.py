"""Forwarder HTTP: POST do change-set para o endpoint downstream.

A entrega é independente da persistência do sync token: uma falha aqui
nunca desfaz o token já gravado. Sem retry; o downstream é responsável
pela própria durabilidade no recebimento.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from app.infra.http import HttpClient, HttpError
from app.observability import get_correlation_id
from app.protocols.forwarder import ForwarderProtocol
from utils.errors import DeliveryError

if TYPE_CHECKING:
    from app.domain.sync import ChangeSet

logger = logging.getLogger(__name__)


def build_forward_payload(change_set: ChangeSet, metadata: dict[str, str]) -> dict[str, Any]:
    """Monta o corpo {records, channelId, timestamp, ...} enviado ao downstream."""
    return {
        "records": [record.payload for record in change_set.records],
        "channelId": metadata.get("channel_id"),
        "resourceId": metadata.get("resource_id"),
        "strategy": metadata.get("strategy"),
        "timestamp": datetime.now(UTC).isoformat(),
    }


class HttpForwarder(ForwarderProtocol):
    """Entrega change-sets via HTTP POST com timeout limitado.

    Args:
        url: Endpoint downstream (FORWARD_URL)
        http_client: Cliente HTTP com timeout configurado
    """

    def __init__(self, url: str, http_client: HttpClient) -> None:
        if not url:
            msg = "FORWARD_URL não configurado"
            raise ValueError(msg)
        self._url = url
        self._http = http_client

    async def forward(self, change_set: ChangeSet, metadata: dict[str, str]) -> None:
        payload = build_forward_payload(change_set, metadata)
        correlation_id = get_correlation_id()
        headers = {"X-Correlation-ID": correlation_id} if correlation_id else None
        try:
            response = await self._http.post(self._url, json=payload, headers=headers)
        except HttpError as exc:
            raise DeliveryError(str(exc), status_code=exc.status_code) from exc

        logger.info(
            "change_set_forwarded",
            extra={
                "channel_id": metadata.get("channel_id"),
                "record_count": len(change_set.records),
                "status_code": response.status_code,
            },
        )
