"""Parse dos headers de push notification do Google Calendar (sem corpo).

O Google envia a notificação apenas em headers:
- X-Goog-Channel-ID: canal que originou a notificação (obrigatório)
- X-Goog-Resource-ID: recurso observado
- X-Goog-Resource-State: sync | exists | not_exists
- X-Goog-Message-Number: sequência por canal
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from app.domain.sync import InboundNotification

if TYPE_CHECKING:
    from collections.abc import Mapping

CHANNEL_ID_HEADER = "x-goog-channel-id"
RESOURCE_ID_HEADER = "x-goog-resource-id"
RESOURCE_STATE_HEADER = "x-goog-resource-state"
MESSAGE_NUMBER_HEADER = "x-goog-message-number"


class MissingChannelIdError(ValueError):
    """Notificação sem X-Goog-Channel-ID."""


def parse_notification_headers(
    headers: Mapping[str, str],
    received_at: datetime | None = None,
) -> InboundNotification:
    """Constrói InboundNotification a partir dos headers.

    Args:
        headers: Headers da requisição (chaves case-insensitive ou minúsculas)
        received_at: Momento de recebimento (default: agora, UTC)

    Raises:
        MissingChannelIdError: Se o channel id estiver ausente ou vazio
    """
    channel_id = _header(headers, CHANNEL_ID_HEADER)
    if channel_id is None:
        raise MissingChannelIdError("missing_channel_id")

    return InboundNotification(
        channel_id=channel_id,
        resource_id=_header(headers, RESOURCE_ID_HEADER),
        resource_state=_header(headers, RESOURCE_STATE_HEADER),
        message_number=_header(headers, MESSAGE_NUMBER_HEADER),
        received_at=received_at or datetime.now(UTC),
    )


def _header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None
