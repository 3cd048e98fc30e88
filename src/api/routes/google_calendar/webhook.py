"""Endpoint de push notifications do Google Calendar.

Endpoint:
- POST /webhook/google-calendar: notificação de mudança (só headers)

Fluxo:
1. Headers são convertidos em InboundNotification (400 sem channel id)
2. Use case valida o canal, reconcilia e encaminha o change-set
3. Status da resposta segue o ack do use case

Processamento acontece dentro da requisição: respostas não-2xx fazem o
Google reenviar a notificação.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from api.connectors.google_calendar.headers import (
    MissingChannelIdError,
    parse_notification_headers,
)
from app.bootstrap import get_notification_use_case
from app.observability import correlation_scope

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
async def receive_notification(request: Request) -> JSONResponse:
    """Recebe notificação push e devolve o ack do intake."""
    with correlation_scope(request.headers.get("x-correlation-id")) as correlation_id:
        try:
            notification = parse_notification_headers(request.headers)
        except MissingChannelIdError as exc:
            logger.warning(
                "notification_rejected_malformed",
                extra={
                    "channel": "google_calendar",
                    "correlation_id": correlation_id,
                    "error": str(exc),
                },
            )
            return JSONResponse(
                content={"status": "error", "reason": str(exc)},
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        logger.info(
            "notification_received",
            extra={
                "channel": "google_calendar",
                "channel_id": notification.channel_id,
                "resource_state": notification.resource_state,
                "message_number": notification.message_number,
            },
        )

        ack = await get_notification_use_case().execute(notification)
        return JSONResponse(content=ack.as_dict(), status_code=ack.status_code)
