"""Router principal do Google Calendar: agrega os endpoints do canal."""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.google_calendar.webhook import router as webhook_router

WEBHOOK_PATH = "/webhook/google-calendar"

router = APIRouter()

# POST para push notifications, no path exato registrado no canal (sem barra final)
router.include_router(webhook_router, prefix=WEBHOOK_PATH)
