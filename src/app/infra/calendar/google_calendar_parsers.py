"""Helpers internos de parsing para respostas da Google Calendar API."""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo
from typing import TYPE_CHECKING, Any

from app.domain.sync import ChangeRecord

if TYPE_CHECKING:
    from googleapiclient.errors import HttpError


def map_change_records(response: dict[str, Any]) -> list[ChangeRecord]:
    """Converte uma pagina de events.list em ChangeRecords, preservando a ordem."""
    items = response.get("items") if isinstance(response, dict) else None
    if not isinstance(items, list):
        return []
    return [
        record
        for item in items
        if isinstance(item, dict)
        if (record := map_change_record(item)) is not None
    ]


def map_change_record(payload: dict[str, Any]) -> ChangeRecord | None:
    record_id = payload.get("id")
    if not isinstance(record_id, str) or not record_id.strip():
        # Sem identificador estavel o downstream nao consegue reconciliar.
        return None
    return ChangeRecord(
        record_id=record_id,
        status=str(payload.get("status") or "confirmed"),
        updated=parse_google_datetime(payload.get("updated")),
        payload=payload,
    )


def parse_google_datetime(value: Any, zone: tzinfo = UTC) -> datetime | None:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed.replace(tzinfo=zone) if parsed.tzinfo is None else parsed.astimezone(zone)


def extract_next_token(response: dict[str, Any]) -> str | None:
    candidate = response.get("nextSyncToken") if isinstance(response, dict) else None
    if isinstance(candidate, str) and candidate.strip():
        return candidate.strip()
    return None


def http_status(exc: HttpError) -> int | None:
    response = getattr(exc, "resp", None)
    return int(response.status) if response and getattr(response, "status", None) else None
