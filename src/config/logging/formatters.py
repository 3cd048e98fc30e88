"""Formatter JSON dos logs do relay.

Cada linha sai com os campos obrigatórios numa ordem fixa:
asctime, level, logger, message, correlation_id, service.

Ajustes para o Cloud Run:
- asctime em UTC no formato ISO-8601 (sufixo Z)
- campo `severity` com o nível, lido pelo Cloud Logging para classificar
  a entrada (sem ele toda linha de stderr vira ERROR)

Sync tokens já chegam mascarados pelo SyncTokenRedactionFilter.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from pythonjsonlogger.json import JsonFormatter

if TYPE_CHECKING:
    import logging

# Ordem de saída dos campos obrigatórios
LOG_FIELD_ORDER = ("asctime", "levelname", "name", "message", "correlation_id", "service")

REQUIRED_LOG_FIELDS = frozenset(LOG_FIELD_ORDER)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class RelayJsonFormatter(JsonFormatter):
    """JsonFormatter com timestamp UTC e `severity` do Cloud Logging."""

    converter = time.gmtime

    def add_fields(
        self,
        log_data: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_data, record, message_dict)
        log_data["severity"] = record.levelname


def create_json_formatter() -> RelayJsonFormatter:
    """Cria o formatter JSON do relay.

    Exemplo de output:
        {
            "asctime": "2026-02-02T10:30:00Z",
            "level": "INFO",
            "logger": "app.services.sync_reconciler",
            "message": "sync_token_updated",
            "correlation_id": "abc-123",
            "service": "calendar-relay",
            "strategy": "incremental",
            "next_token": "***9f2c",
            "severity": "INFO"
        }
    """
    format_string = " ".join(f"%({field})s" for field in LOG_FIELD_ORDER)

    return RelayJsonFormatter(
        format_string,
        datefmt=TIMESTAMP_FORMAT,
        rename_fields=FIELD_RENAME_MAP,
    )
