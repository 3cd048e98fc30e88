"""Configuração de logging estruturado.

Re-exporta funções e classes para configuração de logging JSON.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização (bootstrap)
    configure_logging(level="INFO", service_name="calendar-relay")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("notification_accepted", extra={"channel_id": channel_id})

Campos obrigatórios em todo log:
- correlation_id
- service
- level
- logger
- message
- asctime
"""

from config.logging.config import configure_logging, get_logger
from config.logging.filters import (
    SENSITIVE_TOKEN_FIELDS,
    CorrelationIdFilter,
    SyncTokenRedactionFilter,
    mask_token,
)
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    LOG_FIELD_ORDER,
    REQUIRED_LOG_FIELDS,
    RelayJsonFormatter,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "LOG_FIELD_ORDER",
    "REQUIRED_LOG_FIELDS",
    "SENSITIVE_TOKEN_FIELDS",
    # Filters
    "CorrelationIdFilter",
    "RelayJsonFormatter",
    "SyncTokenRedactionFilter",
    # Configuração principal
    "configure_logging",
    # Formatters
    "create_json_formatter",
    "get_logger",
    "mask_token",
]
