"""Bootstrap da aplicação: inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, get_notification_use_case

    # Na inicialização do serviço
    initialize_app()

    # Obter o use case de intake
    use_case = get_notification_use_case()
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_continuation_store_settings,
    get_firestore_settings,
    get_google_calendar_settings,
    get_notification_log_settings,
    get_relay_settings,
    get_sync_lock_settings,
)

if TYPE_CHECKING:
    from app.protocols.continuation_store import ContinuationStoreProtocol
    from app.use_cases.google_calendar import HandleNotificationUseCase

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação com todas as configurações necessárias.

    Deve ser chamada uma vez no início do serviço.

    Configura:
    - Logging estruturado JSON com correlation_id
    - Redação de sync tokens nos logs
    """
    settings = get_base_settings()
    configure_logging(
        level=settings.log_level,
        service_name=settings.service_name,
        correlation_id_getter=get_correlation_id,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes em nível DEBUG."""
    configure_logging(
        level="DEBUG",
        service_name=f"{get_base_settings().service_name}_test",
        correlation_id_getter=get_correlation_id,
    )


def collect_settings_errors() -> list[str]:
    """Agrega erros de validação de todas as settings, prefixados por domínio."""
    base = get_base_settings()
    google_calendar = get_google_calendar_settings()
    errors: list[str] = []
    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"google_calendar: {error}" for error in google_calendar.validate_settings())
    errors.extend(f"relay: {error}" for error in get_relay_settings().validate_settings())

    continuation = get_continuation_store_settings()
    errors.extend(
        f"continuation_store: {error}"
        for error in continuation.validate(base.gcp_project, base.is_development)
    )
    notification_log = get_notification_log_settings()
    errors.extend(
        f"notification_log: {error}"
        for error in notification_log.validate(base.gcp_project, base.is_development)
    )
    sync_lock = get_sync_lock_settings()
    errors.extend(f"sync_lock: {error}" for error in sync_lock.validate(base.redis_url))
    # Lock Redis expira sozinho; precisa sobreviver a um fetch completo.
    if sync_lock.backend == "redis" and (
        sync_lock.ttl_seconds <= google_calendar.fetch_timeout_seconds
    ):
        errors.append(
            "sync_lock: SYNC_LOCK_TTL_SECONDS deve ser maior que "
            "GOOGLE_CALENDAR_FETCH_TIMEOUT_SECONDS"
        )

    if "firestore" in (continuation.backend, notification_log.backend):
        errors.extend(
            f"firestore: {error}" for error in get_firestore_settings().validate(base.gcp_project)
        )
    return errors


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development`/`test` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    errors = collect_settings_errors()

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if base.is_strict:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {base.environment}:\n{details}")


# ──────────────────────────────────────────────────────────────────────────────
# Getters (lazy initialization com cache)
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_notification_use_case() -> HandleNotificationUseCase:
    """Obtém o use case de intake (singleton)."""
    from app.bootstrap.dependencies import create_notification_use_case

    return create_notification_use_case(get_continuation_store())


async def ensure_continuation_schema() -> bool:
    """Garante tabelas e índice de canal ativo único no backend sql.

    Returns:
        True se o schema foi aplicado, False para backends sem schema.

    Raises:
        PersistenceError: gateway de queries indisponível.
    """
    from app.infra.stores import SqlContinuationStore

    if get_continuation_store_settings().backend != "sql":
        return False
    store = get_continuation_store()
    if not isinstance(store, SqlContinuationStore):
        return False
    await store.ensure_schema()
    return True


@lru_cache(maxsize=1)
def get_continuation_store() -> ContinuationStoreProtocol:
    """Obtém store de continuação para probes de readiness (singleton)."""
    from app.bootstrap.dependencies import create_continuation_store

    return create_continuation_store()
