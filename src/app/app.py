"""Entrypoint do relay de notificações do Google Calendar.

Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080

Cloud Run:
    O container deve expor a porta definida em PORT (padrão 8080).
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from api.routes import create_api_router
from app.bootstrap import (
    ensure_continuation_schema,
    initialize_app,
    validate_runtime_settings,
)
from app.bootstrap.clients import create_async_redis_client, create_firestore_client
from config.logging import get_logger
from config.settings import (
    get_base_settings,
    get_continuation_store_settings,
    get_notification_log_settings,
    get_sync_lock_settings,
)
from utils.errors import PersistenceError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)


def _uses_firestore() -> bool:
    return "firestore" in (
        get_continuation_store_settings().backend,
        get_notification_log_settings().backend,
    )


async def _prepare_continuation_schema() -> None:
    try:
        applied = await ensure_continuation_schema()
    except PersistenceError as exc:
        logger.error(
            "continuation_schema_not_ready",
            extra={"backend": "sql", "error_type": type(exc).__name__},
        )
        if get_base_settings().is_strict:
            raise
        return
    if applied:
        logger.info("continuation_schema_ready", extra={"backend": "sql"})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Inicializa conexões configuradas (Redis, Firestore)
    - Aplica o schema do store de continuação (backend sql)

    Shutdown:
    - Fecha conexões gracefully
    """
    service_name = get_base_settings().service_name
    logger.info("app_starting", extra={"service": service_name})
    validate_runtime_settings()
    app.state.redis_client = None
    app.state.firestore_client = None

    if get_sync_lock_settings().backend == "redis":
        try:
            app.state.redis_client = create_async_redis_client()
        except Exception as exc:
            logger.warning("redis_client_not_ready", extra={"error_type": type(exc).__name__})

    if _uses_firestore():
        try:
            app.state.firestore_client = create_firestore_client()
        except Exception as exc:
            logger.warning("firestore_client_not_ready", extra={"error_type": type(exc).__name__})

    await _prepare_continuation_schema()

    yield

    logger.info("app_shutting_down", extra={"service": service_name})
    redis_client = getattr(app.state, "redis_client", None)
    if redis_client is not None:
        await redis_client.aclose()


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="Calendar Relay",
        description="Relay de push notifications do Google Calendar",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # Registra todas as rotas
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": get_base_settings().service_name})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    settings = get_base_settings()
    logger.info("app_starting_dev_server", extra={"port": settings.port})
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    main()
