"""Registro de métricas via structured logging.

As métricas são registradas como logs estruturados e podem ser agregadas
posteriormente (BigQuery, Cloud Logging metrics, etc.).

Métricas suportadas:
- Latência: histogram de tempos de execução por componente/operação
- Sync: resultado de cada reconciliação (estratégia, registros, token)
- Notificação: desfecho de cada notificação recebida

Uso:
    from app.observability import record_latency, record_sync_outcome

    start = time.perf_counter()
    # ... operação ...
    record_latency("sync_reconciler", "reconcile", (time.perf_counter() - start) * 1000)
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "sync_reconciler")
        operation: Nome da operação (ex: "reconcile")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )


def record_sync_outcome(
    strategy: str,
    record_count: int,
    token_persisted: bool,
    correlation_id: str | None = None,
) -> None:
    """Registra resultado de uma reconciliação bem-sucedida.

    Args:
        strategy: "incremental" ou "full"
        record_count: Quantidade de registros no change-set
        token_persisted: Se o novo sync token foi gravado
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_sync_outcome",
        extra={
            "metric_type": "sync_outcome",
            "component": "sync_reconciler",
            "strategy": strategy,
            "record_count": record_count,
            "token_persisted": token_persisted,
            "correlation_id": correlation_id,
        },
    )


def record_notification_outcome(
    outcome: str,
    status_code: int,
    correlation_id: str | None = None,
) -> None:
    """Registra desfecho de uma notificação (processed, ignored, rejected, error)."""
    logger.info(
        "metric_notification_outcome",
        extra={
            "metric_type": "notification_outcome",
            "component": "notification_intake",
            "outcome": outcome,
            "status_code": status_code,
            "correlation_id": correlation_id,
        },
    )
