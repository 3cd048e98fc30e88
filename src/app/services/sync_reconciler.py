"""Sync Reconciler: escolha de estratégia e avanço do sync token.

Máquina de estados de uma execução:

    Idle -> FetchingIncremental -> Done
    Idle -> FetchingIncremental -(TokenExpired)-> FetchingFull -> Done
    Idle -(sem token)-> FetchingFull -> Done
    FetchingIncremental | FetchingFull -(UpstreamError)-> Failed

Regras:
- Token expirado leva a exatamente um fetch_all; fetch_since nunca é
  repetido na mesma execução.
- Em Failed nenhum token é gravado e o erro propaga.
- Gravação do novo token é best-effort: falha não invalida o change-set.
- Change-set vazio é um Done válido.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.domain.sync import SYNC_TOKEN_KEY, ChangeSet, SyncStrategy
from app.observability import get_correlation_id, record_latency, record_sync_outcome
from utils.errors import PersistenceError, TokenExpiredError, UpstreamError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from app.protocols.change_source import ChangeSourceProtocol
    from app.protocols.continuation_store import ContinuationStoreProtocol
    from app.protocols.sync_lock import SyncLockProtocol

logger = logging.getLogger(__name__)

_COMPONENT = "sync_reconciler"
SYNC_LOCK_KEY = f"sync_token:{SYNC_TOKEN_KEY}"


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Resultado de uma reconciliação concluída."""

    change_set: ChangeSet
    strategy: SyncStrategy
    token_persisted: bool

    @property
    def record_count(self) -> int:
        return len(self.change_set.records)


class SyncReconciler:
    """Resolve a estratégia de fetch e persiste a continuação.

    Args:
        store: Store de continuação (leitura/gravação do sync token)
        change_source: Adapter do provider
        sync_lock: Lock single-flight opcional
        lock_wait_seconds: Espera máxima pelo lock antes de seguir sem ele
    """

    def __init__(
        self,
        *,
        store: ContinuationStoreProtocol,
        change_source: ChangeSourceProtocol,
        sync_lock: SyncLockProtocol | None = None,
        lock_wait_seconds: float = 30.0,
    ) -> None:
        self._store = store
        self._change_source = change_source
        self._sync_lock = sync_lock
        self._lock_wait_seconds = lock_wait_seconds

    async def reconcile(self, *, channel_id: str) -> SyncResult:
        """Executa uma reconciliação completa.

        Raises:
            UpstreamError: provider falhou (estado Failed).
        """
        started_at = time.perf_counter()
        async with self._single_flight(channel_id):
            result = await self._run(channel_id)
        record_latency(
            _COMPONENT,
            f"reconcile_{result.strategy}",
            (time.perf_counter() - started_at) * 1000,
            get_correlation_id(),
        )
        record_sync_outcome(
            result.strategy,
            result.record_count,
            result.token_persisted,
            get_correlation_id(),
        )
        return result

    async def _run(self, channel_id: str) -> SyncResult:
        token = await self._read_token(channel_id)
        if token is None:
            change_set = await self._fetch_full(channel_id, reason="no_token")
            strategy: SyncStrategy = "full"
        else:
            try:
                change_set = await self._change_source.fetch_since(token)
                strategy = "incremental"
            except TokenExpiredError as exc:
                logger.info(
                    "sync_token_expired_full_resync",
                    extra={
                        "component": _COMPONENT,
                        "channel_id": channel_id,
                        "status_code": exc.status_code,
                    },
                )
                change_set = await self._fetch_full(channel_id, reason="token_expired")
                strategy = "full"
            except UpstreamError as exc:
                self._log_failed(channel_id, "incremental", exc)
                raise

        token_persisted = await self._persist_token(channel_id, strategy, change_set.next_token)
        return SyncResult(change_set=change_set, strategy=strategy, token_persisted=token_persisted)

    async def _fetch_full(self, channel_id: str, *, reason: str) -> ChangeSet:
        logger.info(
            "sync_full_resync_started",
            extra={"component": _COMPONENT, "channel_id": channel_id, "reason": reason},
        )
        try:
            return await self._change_source.fetch_all()
        except TokenExpiredError as exc:
            # Sem token na requisição; 410 aqui é falha do provider.
            self._log_failed(channel_id, "full", exc)
            raise UpstreamError(str(exc), status_code=exc.status_code, strategy="full") from exc
        except UpstreamError as exc:
            self._log_failed(channel_id, "full", exc)
            raise

    async def _read_token(self, channel_id: str) -> str | None:
        try:
            return await self._store.get_sync_token()
        except PersistenceError:
            logger.error(
                "sync_token_read_failed",
                extra={"component": _COMPONENT, "channel_id": channel_id, "fallback": "full"},
            )
            return None

    async def _persist_token(
        self,
        channel_id: str,
        strategy: SyncStrategy,
        next_token: str | None,
    ) -> bool:
        if next_token is None:
            # Provider não devolveu ponto de continuação: token atual mantido.
            return False
        try:
            await self._store.set_sync_token(next_token)
        except PersistenceError:
            logger.error(
                "sync_token_persist_failed",
                extra={"component": _COMPONENT, "channel_id": channel_id, "strategy": strategy},
            )
            return False
        logger.info(
            "sync_token_updated",
            extra={
                "component": _COMPONENT,
                "channel_id": channel_id,
                "strategy": strategy,
                "next_token": next_token,
            },
        )
        return True

    @asynccontextmanager
    async def _single_flight(self, channel_id: str) -> AsyncIterator[None]:
        if self._sync_lock is None:
            yield
            return

        owner: str | None = None
        try:
            owner = await self._sync_lock.acquire(SYNC_LOCK_KEY, self._lock_wait_seconds)
        except PersistenceError:
            logger.error(
                "sync_lock_unavailable",
                extra={"component": _COMPONENT, "channel_id": channel_id},
            )
        if owner is None:
            logger.warning(
                "sync_lock_not_acquired",
                extra={
                    "component": _COMPONENT,
                    "channel_id": channel_id,
                    "wait_seconds": self._lock_wait_seconds,
                },
            )
        try:
            yield
        finally:
            if owner is not None:
                await self._release(owner, channel_id)

    async def _release(self, owner: str, channel_id: str) -> None:
        try:
            await self._sync_lock.release(SYNC_LOCK_KEY, owner)  # type: ignore[union-attr]
        except PersistenceError:
            logger.error(
                "sync_lock_release_failed",
                extra={"component": _COMPONENT, "channel_id": channel_id},
            )

    def _log_failed(self, channel_id: str, strategy: SyncStrategy, exc: UpstreamError) -> None:
        logger.error(
            "sync_failed",
            extra={
                "component": _COMPONENT,
                "channel_id": channel_id,
                "strategy": strategy,
                "status_code": exc.status_code,
                "error_type": type(exc).__name__,
            },
        )
