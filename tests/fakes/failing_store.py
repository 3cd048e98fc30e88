"""Stores de continuação que falham em operações escolhidas."""

from __future__ import annotations

from app.infra.stores import MemoryContinuationStore
from utils.errors import PersistenceError


class FailingContinuationStore(MemoryContinuationStore):
    """MemoryContinuationStore com falhas injetáveis por operação."""

    def __init__(self, *, failing: set[str]) -> None:
        super().__init__()
        self._failing = failing
        self.token_writes = 0

    def _maybe_fail(self, operation: str) -> None:
        if operation in self._failing:
            raise PersistenceError(f"forced failure on {operation}")

    async def get_active_channel(self) -> str | None:
        self._maybe_fail("get_active_channel")
        return await super().get_active_channel()

    async def get_sync_token(self) -> str | None:
        self._maybe_fail("get_sync_token")
        return await super().get_sync_token()

    async def set_sync_token(self, token: str) -> None:
        self.token_writes += 1
        self._maybe_fail("set_sync_token")
        await super().set_sync_token(token)
