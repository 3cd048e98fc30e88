"""Fake de forwarder que guarda os change-sets recebidos."""

from __future__ import annotations

from app.domain.sync import ChangeSet
from utils.errors import DeliveryError


class FakeForwarder:
    def __init__(self, error: DeliveryError | None = None) -> None:
        self._error = error
        self.calls: list[tuple[ChangeSet, dict[str, str]]] = []

    async def forward(self, change_set: ChangeSet, metadata: dict[str, str]) -> None:
        self.calls.append((change_set, dict(metadata)))
        if self._error is not None:
            raise self._error

    @property
    def forwarded_records(self) -> int:
        return sum(len(change_set.records) for change_set, _ in self.calls)
