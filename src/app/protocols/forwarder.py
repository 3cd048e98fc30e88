"""Contrato de entrega do change-set ao downstream."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.domain.sync import ChangeSet


class ForwarderProtocol(Protocol):
    """Entrega síncrona com timeout limitado.

    Raises:
        DeliveryError: downstream indisponível ou resposta não-2xx.
    """

    async def forward(self, change_set: ChangeSet, metadata: dict[str, str]) -> None: ...
