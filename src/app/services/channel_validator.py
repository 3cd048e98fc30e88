"""Validação de canal de notificação.

Função pura: não lê store, não grava estado, não dispara fetch. Um REJECT
é ocorrência benigna (entrega duplicada, canal antigo, replay), não erro.
"""

from __future__ import annotations

from app.domain.sync import ChannelDecision


def validate_channel(incoming_channel_id: str | None, active_channel_id: str | None) -> ChannelDecision:
    """Compara o canal da notificação com o canal ativo.

    Comparação exata e case-sensitive, sem normalização. Sem canal ativo
    estabelecido, toda notificação é rejeitada.
    """
    if not active_channel_id or not incoming_channel_id:
        return ChannelDecision.REJECT
    if incoming_channel_id != active_channel_id:
        return ChannelDecision.REJECT
    return ChannelDecision.ACCEPT
