"""Settings de política do relay.

Centraliza as decisões configuráveis do intake: de onde vem o canal
válido, como responder a canal divergente e se há forward downstream.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class RelaySettings(BaseModel):
    """Configuracoes de validacao de canal e forwarding."""

    model_config = ConfigDict(extra="ignore")

    channel_validation_source: Literal["store", "env"] = Field(
        default="store",
        description="Origem do canal ativo: store de continuacao ou VALID_CHANNEL_ID.",
    )
    valid_channel_id: str | None = Field(
        default=None,
        description="Canal valido quando a origem e 'env'.",
    )
    channel_mismatch_policy: Literal["ignore", "forbidden"] = Field(
        default="ignore",
        description="'ignore' responde 200, 'forbidden' responde 403.",
    )
    forwarding_enabled: bool = Field(default=True, description="Habilita forward downstream.")
    forward_url: str = Field(default="", description="Endpoint downstream (HTTP POST).")
    forward_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout do POST downstream.",
    )

    def validate_settings(self) -> list[str]:
        errors: list[str] = []
        if self.channel_validation_source == "env" and not self.valid_channel_id:
            errors.append("CHANNEL_VALIDATION_SOURCE=env requer VALID_CHANNEL_ID")
        if self.forwarding_enabled and not self.forward_url:
            errors.append("FORWARDING_ENABLED=true requer FORWARD_URL")
        return errors


def _parse_bool(value: str) -> bool:
    """Converte texto de env em bool com o mesmo padrao dos outros settings."""
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_choice(value: str, choices: tuple[str, ...], default: str) -> str:
    normalized = value.strip().lower()
    return normalized if normalized in choices else default


def _load_relay_from_env() -> RelaySettings:
    """Carrega RelaySettings a partir de variaveis de ambiente."""
    valid_channel_id = os.getenv("VALID_CHANNEL_ID", "").strip() or None
    return RelaySettings(
        channel_validation_source=_parse_choice(  # type: ignore[arg-type]
            os.getenv("CHANNEL_VALIDATION_SOURCE", "store"), ("store", "env"), "store"
        ),
        valid_channel_id=valid_channel_id,
        channel_mismatch_policy=_parse_choice(  # type: ignore[arg-type]
            os.getenv("CHANNEL_MISMATCH_POLICY", "ignore"), ("ignore", "forbidden"), "ignore"
        ),
        forwarding_enabled=_parse_bool(os.getenv("FORWARDING_ENABLED", "true")),
        forward_url=os.getenv("FORWARD_URL", "").strip(),
        forward_timeout_seconds=float(os.getenv("FORWARD_TIMEOUT_SECONDS", "10")),
    )


@lru_cache(maxsize=1)
def get_relay_settings() -> RelaySettings:
    """Retorna instancia cacheada de RelaySettings."""
    return _load_relay_from_env()


__all__ = ["RelaySettings", "get_relay_settings"]
