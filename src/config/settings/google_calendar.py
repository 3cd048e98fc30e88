"""Settings do provider Google Calendar.

Credenciais aceitas (em ordem de precedência):
- GOOGLE_SERVICE_ACCOUNT_JSON: service account com acesso ao calendário
- GOOGLE_CLIENT_ID/SECRET + GOOGLE_REFRESH_TOKEN: OAuth 2.0 offline
"""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


class GoogleCalendarSettings(BaseModel):
    """Configuracoes de acesso ao Google Calendar."""

    model_config = ConfigDict(extra="ignore")

    calendar_id: str = Field(default="primary", description="Calendario observado.")
    client_id: str = Field(default="", description="Client ID OAuth.")
    client_secret: str = Field(default="", description="Client Secret OAuth.")
    refresh_token: str = Field(default="", description="Refresh token OAuth offline.")
    token_uri: str = Field(default=GOOGLE_TOKEN_URI, description="Endpoint de token OAuth.")
    service_account_json: str | None = Field(
        default=None,
        description="Credencial JSON da service account em formato texto.",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout de cada chamada HTTP ao provider.",
    )
    fetch_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Teto para um fetch completo (todas as paginas).",
    )
    page_size: int = Field(default=250, ge=1, le=2500, description="maxResults por pagina.")

    def validate_settings(self) -> list[str]:
        """Valida credenciais minimas."""
        errors: list[str] = []
        if self.service_account_json:
            return errors
        if not self.refresh_token:
            errors.append("GOOGLE_REFRESH_TOKEN ou GOOGLE_SERVICE_ACCOUNT_JSON não configurado")
        if not self.client_id or not self.client_secret:
            errors.append("GOOGLE_CLIENT_ID e GOOGLE_CLIENT_SECRET são obrigatórios com refresh token")
        return errors


def _read_optional_env(key: str) -> str | None:
    """Retorna valor opcional da env sem propagar string vazia."""
    raw_value = os.getenv(key)
    if raw_value is None:
        return None
    stripped_value = raw_value.strip()
    return stripped_value or None


def _load_google_calendar_from_env() -> GoogleCalendarSettings:
    """Carrega GoogleCalendarSettings a partir de variaveis de ambiente."""
    return GoogleCalendarSettings(
        calendar_id=os.getenv("GOOGLE_CALENDAR_ID", "primary") or "primary",
        client_id=os.getenv("GOOGLE_CLIENT_ID", ""),
        client_secret=os.getenv("GOOGLE_CLIENT_SECRET", ""),
        refresh_token=os.getenv("GOOGLE_REFRESH_TOKEN", ""),
        token_uri=os.getenv("GOOGLE_TOKEN_URI", GOOGLE_TOKEN_URI),
        service_account_json=_read_optional_env("GOOGLE_SERVICE_ACCOUNT_JSON"),
        request_timeout_seconds=float(os.getenv("GOOGLE_CALENDAR_REQUEST_TIMEOUT_SECONDS", "30")),
        fetch_timeout_seconds=float(os.getenv("GOOGLE_CALENDAR_FETCH_TIMEOUT_SECONDS", "120")),
        page_size=int(os.getenv("GOOGLE_CALENDAR_PAGE_SIZE", "250")),
    )


@lru_cache(maxsize=1)
def get_google_calendar_settings() -> GoogleCalendarSettings:
    """Retorna instancia cacheada de GoogleCalendarSettings."""
    return _load_google_calendar_from_env()


__all__ = ["GOOGLE_TOKEN_URI", "GoogleCalendarSettings", "get_google_calendar_settings"]
