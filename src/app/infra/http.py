"""Cliente HTTP base para chamadas externas do relay.

Sem retry: a política de reentrega pertence ao chamador externo (o próprio
provider reenvia notificações não confirmadas).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 10.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True
    transport: httpx.AsyncBaseTransport | None = None


class HttpError(Exception):
    """Erro de requisição HTTP sem dados sensíveis."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_timeout: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_timeout = is_timeout


class HttpClient:
    """Cliente HTTP simples com timeout explícito em toda chamada."""

    def __init__(self, config: HttpClientConfig | None = None) -> None:
        self._config = config or HttpClientConfig()

    @property
    def timeout_seconds(self) -> float:
        return self._config.timeout_seconds

    async def post(
        self,
        url: str,
        json: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        merged_headers = {**self._config.default_headers, **(headers or {})}
        try:
            async with httpx.AsyncClient(
                verify=self._config.verify_ssl,
                transport=self._config.transport,
            ) as client:
                response = await client.post(
                    url,
                    json=json,
                    headers=merged_headers,
                    timeout=self._config.timeout_seconds,
                )
        except httpx.TimeoutException as exc:
            logger.warning("http_timeout", extra={"timeout_seconds": self._config.timeout_seconds})
            raise HttpError("http_timeout", is_timeout=True) from exc
        except httpx.HTTPError as exc:
            raise HttpError("http_connection_error") from exc

        if response.status_code >= 400:
            raise HttpError("http_error_status", status_code=response.status_code)
        return response
