"""Adapter de mudancas do Google Calendar (events.list com syncToken).

Classifica falhas do provider:
- 410 Gone em busca incremental -> TokenExpiredError (recuperavel)
- qualquer outra falha, incluindo timeout -> UpstreamError
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any

import google_auth_httplib2
import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import credentials as oauth2_credentials
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from app.domain.sync import ChangeSet, SyncStrategy
from app.infra.calendar.google_calendar_parsers import (
    extract_next_token,
    http_status,
    map_change_records,
)
from app.observability import get_correlation_id
from app.protocols.change_source import ChangeSourceProtocol
from utils.errors import TokenExpiredError, UpstreamError

if TYPE_CHECKING:
    from google.auth.credentials import Credentials

    from config.settings import GoogleCalendarSettings

logger = logging.getLogger(__name__)

_COMPONENT = "google_calendar_change_source"
_CALENDAR_READONLY_SCOPE = "https://www.googleapis.com/auth/calendar.readonly"
# Só 410 Gone invalida o syncToken. 401 é falha de credencial: vira
# UpstreamError e não dispara full resync.
_TOKEN_EXPIRED_STATUSES = frozenset({410})


class GoogleCalendarChangeSource(ChangeSourceProtocol):
    """Busca mudancas de um calendario via API v3 do Google."""

    __slots__ = (
        "_calendar_id",
        "_credentials",
        "_fetch_timeout",
        "_page_size",
        "_request_timeout",
        "_service",
    )

    def __init__(
        self,
        *,
        calendar_id: str,
        credentials: Credentials,
        request_timeout_seconds: float = 30.0,
        fetch_timeout_seconds: float = 120.0,
        page_size: int = 250,
    ) -> None:
        self._calendar_id = calendar_id
        self._credentials = credentials
        self._request_timeout = request_timeout_seconds
        self._fetch_timeout = fetch_timeout_seconds
        self._page_size = page_size
        http = google_auth_httplib2.AuthorizedHttp(
            credentials,
            http=httplib2.Http(timeout=request_timeout_seconds),
        )
        self._service = build("calendar", "v3", http=http, cache_discovery=False)

    async def fetch_since(self, token: str) -> ChangeSet:
        return await self._fetch("incremental", token)

    async def fetch_all(self) -> ChangeSet:
        return await self._fetch("full", None)

    def refresh_credentials(self) -> None:
        """Renova a credencial de acesso se ausente ou expirada."""
        if self._credentials.valid:
            return
        request = google_auth_httplib2.Request(httplib2.Http(timeout=self._request_timeout))
        self._credentials.refresh(request)
        logger.info(
            "google_credentials_refreshed",
            extra={"component": _COMPONENT, "correlation_id": get_correlation_id()},
        )

    async def _fetch(self, strategy: SyncStrategy, sync_token: str | None) -> ChangeSet:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._fetch_sync, strategy, sync_token),
                timeout=self._fetch_timeout,
            )
        except TimeoutError as exc:
            self._log_error(action=f"fetch_{strategy}", result="timeout")
            raise UpstreamError("google_calendar_timeout", strategy=strategy) from exc

    def _fetch_sync(self, strategy: SyncStrategy, sync_token: str | None) -> ChangeSet:
        try:
            self.refresh_credentials()
        except GoogleAuthError as exc:
            self._log_error(action="refresh_credentials", result="error")
            raise UpstreamError("google_credentials_refresh_failed", strategy=strategy) from exc

        params = self._list_params(sync_token)
        records = []
        while True:
            response = self._list_page(params, strategy)
            records.extend(map_change_records(response))
            page_token = response.get("nextPageToken")
            if not page_token:
                # Apenas a ultima pagina carrega nextSyncToken.
                return ChangeSet(records=records, next_token=extract_next_token(response))
            params["pageToken"] = page_token

    def _list_params(self, sync_token: str | None) -> dict[str, Any]:
        params: dict[str, Any] = {
            "calendarId": self._calendar_id,
            "singleEvents": True,
            "maxResults": self._page_size,
        }
        if sync_token is not None:
            params["syncToken"] = sync_token
            return params
        params["showDeleted"] = True
        params["orderBy"] = "updated"
        return params

    def _list_page(self, params: dict[str, Any], strategy: SyncStrategy) -> dict[str, Any]:
        try:
            return self._list_events_sync(params)
        except HttpError as exc:
            status_code = http_status(exc)
            if strategy == "incremental" and status_code in _TOKEN_EXPIRED_STATUSES:
                logger.info(
                    "google_sync_token_expired",
                    extra={
                        "component": _COMPONENT,
                        "status_code": status_code,
                        "correlation_id": get_correlation_id(),
                    },
                )
                raise TokenExpiredError(
                    "google_sync_token_expired",
                    status_code=status_code,
                    strategy=strategy,
                ) from exc
            self._log_error(action=f"fetch_{strategy}", result="error", exc=exc)
            raise UpstreamError(
                "google_calendar_http_error",
                status_code=status_code,
                strategy=strategy,
            ) from exc
        except (OSError, httplib2.HttpLib2Error, GoogleAuthError) as exc:
            self._log_error(action=f"fetch_{strategy}", result="error")
            raise UpstreamError("google_calendar_transport_error", strategy=strategy) from exc

    def _list_events_sync(self, params: dict[str, Any]) -> dict[str, Any]:
        return self._service.events().list(**params).execute()

    def _log_error(self, *, action: str, result: str, exc: HttpError | None = None) -> None:
        extra: dict[str, Any] = {
            "component": _COMPONENT,
            "action": action,
            "result": result,
            "correlation_id": get_correlation_id(),
        }
        if exc is not None:
            extra["status_code"] = http_status(exc)
            extra["error_type"] = type(exc).__name__
            logger.error("google_calendar_http_error", extra=extra)
            return
        logger.exception("google_calendar_unexpected_error", extra=extra)


def build_google_credentials(settings: GoogleCalendarSettings) -> Credentials:
    """Cria credenciais a partir de service account ou refresh token OAuth."""
    if settings.service_account_json:
        return service_account.Credentials.from_service_account_info(
            json.loads(settings.service_account_json),
            scopes=[_CALENDAR_READONLY_SCOPE],
        )
    if not settings.refresh_token:
        msg = "GOOGLE_REFRESH_TOKEN ou GOOGLE_SERVICE_ACCOUNT_JSON não configurado"
        raise ValueError(msg)
    return oauth2_credentials.Credentials(
        token=None,
        refresh_token=settings.refresh_token,
        client_id=settings.client_id,
        client_secret=settings.client_secret,
        token_uri=settings.token_uri,
        scopes=[_CALENDAR_READONLY_SCOPE],
    )


def create_google_calendar_change_source(
    settings: GoogleCalendarSettings,
) -> GoogleCalendarChangeSource:
    return GoogleCalendarChangeSource(
        calendar_id=settings.calendar_id,
        credentials=build_google_credentials(settings),
        request_timeout_seconds=settings.request_timeout_seconds,
        fetch_timeout_seconds=settings.fetch_timeout_seconds,
        page_size=settings.page_size,
    )
