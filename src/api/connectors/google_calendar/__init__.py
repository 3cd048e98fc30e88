"""Connector Google Calendar: parsing dos headers de push notification."""

from __future__ import annotations

from api.connectors.google_calendar.headers import (
    MissingChannelIdError,
    parse_notification_headers,
)

__all__ = ["MissingChannelIdError", "parse_notification_headers"]
