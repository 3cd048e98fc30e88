"""Testes do parse de headers de push notification."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from api.connectors.google_calendar import MissingChannelIdError, parse_notification_headers


def test_parses_all_google_headers() -> None:
    received_at = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)
    headers = {
        "x-goog-channel-id": "chan-42",
        "x-goog-resource-id": " res-1 ",
        "x-goog-resource-state": "exists",
        "x-goog-message-number": "3",
    }

    notification = parse_notification_headers(headers, received_at)

    assert notification.channel_id == "chan-42"
    assert notification.resource_id == "res-1"
    assert notification.resource_state == "exists"
    assert notification.message_number == "3"
    assert notification.received_at == received_at


def test_optional_headers_default_to_none() -> None:
    notification = parse_notification_headers({"x-goog-channel-id": "chan-42"})

    assert notification.resource_id is None
    assert notification.resource_state is None
    assert notification.received_at.tzinfo is not None


@pytest.mark.parametrize("headers", [{}, {"x-goog-channel-id": ""}, {"x-goog-channel-id": "   "}])
def test_missing_channel_id_raises(headers: dict[str, str]) -> None:
    with pytest.raises(MissingChannelIdError):
        parse_notification_headers(headers)
