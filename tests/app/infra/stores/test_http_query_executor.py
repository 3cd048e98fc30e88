"""Testes do HttpQueryExecutor usando httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from app.infra.http import HttpClient, HttpClientConfig
from app.infra.stores import HttpQueryExecutor
from utils.errors import PersistenceError


def _executor(handler) -> HttpQueryExecutor:
    config = HttpClientConfig(timeout_seconds=1.0, transport=httpx.MockTransport(handler))
    return HttpQueryExecutor("https://db.example/query", HttpClient(config))


@pytest.mark.asyncio
async def test_posts_statement_and_params() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"rows": [{"id": "chan-42"}, "garbage"]})

    rows = await _executor(handler).execute("SELECT id FROM t WHERE id = $1", ["chan-42"])

    assert seen["body"] == {"query": "SELECT id FROM t WHERE id = $1", "params": ["chan-42"]}
    assert rows == [{"id": "chan-42"}]


@pytest.mark.asyncio
async def test_missing_rows_means_no_result() -> None:
    rows = await _executor(lambda request: httpx.Response(200, json={"ok": True})).execute("X")

    assert rows == []


@pytest.mark.asyncio
async def test_error_status_becomes_persistence_error() -> None:
    executor = _executor(lambda request: httpx.Response(500, json={"error": "boom"}))

    with pytest.raises(PersistenceError):
        await executor.execute("SELECT 1")


@pytest.mark.asyncio
async def test_non_json_response_becomes_persistence_error() -> None:
    executor = _executor(lambda request: httpx.Response(200, content=b"not json"))

    with pytest.raises(PersistenceError):
        await executor.execute("SELECT 1")


@pytest.mark.asyncio
async def test_connection_error_becomes_persistence_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(PersistenceError):
        await _executor(handler).execute("SELECT 1")


def test_requires_endpoint() -> None:
    with pytest.raises(ValueError, match="ENDPOINT_POSTGRES"):
        HttpQueryExecutor("", HttpClient())
