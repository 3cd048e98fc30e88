"""Testes do FirestoreContinuationStore com mock do client."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from app.infra.stores import FirestoreContinuationStore
from app.infra.stores.firestore_continuation_store import swap_active_channel
from utils.errors import PersistenceError


def _snapshot(doc_id: str) -> SimpleNamespace:
    return SimpleNamespace(id=doc_id, reference=f"ref:{doc_id}")


class TestSwapActiveChannel:
    def test_deactivates_other_active_channels(self) -> None:
        transaction = MagicMock()
        channels = MagicMock()
        channels.where.return_value.stream.return_value = iter(
            [_snapshot("chan-old"), _snapshot("chan-new")]
        )
        new_ref = MagicMock()
        channels.document.return_value = new_ref

        deactivated = swap_active_channel(transaction, channels, "chan-new", {"resource_id": "r"})

        assert deactivated == 1
        transaction.update.assert_called_once_with("ref:chan-old", {"active": False})
        transaction.set.assert_called_once_with(new_ref, {"resource_id": "r", "active": True})
        channels.where.return_value.stream.assert_called_once_with(transaction=transaction)

    def test_first_channel_only_writes_new_document(self) -> None:
        transaction = MagicMock()
        channels = MagicMock()
        channels.where.return_value.stream.return_value = iter([])

        deactivated = swap_active_channel(transaction, channels, "chan-1", {})

        assert deactivated == 0
        transaction.update.assert_not_called()
        transaction.set.assert_called_once()


class TestFirestoreContinuationStore:
    @pytest.mark.asyncio
    async def test_get_active_channel_returns_document_id(self) -> None:
        client = MagicMock()
        query = client.collection.return_value.where.return_value.limit.return_value
        query.stream.return_value = iter([_snapshot("chan-42")])
        store = FirestoreContinuationStore(client)

        assert await store.get_active_channel() == "chan-42"
        client.collection.assert_called_with("google_channels")

    @pytest.mark.asyncio
    async def test_get_active_channel_without_documents(self) -> None:
        client = MagicMock()
        query = client.collection.return_value.where.return_value.limit.return_value
        query.stream.return_value = iter([])
        store = FirestoreContinuationStore(client)

        assert await store.get_active_channel() is None

    @pytest.mark.asyncio
    async def test_sync_token_round_trip_uses_singleton_document(self) -> None:
        client = MagicMock()
        document = client.collection.return_value.document.return_value
        document.get.return_value = SimpleNamespace(
            exists=True,
            to_dict=lambda: {"sync_token": "tok-A"},
        )
        store = FirestoreContinuationStore(client, tokens_collection="tokens")

        await store.set_sync_token("tok-A")
        token = await store.get_sync_token()

        assert token == "tok-A"
        client.collection.assert_called_with("tokens")
        client.collection.return_value.document.assert_called_with("current")
        written = document.set.call_args[0][0]
        assert written["sync_token"] == "tok-A"
        assert "updated_at" in written

    @pytest.mark.asyncio
    async def test_missing_token_document_returns_none(self) -> None:
        client = MagicMock()
        client.collection.return_value.document.return_value.get.return_value = SimpleNamespace(
            exists=False
        )
        store = FirestoreContinuationStore(client)

        assert await store.get_sync_token() is None

    @pytest.mark.asyncio
    async def test_client_errors_become_persistence_error(self) -> None:
        client = MagicMock()
        client.collection.side_effect = RuntimeError("unavailable")
        store = FirestoreContinuationStore(client)

        with pytest.raises(PersistenceError):
            await store.get_sync_token()
