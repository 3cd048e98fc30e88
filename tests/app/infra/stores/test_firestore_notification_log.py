"""Testes do FirestoreNotificationLog com mock do client."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from app.infra.stores import FirestoreNotificationLog


@pytest.mark.asyncio
async def test_append_writes_new_document_per_record() -> None:
    client = MagicMock()
    log = FirestoreNotificationLog(client, collection_name="notifications_accepted")

    await log.append({"channel_id": "chan-42", "kind": "accepted"})
    await log.append({"channel_id": "chan-42", "kind": "accepted"})

    client.collection.assert_called_with("notifications_accepted")
    doc_ids = [call.args[0] for call in client.collection.return_value.document.call_args_list]
    assert len(set(doc_ids)) == 2
    assert all("_chan-42_" in doc_id for doc_id in doc_ids)
    written = client.collection.return_value.document.return_value.set.call_args[0][0]
    assert written["kind"] == "accepted"
    assert "created_at" in written


def test_append_sync_swallows_write_errors() -> None:
    client = MagicMock()
    client.collection.return_value.document.return_value.set.side_effect = RuntimeError("down")
    log = FirestoreNotificationLog(client)

    log.append_sync({"channel_id": "chan-42"})

    client.collection.assert_called_with("notifications_received")
