"""Testes do use case de intake de notificações do Google Calendar."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from app.domain.sync import SYNC_TOKEN_KEY, ChangeSet, InboundNotification
from app.infra.stores import MemoryContinuationStore, MemoryNotificationLog
from app.services.sync_reconciler import SyncReconciler
from app.use_cases.google_calendar import (
    HandleNotificationUseCase,
    IntakePolicy,
    NotificationAck,
)
from tests.fakes.failing_store import FailingContinuationStore
from tests.fakes.fake_change_source import FakeChangeSource, build_records
from tests.fakes.fake_forwarder import FakeForwarder
from utils.errors import DeliveryError, UpstreamError


def _notification(channel_id: str = "chan-42", resource_state: str = "exists") -> InboundNotification:
    return InboundNotification(
        channel_id=channel_id,
        resource_id="res-1",
        resource_state=resource_state,
        message_number="7",
        received_at=datetime(2026, 1, 15, 12, 0, tzinfo=UTC),
    )


async def _store_with_channel(channel_id: str = "chan-42") -> MemoryContinuationStore:
    store = MemoryContinuationStore()
    await store.set_active_channel(channel_id, "res-1", None)
    return store


def _build_use_case(
    store: MemoryContinuationStore,
    source: FakeChangeSource,
    *,
    forwarder: FakeForwarder | None = None,
    policy: IntakePolicy | None = None,
) -> tuple[HandleNotificationUseCase, MemoryNotificationLog, MemoryNotificationLog]:
    received_log = MemoryNotificationLog()
    accepted_log = MemoryNotificationLog()
    use_case = HandleNotificationUseCase(
        store=store,
        reconciler=SyncReconciler(store=store, change_source=source),
        received_log=received_log,
        accepted_log=accepted_log,
        forwarder=forwarder,
        policy=policy,
    )
    return use_case, received_log, accepted_log


@pytest.mark.asyncio
async def test_first_notification_runs_full_resync_and_forwards() -> None:
    store = await _store_with_channel()
    source = FakeChangeSource(all_result=ChangeSet(records=build_records(3), next_token="tok-A"))
    forwarder = FakeForwarder()
    use_case, _, _ = _build_use_case(store, source, forwarder=forwarder)

    ack = await use_case.execute(_notification())

    assert ack.status_code == 200
    assert ack.status == "processed"
    assert ack.count == 3
    assert ack.strategy == "full"
    assert ack.delivery == "delivered"
    assert await store.get_sync_token() == "tok-A"
    assert forwarder.forwarded_records == 3
    _, metadata = forwarder.calls[0]
    assert metadata == {"channel_id": "chan-42", "resource_id": "res-1", "strategy": "full"}


@pytest.mark.asyncio
async def test_expired_token_with_empty_resync_skips_forward() -> None:
    store = await _store_with_channel()
    await store.set_sync_token("tok-old")
    source = FakeChangeSource.expired_token(ChangeSet(records=[], next_token="tok-new"))
    forwarder = FakeForwarder()
    use_case, _, _ = _build_use_case(store, source, forwarder=forwarder)

    ack = await use_case.execute(_notification())

    assert ack.status_code == 200
    assert ack.count == 0
    assert ack.delivery == "skipped"
    assert await store.get_sync_token() == "tok-new"
    assert forwarder.calls == []
    assert source.since_calls == ["tok-old"]
    assert source.all_calls == 1


@pytest.mark.asyncio
async def test_mismatched_channel_is_ignored_without_side_effects() -> None:
    store = await _store_with_channel("chan-42")
    source = FakeChangeSource()
    forwarder = FakeForwarder()
    use_case, received_log, accepted_log = _build_use_case(store, source, forwarder=forwarder)

    ack = await use_case.execute(_notification("chan-X"))

    assert ack.status_code == 200
    assert ack.status == "ignored"
    assert ack.reason == "channel_mismatch"
    assert source.total_calls == 0
    assert forwarder.calls == []
    assert store.token_rows() == {}
    assert len(received_log.get_records()) == 1
    assert accepted_log.get_records() == []


@pytest.mark.asyncio
async def test_no_active_channel_rejects() -> None:
    source = FakeChangeSource()
    use_case, _, _ = _build_use_case(MemoryContinuationStore(), source)

    ack = await use_case.execute(_notification())

    assert ack.status == "ignored"
    assert ack.reason == "no_active_channel"
    assert source.total_calls == 0


@pytest.mark.asyncio
async def test_forbidden_policy_answers_403() -> None:
    store = await _store_with_channel("chan-42")
    source = FakeChangeSource()
    use_case, _, _ = _build_use_case(
        store, source, policy=IntakePolicy(mismatch_policy="forbidden")
    )

    ack = await use_case.execute(_notification("chan-X"))

    assert ack.status_code == 403
    assert ack.status == "rejected"
    assert source.total_calls == 0


@pytest.mark.asyncio
async def test_env_channel_source_ignores_store() -> None:
    store = await _store_with_channel("chan-store")
    source = FakeChangeSource(all_result=ChangeSet(records=build_records(1), next_token="tok-A"))
    use_case, _, _ = _build_use_case(
        store,
        source,
        policy=IntakePolicy(channel_source="env", configured_channel_id="chan-env"),
    )

    accepted = await use_case.execute(_notification("chan-env"))
    ignored = await use_case.execute(_notification("chan-store"))

    assert accepted.status == "processed"
    assert ignored.status == "ignored"


@pytest.mark.asyncio
async def test_every_notification_is_logged_as_received() -> None:
    store = await _store_with_channel("chan-42")
    use_case, received_log, accepted_log = _build_use_case(store, FakeChangeSource())

    await use_case.execute(_notification("chan-42"))
    await use_case.execute(_notification("chan-X"))

    received = received_log.get_records()
    assert [record["channel_id"] for record in received] == ["chan-42", "chan-X"]
    assert all(record["kind"] == "received" for record in received)
    assert [record["channel_id"] for record in accepted_log.get_records()] == ["chan-42"]


@pytest.mark.asyncio
async def test_upstream_failure_returns_500_and_keeps_token() -> None:
    store = await _store_with_channel()
    await store.set_sync_token("tok-old")
    source = FakeChangeSource(since_error=UpstreamError("boom", status_code=503, strategy="incremental"))
    forwarder = FakeForwarder()
    use_case, _, _ = _build_use_case(store, source, forwarder=forwarder)

    ack = await use_case.execute(_notification())

    assert ack.status_code == 500
    assert ack.status == "error"
    assert ack.strategy == "incremental"
    assert await store.get_sync_token() == "tok-old"
    assert forwarder.calls == []


@pytest.mark.asyncio
async def test_delivery_failure_keeps_advanced_token() -> None:
    store = await _store_with_channel()
    source = FakeChangeSource(all_result=ChangeSet(records=build_records(2), next_token="tok-A"))
    forwarder = FakeForwarder(error=DeliveryError("down", status_code=502))
    use_case, _, _ = _build_use_case(store, source, forwarder=forwarder)

    ack = await use_case.execute(_notification())

    assert ack.status_code == 200
    assert ack.delivery == "failed"
    assert ack.count == 2
    assert await store.get_sync_token() == "tok-A"


@pytest.mark.asyncio
async def test_disabled_forwarding_still_advances_token() -> None:
    store = await _store_with_channel()
    source = FakeChangeSource(all_result=ChangeSet(records=build_records(2), next_token="tok-A"))
    use_case, _, _ = _build_use_case(store, source, forwarder=None)

    ack = await use_case.execute(_notification())

    assert ack.delivery == "disabled"
    assert await store.get_sync_token() == "tok-A"


@pytest.mark.asyncio
async def test_sync_handshake_is_acknowledged_without_fetch() -> None:
    store = await _store_with_channel()
    source = FakeChangeSource()
    use_case, _, accepted_log = _build_use_case(store, source)

    ack = await use_case.execute(_notification(resource_state="sync"))

    assert ack.status_code == 200
    assert ack.reason == "sync_handshake"
    assert source.total_calls == 0
    assert len(accepted_log.get_records()) == 1


@pytest.mark.asyncio
async def test_channel_read_failure_returns_500() -> None:
    store = FailingContinuationStore(failing={"get_active_channel"})
    source = FakeChangeSource()
    use_case, received_log, _ = _build_use_case(store, source)

    ack = await use_case.execute(_notification())

    assert ack.status_code == 500
    assert ack.reason == "persistence_error"
    assert source.total_calls == 0
    assert len(received_log.get_records()) == 1


@pytest.mark.asyncio
async def test_duplicate_notifications_leave_one_token_row() -> None:
    store = await _store_with_channel()
    source = FakeChangeSource(
        since_result=ChangeSet(records=[], next_token="tok-A"),
        all_result=ChangeSet(records=build_records(1), next_token="tok-A"),
    )
    use_case, _, _ = _build_use_case(store, source)

    await use_case.execute(_notification())
    await use_case.execute(_notification())

    assert store.token_rows() == {SYNC_TOKEN_KEY: "tok-A"}


@pytest.mark.asyncio
async def test_audit_failure_does_not_block_processing() -> None:
    class _BrokenLog(MemoryNotificationLog):
        async def append(self, record: dict) -> None:
            raise RuntimeError("log down")

    store = await _store_with_channel()
    source = FakeChangeSource(all_result=ChangeSet(records=[], next_token="tok-A"))
    use_case = HandleNotificationUseCase(
        store=store,
        reconciler=SyncReconciler(store=store, change_source=source),
        received_log=_BrokenLog(),
        accepted_log=_BrokenLog(),
    )

    ack = await use_case.execute(_notification())

    assert ack.status == "processed"


def test_ack_as_dict_omits_unset_fields() -> None:
    ack = NotificationAck(status_code=200, status="ignored", reason="channel_mismatch")

    assert ack.as_dict() == {"status": "ignored", "count": 0, "reason": "channel_mismatch"}
