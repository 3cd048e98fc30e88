"""Testes dos settings carregados de variáveis de ambiente."""

from __future__ import annotations

import pytest

from config.settings.base.core import BaseSettings, _load_base_from_env
from config.settings.google_calendar import (
    GoogleCalendarSettings,
    _load_google_calendar_from_env,
)
from config.settings.infra.continuation import (
    ContinuationStoreSettings,
    _load_continuation_from_env,
)
from config.settings.infra.firestore import FirestoreSettings
from config.settings.infra.notification_log import NotificationLogSettings
from config.settings.infra.sync_lock import SyncLockSettings, _load_sync_lock_from_env
from config.settings.relay import RelaySettings, _load_relay_from_env


class TestBaseSettings:
    def test_environment_aliases(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "prod")
        monkeypatch.setenv("PORT", "9090")

        settings = _load_base_from_env()

        assert settings.environment == "production"
        assert settings.is_strict is True
        assert settings.port == 9090

    def test_test_environment_allows_memory_backends(self) -> None:
        settings = BaseSettings(environment="test")

        assert settings.is_development is True
        assert settings.is_strict is False

    def test_invalid_port(self) -> None:
        assert BaseSettings(port=70000).validate() == ["PORT inválida: 70000"]

    def test_immutable(self) -> None:
        settings = BaseSettings()

        with pytest.raises(AttributeError):
            settings.port = 1  # type: ignore[misc]


class TestGoogleCalendarSettings:
    def test_loads_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GOOGLE_CALENDAR_ID", "team@example.com")
        monkeypatch.setenv("GOOGLE_CALENDAR_PAGE_SIZE", "50")
        monkeypatch.setenv("GOOGLE_SERVICE_ACCOUNT_JSON", "   ")

        settings = _load_google_calendar_from_env()

        assert settings.calendar_id == "team@example.com"
        assert settings.page_size == 50
        assert settings.service_account_json is None

    def test_requires_credentials(self) -> None:
        errors = GoogleCalendarSettings().validate_settings()

        assert len(errors) == 2

    def test_service_account_is_enough(self) -> None:
        assert GoogleCalendarSettings(service_account_json="{}").validate_settings() == []


class TestRelaySettings:
    def test_defaults(self) -> None:
        settings = RelaySettings()

        assert settings.channel_validation_source == "store"
        assert settings.channel_mismatch_policy == "ignore"
        assert settings.forward_timeout_seconds == 10.0

    def test_loads_policies_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHANNEL_VALIDATION_SOURCE", "ENV")
        monkeypatch.setenv("VALID_CHANNEL_ID", "chan-42")
        monkeypatch.setenv("CHANNEL_MISMATCH_POLICY", "forbidden")
        monkeypatch.setenv("FORWARDING_ENABLED", "false")

        settings = _load_relay_from_env()

        assert settings.channel_validation_source == "env"
        assert settings.valid_channel_id == "chan-42"
        assert settings.channel_mismatch_policy == "forbidden"
        assert settings.forwarding_enabled is False
        assert settings.validate_settings() == []

    def test_unknown_policy_falls_back_to_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHANNEL_MISMATCH_POLICY", "explode")

        assert _load_relay_from_env().channel_mismatch_policy == "ignore"

    def test_env_source_requires_channel(self) -> None:
        settings = RelaySettings(channel_validation_source="env", forwarding_enabled=False)

        assert settings.validate_settings() == [
            "CHANNEL_VALIDATION_SOURCE=env requer VALID_CHANNEL_ID"
        ]

    def test_forwarding_requires_url(self) -> None:
        assert RelaySettings().validate_settings() == ["FORWARDING_ENABLED=true requer FORWARD_URL"]


class TestInfraSettings:
    def test_continuation_backend_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CONTINUATION_STORE_BACKEND", "SQL")
        monkeypatch.setenv("ENDPOINT_POSTGRES", "https://db.example/query")

        settings = _load_continuation_from_env()

        assert settings.backend == "sql"
        assert settings.validate(gcp_project="", is_dev=False) == []

    def test_memory_continuation_forbidden_outside_dev(self) -> None:
        errors = ContinuationStoreSettings().validate(gcp_project="", is_dev=False)

        assert errors == ["CONTINUATION_STORE_BACKEND=memory proibido em staging/production"]

    def test_sql_requires_endpoint(self) -> None:
        errors = ContinuationStoreSettings(backend="sql").validate(gcp_project="", is_dev=True)

        assert errors == ["CONTINUATION_STORE_BACKEND=sql requer ENDPOINT_POSTGRES"]

    def test_firestore_requires_project(self) -> None:
        assert FirestoreSettings().validate(gcp_project="") != []
        assert FirestoreSettings().validate(gcp_project="proj") == []

    def test_notification_log_firestore_requires_project(self) -> None:
        settings = NotificationLogSettings(backend="firestore")

        assert settings.validate(gcp_project="", is_dev=True) == [
            "NOTIFICATION_LOG_BACKEND=firestore requer GCP_PROJECT"
        ]

    def test_sync_lock_redis_requires_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SYNC_LOCK_BACKEND", "redis")

        settings = _load_sync_lock_from_env()

        assert settings.backend == "redis"
        assert settings.validate(redis_url="") == ["SYNC_LOCK_BACKEND=redis requer REDIS_URL"]

    def test_sync_lock_wait_must_be_below_ttl(self) -> None:
        settings = SyncLockSettings(ttl_seconds=10, wait_seconds=10)

        assert settings.validate(redis_url="") == [
            "SYNC_LOCK_WAIT_SECONDS deve ser menor que SYNC_LOCK_TTL_SECONDS"
        ]
