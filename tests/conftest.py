"""Shared fixtures for alert-notifier tests."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

# Set env vars before any settings are read.
os.environ.setdefault("AN_EXTERNAL_URL", "https://grafana.example.test/")
os.environ.setdefault("AN_LOG_JSON", "false")

from alert_notifier.config import get_settings  # noqa: E402
from alert_notifier.models import Alert, AlertStatus, NotifierConfig  # noqa: E402
from alert_notifier.secrets import PlainSecretResolver  # noqa: E402
from alert_notifier.templating import JinjaTemplateRenderer  # noqa: E402
from alert_notifier.transport import WebhookSender  # noqa: E402

_T0 = datetime(2026, 2, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Reset the ``get_settings`` lru_cache around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def firing_alert() -> Alert:
    return Alert(
        labels={"alertname": "HighCPU", "instance": "web-1"},
        annotations={"summary": "CPU above 90%"},
        status=AlertStatus.FIRING,
        starts_at=_T0,
        generator_url="https://grafana.example.test/alerting/grafana/abc/view",
        fingerprint="f1",
    )


@pytest.fixture()
def resolved_alert() -> Alert:
    return Alert(
        labels={"alertname": "HighCPU", "instance": "web-2"},
        annotations={"summary": "CPU back to normal"},
        status=AlertStatus.RESOLVED,
        starts_at=_T0,
        ends_at=_T0,
        fingerprint="f2",
    )


@pytest.fixture()
def no_data_alert() -> Alert:
    return Alert(
        labels={"alertname": "DatasourceNoData", "rulename": "HighCPU"},
        status=AlertStatus.FIRING,
        starts_at=_T0,
    )


@pytest.fixture()
def plain_resolver() -> PlainSecretResolver:
    return PlainSecretResolver()


@pytest.fixture()
def templates() -> JinjaTemplateRenderer:
    return JinjaTemplateRenderer()


@pytest.fixture()
def mock_sender() -> AsyncMock:
    """Async mock standing in for a :class:`WebhookSender` that always succeeds."""
    sender = AsyncMock(spec=WebhookSender)
    sender.send_webhook = AsyncMock(return_value=None)
    return sender


@pytest.fixture()
def webex_config() -> NotifierConfig:
    return NotifierConfig(
        uid="webex-1",
        name="ops",
        type="webex",
        settings={"webhook_url": "https://example.test/hook"},
    )


@pytest.fixture()
def room_config() -> NotifierConfig:
    return NotifierConfig(
        uid="webex-2",
        name="ops-room",
        type="webex",
        settings={"url": "https://example.test", "room_id": "R1", "api_secret": "tok"},
    )
