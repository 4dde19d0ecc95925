"""
Tests for the delivery executor.

Validates outcome classification, deadlines, cancellation, metrics and
logging of a single send.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest
from prometheus_client import REGISTRY
from structlog.testing import capture_logs

from alert_notifier.channels.delivery import DeliveryExecutor
from alert_notifier.errors import DeliveryError
from alert_notifier.models import WebhookRequest

REQUEST = WebhookRequest(url="https://example.test/hook", body=b"{}")


def _deliveries(result: str) -> float:
    value = REGISTRY.get_sample_value(
        "notifier_deliveries_total", {"channel": "test", "result": result}
    )
    return value or 0.0


@pytest.fixture()
def executor(mock_sender) -> DeliveryExecutor:
    return DeliveryExecutor(mock_sender, channel_type="test", name="ops")


class TestDeliver:
    async def test_success(self, executor, mock_sender) -> None:
        before = _deliveries("delivered")

        outcome = await executor.deliver(REQUEST)

        assert outcome == (True, None)
        mock_sender.send_webhook.assert_awaited_once_with(REQUEST)
        assert _deliveries("delivered") == before + 1

    async def test_transport_error_is_returned(self, executor, mock_sender) -> None:
        cause = httpx.ConnectError("connection refused")
        mock_sender.send_webhook.side_effect = cause
        before = _deliveries("failed")

        with capture_logs() as logs:
            delivered, error = await executor.deliver(REQUEST)

        assert delivered is False
        assert isinstance(error, DeliveryError)
        assert error.__cause__ is cause
        assert "connection refused" in str(error)
        assert _deliveries("failed") == before + 1
        assert [e["event"] for e in logs] == ["delivery_failed"]
        assert logs[0]["log_level"] == "error"
        assert logs[0]["notifier"] == "ops"

    async def test_exactly_one_attempt(self, executor, mock_sender) -> None:
        mock_sender.send_webhook.side_effect = RuntimeError("boom")
        await executor.deliver(REQUEST)
        assert mock_sender.send_webhook.await_count == 1

    async def test_deadline(self, executor, mock_sender) -> None:
        async def _hang(_request: WebhookRequest) -> None:
            await asyncio.sleep(5)

        mock_sender.send_webhook.side_effect = _hang

        delivered, error = await executor.deliver(REQUEST, timeout=0.01)

        assert delivered is False
        assert isinstance(error, DeliveryError)
        assert "timed out" in str(error)

    async def test_transport_timeout_without_deadline(self, executor, mock_sender) -> None:
        mock_sender.send_webhook.side_effect = httpx.ReadTimeout("read timeout")
        delivered, error = await executor.deliver(REQUEST)
        assert delivered is False
        assert "read timeout" in str(error)

    async def test_cancellation_propagates(self, executor, mock_sender) -> None:
        mock_sender.send_webhook.side_effect = asyncio.CancelledError()
        before = _deliveries("failed")

        with pytest.raises(asyncio.CancelledError):
            await executor.deliver(REQUEST, timeout=1.0)

        assert _deliveries("failed") == before

    async def test_cancelled_task(self, executor, mock_sender) -> None:
        started = asyncio.Event()

        async def _hang(_request: WebhookRequest) -> None:
            started.set()
            await asyncio.sleep(5)

        mock_sender.send_webhook.side_effect = _hang
        task = asyncio.create_task(executor.deliver(REQUEST))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
