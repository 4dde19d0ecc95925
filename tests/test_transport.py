"""
Tests for the httpx webhook transport.

Uses ``httpx.MockTransport`` so no network access is needed.
"""

from __future__ import annotations

import base64
import os
from unittest.mock import patch

import httpx
import pytest
from pydantic import SecretStr

from alert_notifier.models import WebhookRequest
from alert_notifier.transport import HttpxWebhookSender


def _sender(handler, **kwargs) -> HttpxWebhookSender:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpxWebhookSender(client=client, **kwargs)


class TestSendWebhook:
    async def test_posts_body_and_headers(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        sender = _sender(handler, user_agent="test-agent/1")
        await sender.send_webhook(
            WebhookRequest(
                url="https://example.test/hook",
                body=b'{"markdown":"Firing"}',
                headers={"Authorization": "Bearer tok"},
            )
        )

        (request,) = seen
        assert request.method == "POST"
        assert str(request.url) == "https://example.test/hook"
        assert request.content == b'{"markdown":"Firing"}'
        assert request.headers["Content-Type"] == "application/json; charset=utf-8"
        assert request.headers["Authorization"] == "Bearer tok"
        assert request.headers["User-Agent"] == "test-agent/1"
        await sender.close()

    async def test_basic_auth(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        sender = _sender(handler)
        await sender.send_webhook(
            WebhookRequest(
                url="https://example.test/hook",
                http_method="put",
                username="u",
                password=SecretStr("p"),
            )
        )

        assert seen[0].method == "PUT"
        assert seen[0].headers["Authorization"] == "Basic " + base64.b64encode(b"u:p").decode()

    async def test_non_2xx_raises(self) -> None:
        sender = _sender(lambda request: httpx.Response(500))
        with pytest.raises(httpx.HTTPStatusError):
            await sender.send_webhook(WebhookRequest(url="https://example.test/hook"))

    async def test_no_retry_by_default(self) -> None:
        calls: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(1)
            return httpx.Response(503)

        with pytest.raises(httpx.HTTPStatusError):
            await _sender(handler).send_webhook(WebhookRequest(url="https://example.test/hook"))
        assert len(calls) == 1

    async def test_retry_when_enabled(self) -> None:
        responses = iter([httpx.Response(503), httpx.Response(200)])
        sender = _sender(lambda request: next(responses), max_attempts=2)

        await sender.send_webhook(WebhookRequest(url="https://example.test/hook"))

    async def test_network_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(httpx.ConnectError):
            await _sender(handler).send_webhook(WebhookRequest(url="https://example.test/hook"))

    async def test_rejects_unsupported_method(self) -> None:
        sender = _sender(lambda request: httpx.Response(200))
        with pytest.raises(ValueError, match="unsupported HTTP method"):
            await sender.send_webhook(
                WebhookRequest(url="https://example.test/hook", http_method="GET")
            )


class TestConstruction:
    def test_invalid_max_attempts(self) -> None:
        with pytest.raises(ValueError):
            HttpxWebhookSender(max_attempts=0)

    def test_from_settings(self) -> None:
        env = {"AN_HTTP_TIMEOUT_S": "3.5", "AN_HTTP_MAX_ATTEMPTS": "2"}
        with patch.dict(os.environ, env):
            sender = HttpxWebhookSender.from_settings()
        assert sender.timeout == 3.5
        assert sender.max_attempts == 2

    async def test_close_without_client(self) -> None:
        await HttpxWebhookSender().close()
