"""
HTTP transport for notification delivery.

:class:`WebhookSender` is the collaborator a notifier delivers through;
its own success criteria (status-code interpretation) are final for the
notifier.  :class:`HttpxWebhookSender` treats any non-2xx response as a
failure.

Retry is off by default (``max_attempts=1``): retry and backoff policy
belongs to the caller of the notifier.  A host that wants transport-level
retry can raise ``max_attempts``; attempts then back off exponentially
via :mod:`tenacity`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from alert_notifier.models import WebhookRequest

logger = structlog.get_logger()

_DEFAULT_TIMEOUT_S = 10.0
_DEFAULT_USER_AGENT = "alert-notifier/0.1"
_ALLOWED_METHODS = frozenset({"POST", "PUT"})


class WebhookSender(ABC):
    """Interface of the delivery transport."""

    @abstractmethod
    async def send_webhook(self, request: WebhookRequest) -> None:
        """Deliver *request*.

        Implementations raise on failure and return ``None`` on success.
        """

    async def close(self) -> None:
        """Release any resources held by the transport (override if needed)."""


class HttpxWebhookSender(WebhookSender):
    """Deliver :class:`WebhookRequest` objects with :mod:`httpx`.

    Args:
        timeout: Per-request timeout in seconds (default 10).
        user_agent: ``User-Agent`` header for every request.
        max_attempts: Attempts per request (default 1, i.e. no retry).
        client: Pre-built ``httpx.AsyncClient`` (tests, shared pools).
    """

    def __init__(
        self,
        *,
        timeout: float = _DEFAULT_TIMEOUT_S,
        user_agent: str = _DEFAULT_USER_AGENT,
        max_attempts: int = 1,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.timeout = timeout
        self.user_agent = user_agent
        self.max_attempts = max_attempts
        self._client = client

    @classmethod
    def from_settings(cls) -> HttpxWebhookSender:
        """Build a sender from :func:`alert_notifier.config.get_settings`."""
        from alert_notifier.config import get_settings

        settings = get_settings()
        return cls(
            timeout=settings.http_timeout_s,
            user_agent=settings.http_user_agent,
            max_attempts=settings.http_max_attempts,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Return (and lazily create) the shared ``httpx.AsyncClient``."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def _request(self, request: WebhookRequest) -> httpx.Response:
        client = await self._get_client()
        auth = None
        if request.username:
            auth = httpx.BasicAuth(request.username, request.password.get_secret_value())
        resp = await client.request(
            request.http_method.upper(),
            request.url,
            content=request.body,
            headers={
                "User-Agent": self.user_agent,
                **request.headers,
                "Content-Type": request.content_type,
            },
            auth=auth,
        )
        resp.raise_for_status()
        return resp

    async def send_webhook(self, request: WebhookRequest) -> None:
        """Send *request*; raise on transport error or non-2xx status.

        Raises:
            ValueError: If the HTTP method is not ``POST`` or ``PUT``.
            httpx.HTTPStatusError: On a non-2xx response.
            httpx.TransportError: On network failure or timeout.
        """
        method = request.http_method.upper()
        if method not in _ALLOWED_METHODS:
            raise ValueError(f"unsupported HTTP method {request.http_method!r}")

        @retry(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type((httpx.HTTPStatusError, httpx.TransportError)),
            reraise=True,
        )
        async def _inner() -> httpx.Response:
            return await self._request(request)

        resp = await _inner()
        logger.debug("webhook_sent", url=request.url, status=resp.status_code)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
