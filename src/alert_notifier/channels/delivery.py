"""
Delivery executor: one synchronous send through the transport.

Exactly one call to the :class:`WebhookSender` per attempt, no retry.
Transport failures are converted into a failed
:class:`DeliveryOutcome`; task cancellation is not caught and propagates
to the caller as ``asyncio.CancelledError``.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from alert_notifier.errors import DeliveryError
from alert_notifier.metrics import notifier_deliveries_total
from alert_notifier.models import DeliveryOutcome, WebhookRequest
from alert_notifier.transport import WebhookSender

logger = structlog.get_logger()


class DeliveryExecutor:
    """Send requests for one notifier and classify the outcome.

    Args:
        sender: Transport collaborator.
        channel_type: Channel type, for logs and metrics.
        name: Notifier name, for logs.
    """

    def __init__(self, sender: WebhookSender, *, channel_type: str, name: str) -> None:
        self.sender = sender
        self.channel_type = channel_type
        self.name = name

    async def deliver(
        self,
        request: WebhookRequest,
        *,
        timeout: float | None = None,
    ) -> DeliveryOutcome:
        """Send *request* once.

        Args:
            request: The request to send.
            timeout: Deadline in seconds for the whole send (None = the
                     transport's own timeout only).

        Returns:
            ``(True, None)`` on success, ``(False, DeliveryError)`` on failure.
        """
        log = logger.bind(channel=self.channel_type, notifier=self.name)
        try:
            async with asyncio.timeout(timeout):
                await self.sender.send_webhook(request)
        except Exception as exc:  # noqa: BLE001
            if isinstance(exc, TimeoutError) and timeout is not None:
                reason = f"delivery timed out after {timeout}s"
            else:
                reason = f"failed to send {self.channel_type} notification: {exc}"
            error = DeliveryError(reason)
            error.__cause__ = exc
            return self._failed(log, error)

        notifier_deliveries_total.labels(channel=self.channel_type, result="delivered").inc()
        log.debug("delivered")
        return DeliveryOutcome(True)

    def _failed(self, log: Any, error: DeliveryError) -> DeliveryOutcome:
        notifier_deliveries_total.labels(channel=self.channel_type, result="failed").inc()
        log.error("delivery_failed", error=str(error))
        return DeliveryOutcome(False, error)
