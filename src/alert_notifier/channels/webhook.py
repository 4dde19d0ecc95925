"""
Generic JSON webhook notification channel.

Posts the alert batch, its rendered title and message, and the batch
state as a JSON document to an arbitrary URL.  Supports HTTP Basic
authentication or a bearer ``Authorization`` header (not both).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, SecretStr

from alert_notifier.errors import ChannelValidationError, DeliveryError
from alert_notifier.metrics import notifier_render_errors_total
from alert_notifier.models import (
    Alert,
    DeliveryOutcome,
    NotifierConfig,
    RenderedMessage,
    WebhookRequest,
    batch_status,
)
from alert_notifier.secrets import SecretResolver
from alert_notifier.templating import DEFAULT_MESSAGE_TEMPLATE, DEFAULT_TITLE_TEMPLATE
from alert_notifier.transport import WebhookSender

from .base import ChannelDescriptor, ChannelOption, FactoryConfig, Notifier
from .delivery import DeliveryExecutor
from .payload import JSON_CONTENT_TYPE, bearer_headers, encode_json
from .rendering import MessageRenderer, aggregate_state, alert_list_url
from .validation import optional_string, require_string, resolve_secret

logger = structlog.get_logger()

WEBHOOK_TYPE = "webhook"
_ALLOWED_METHODS = ("POST", "PUT")


class WebhookConfig(BaseModel):
    """Validated webhook settings."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., min_length=1)
    http_method: str = "POST"
    username: str = ""
    password: SecretStr | None = None
    authorization_credentials: SecretStr | None = None
    title_template: str = DEFAULT_TITLE_TEMPLATE
    message_template: str = DEFAULT_MESSAGE_TEMPLATE


def new_webhook_config(config: NotifierConfig, decrypt: SecretResolver) -> WebhookConfig:
    """Validate *config* into a :class:`WebhookConfig`.

    Raises:
        ChannelValidationError: On a missing URL, an unsupported method,
            an undecryptable secret, or conflicting authentication.
    """
    settings = config.settings
    url = require_string(settings, "url")

    http_method = optional_string(settings, "http_method", "POST").upper()
    if http_method not in _ALLOWED_METHODS:
        raise ChannelValidationError(f"http_method must be one of {', '.join(_ALLOWED_METHODS)}")

    username = optional_string(settings, "username")
    password = resolve_secret(config, decrypt, "password", required=False)
    credentials = resolve_secret(config, decrypt, "authorization_credentials", required=False)
    if username and credentials is not None:
        raise ChannelValidationError(
            "both HTTP Basic Authentication and Authorization Header are set, only 1 is permitted"
        )

    return WebhookConfig(
        url=url,
        http_method=http_method,
        username=username,
        password=password,
        authorization_credentials=credentials,
        title_template=optional_string(settings, "title", DEFAULT_TITLE_TEMPLATE),
        message_template=optional_string(settings, "message", DEFAULT_MESSAGE_TEMPLATE),
    )


class WebhookNotifier(Notifier):
    """Send alert batches as JSON documents to a webhook URL.

    Args:
        config: Raw notifier configuration.
        webhook: Validated webhook settings.
        renderer: Message renderer.
        sender: Delivery transport.
    """

    def __init__(
        self,
        config: NotifierConfig,
        webhook: WebhookConfig,
        *,
        renderer: MessageRenderer,
        sender: WebhookSender,
    ) -> None:
        super().__init__(config)
        self.webhook = webhook
        self.renderer = renderer
        self._executor = DeliveryExecutor(sender, channel_type=config.type, name=config.name)

    def build_payload(self, alerts: Sequence[Alert], message: RenderedMessage) -> dict[str, Any]:
        return {
            "receiver": self.name,
            "status": batch_status(alerts).value,
            "state": aggregate_state(alerts).value,
            "state_symbol": message.state_symbol,
            "title": message.title,
            "message": message.text,
            "external_url": alert_list_url(self.renderer.external_url),
            "alerts": [a.model_dump(mode="json") for a in alerts],
        }

    def build_request(self, alerts: Sequence[Alert], message: RenderedMessage) -> WebhookRequest:
        """Build the transport request.

        Raises:
            DeliveryError: If the payload cannot be encoded.
        """
        password = self.webhook.password or SecretStr("")
        return WebhookRequest(
            url=self.webhook.url,
            body=encode_json(self.build_payload(alerts, message)),
            http_method=self.webhook.http_method,
            content_type=JSON_CONTENT_TYPE,
            headers=bearer_headers(self.webhook.authorization_credentials),
            username=self.webhook.username,
            password=password,
        )

    async def notify(
        self,
        alerts: Sequence[Alert],
        *,
        timeout: float | None = None,
    ) -> DeliveryOutcome:
        """Render *alerts* and post them as JSON."""
        log = logger.bind(channel=self.type, notifier=self.name, uid=self.uid)
        log.info("notifier_executing", alerts=len(alerts))

        message, tmpl_err = await self.renderer.render(
            alerts,
            self.webhook.message_template,
            receiver=self.name,
            title_template=self.webhook.title_template,
        )
        if tmpl_err is not None:
            notifier_render_errors_total.labels(channel=self.type).inc()
            log.warning("template_failed", error=str(tmpl_err))

        try:
            request = self.build_request(alerts, message)
        except DeliveryError as exc:
            log.error("payload_build_failed", error=str(exc))
            return DeliveryOutcome(False, exc)

        return await self._executor.deliver(request, timeout=timeout)


def webhook_factory(fc: FactoryConfig) -> WebhookNotifier:
    """Build a :class:`WebhookNotifier` from *fc*.

    Raises:
        ChannelValidationError: If the settings are invalid.
    """
    webhook = new_webhook_config(fc.config, fc.decrypt)
    renderer = MessageRenderer(
        fc.templates,
        external_url=fc.external_url,
        symbols=fc.symbols,
        images=fc.images,
    )
    return WebhookNotifier(fc.config, webhook, renderer=renderer, sender=fc.sender)


WEBHOOK_DESCRIPTOR = ChannelDescriptor(
    type=WEBHOOK_TYPE,
    name="Webhook",
    description="Sends HTTP POST request to a URL",
    factory=webhook_factory,
    config_schema=(
        ChannelOption(property_name="url", label="URL", required=True),
        ChannelOption(
            property_name="http_method",
            label="HTTP Method",
            placeholder="POST",
        ),
        ChannelOption(property_name="username", label="HTTP Basic Authentication - Username"),
        ChannelOption(
            property_name="password",
            label="HTTP Basic Authentication - Password",
            secure=True,
        ),
        ChannelOption(
            property_name="authorization_credentials",
            label="Authorization Header - Credentials",
            secure=True,
        ),
        ChannelOption(property_name="title", label="Title", placeholder=DEFAULT_TITLE_TEMPLATE),
        ChannelOption(
            property_name="message",
            label="Message",
            placeholder=DEFAULT_MESSAGE_TEMPLATE,
        ),
    ),
)
