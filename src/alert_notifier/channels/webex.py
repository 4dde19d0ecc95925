"""
Cisco Webex notification channel.

Two payload shapes share one pipeline:

* Incoming webhook: ``{"markdown": …}`` posted to ``webhook_url``.
* Messages API: ``{"roomId": …, "markdown": …}`` posted to ``url`` with
  ``Authorization: Bearer <api_secret>``.  Selected when ``room_id`` or
  ``api_secret`` is configured.

Settings schema versions:

* v1 (legacy single-rule layout): ``webhook_url`` and optional
  ``content``.  No ``markdown`` key is sent unless ``content`` is set.
* v2: ``webhook_url`` or (``url``, ``room_id``, ``api_secret``), plus an
  optional ``message`` template.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog
from pydantic import BaseModel, ConfigDict, Field, SecretStr

from alert_notifier.errors import ChannelValidationError, DeliveryError, RenderError
from alert_notifier.metrics import notifier_render_errors_total
from alert_notifier.models import (
    LATEST_SCHEMA_VERSION,
    Alert,
    DeliveryOutcome,
    NotifierConfig,
    RenderedMessage,
    WebhookRequest,
)
from alert_notifier.secrets import SecretResolver
from alert_notifier.templating import DEFAULT_MESSAGE_TEMPLATE
from alert_notifier.transport import WebhookSender

from .base import ChannelDescriptor, ChannelOption, FactoryConfig, Notifier
from .delivery import DeliveryExecutor
from .payload import (
    JSON_CONTENT_TYPE,
    bearer_headers,
    build_room_payload,
    build_webhook_payload,
    encode_json,
)
from .rendering import MessageRenderer
from .validation import has_setting, optional_string, require_string, resolve_secret

logger = structlog.get_logger()

WEBEX_TYPE = "webex"
DEFAULT_ROOM_API_URL = "https://webexapis.com/v1/messages"


class WebexConfig(BaseModel):
    """Validated Webex settings.

    Attributes:
        schema_version: Settings layout the config was read from.
        endpoint_url: Incoming-webhook URL or messages API URL.
        room_id: Target room for the messages API (None = incoming webhook).
        auth_token: Resolved API secret for the messages API.
        message_template: Message template (empty = no message, v1 only).
    """

    model_config = ConfigDict(frozen=True)

    schema_version: int = Field(default=LATEST_SCHEMA_VERSION, ge=1)
    endpoint_url: str = Field(..., min_length=1)
    room_id: str | None = None
    auth_token: SecretStr | None = None
    message_template: str = DEFAULT_MESSAGE_TEMPLATE

    @property
    def uses_room_api(self) -> bool:
        return self.room_id is not None


def new_webex_config(config: NotifierConfig, decrypt: SecretResolver) -> WebexConfig:
    """Validate *config* into a :class:`WebexConfig`.

    Raises:
        ChannelValidationError: On a missing required field, an
            undecryptable secret, or an unknown schema version.
    """
    settings = config.settings
    version = config.schema_version

    if version == 1:
        return WebexConfig(
            schema_version=1,
            endpoint_url=require_string(settings, "webhook_url"),
            message_template=optional_string(settings, "content"),
        )
    if version > LATEST_SCHEMA_VERSION:
        raise ChannelValidationError(f"unsupported webex settings schema version {version}")

    room_id: str | None = None
    auth_token: SecretStr | None = None
    if has_setting(config, "room_id") or has_setting(config, "api_secret"):
        endpoint_url = optional_string(settings, "url", DEFAULT_ROOM_API_URL)
        room_id = require_string(settings, "room_id")
        auth_token = resolve_secret(config, decrypt, "api_secret")
    else:
        endpoint_url = require_string(settings, "webhook_url")

    return WebexConfig(
        schema_version=version,
        endpoint_url=endpoint_url,
        room_id=room_id,
        auth_token=auth_token,
        message_template=optional_string(settings, "message", DEFAULT_MESSAGE_TEMPLATE),
    )


def build_webex_request(message: RenderedMessage, webex: WebexConfig) -> WebhookRequest:
    """Build the transport request for *message*.

    Raises:
        DeliveryError: If the payload cannot be encoded.
    """
    if webex.uses_room_api:
        payload = build_room_payload(webex.room_id or "", message.body)
        headers = bearer_headers(webex.auth_token)
    else:
        payload = build_webhook_payload(message.body)
        headers = {}
    return WebhookRequest(
        url=webex.endpoint_url,
        body=encode_json(payload),
        http_method="POST",
        content_type=JSON_CONTENT_TYPE,
        headers=headers,
    )


class WebexNotifier(Notifier):
    """Send alert notifications to a Webex space.

    Args:
        config: Raw notifier configuration.
        webex: Validated Webex settings.
        renderer: Message renderer.
        sender: Delivery transport.
    """

    def __init__(
        self,
        config: NotifierConfig,
        webex: WebexConfig,
        *,
        renderer: MessageRenderer,
        sender: WebhookSender,
    ) -> None:
        super().__init__(config)
        self.webex = webex
        self.renderer = renderer
        self._executor = DeliveryExecutor(sender, channel_type=config.type, name=config.name)

    async def _render(self, alerts: Sequence[Alert]) -> tuple[RenderedMessage, RenderError | None]:
        legacy = self.webex.schema_version == 1
        if legacy and not self.webex.message_template:
            return RenderedMessage(), None
        return await self.renderer.render(
            alerts,
            self.webex.message_template,
            receiver=self.name,
            legacy=legacy,
        )

    async def notify(
        self,
        alerts: Sequence[Alert],
        *,
        timeout: float | None = None,
    ) -> DeliveryOutcome:
        """Render *alerts*, build the Webex payload and deliver it."""
        log = logger.bind(channel=self.type, notifier=self.name, uid=self.uid)
        log.info("notifier_executing", alerts=len(alerts), room_api=self.webex.uses_room_api)

        message, tmpl_err = await self._render(alerts)
        if tmpl_err is not None:
            notifier_render_errors_total.labels(channel=self.type).inc()
            log.warning("template_failed", error=str(tmpl_err))

        try:
            request = build_webex_request(message, self.webex)
        except DeliveryError as exc:
            log.error("payload_build_failed", error=str(exc))
            return DeliveryOutcome(False, exc)

        return await self._executor.deliver(request, timeout=timeout)


def webex_factory(fc: FactoryConfig) -> WebexNotifier:
    """Build a :class:`WebexNotifier` from *fc*.

    Raises:
        ChannelValidationError: If the settings are invalid.
    """
    webex = new_webex_config(fc.config, fc.decrypt)
    renderer = MessageRenderer(
        fc.templates,
        external_url=fc.external_url,
        symbols=fc.symbols,
        images=fc.images,
    )
    return WebexNotifier(fc.config, webex, renderer=renderer, sender=fc.sender)


WEBEX_DESCRIPTOR = ChannelDescriptor(
    type=WEBEX_TYPE,
    name="Cisco Webex",
    description="Sends notifications to Cisco Webex via incoming webhook or the messages API",
    factory=webex_factory,
    config_schema=(
        ChannelOption(
            property_name="webhook_url",
            label="Incoming Webhook URL",
            placeholder="https://webexapis.com/v1/webhooks/incoming/<room-id>",
            description="Required unless a room ID is set.",
        ),
        ChannelOption(
            property_name="url",
            label="API URL",
            placeholder=DEFAULT_ROOM_API_URL,
        ),
        ChannelOption(
            property_name="room_id",
            label="Room ID",
            description="Post through the messages API to this room.",
        ),
        ChannelOption(
            property_name="api_secret",
            label="Bot Token",
            description="Required with a room ID.",
            secure=True,
        ),
        ChannelOption(
            property_name="message",
            label="Message",
            description="Message template.",
            placeholder=DEFAULT_MESSAGE_TEMPLATE,
        ),
    ),
)
