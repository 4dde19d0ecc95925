"""
Per-attempt value objects produced while sending a notification.

None of these are cached or persisted: every notification attempt
renders, builds and delivers afresh.
"""

from __future__ import annotations

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class RenderedMessage(BaseModel):
    """Result of rendering an alert batch.

    Attributes:
        title: Rendered title template.
        text: Rendered message template.
        body: Final message: state symbol, title, text, deep link and
              image lines, laid out for the channel.
        state_symbol: Glyph chosen for the batch state.
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(default="", description="Rendered title.")
    text: str = Field(default="", description="Rendered message template.")
    body: str = Field(default="", description="Final message body.")
    state_symbol: str = Field(default="", description="State glyph.")


class WebhookRequest(BaseModel):
    """Transport-level request handed to a :class:`WebhookSender`.

    Attributes:
        url: Destination URL.
        body: Encoded request body.
        http_method: ``POST`` or ``PUT``.
        content_type: Value of the ``Content-Type`` header.
        headers: Extra headers (``Authorization`` included when needed).
        username: Basic-auth user (empty = no basic auth).
        password: Basic-auth password.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., min_length=1, description="Destination URL.")
    body: bytes = Field(default=b"", description="Encoded request body.")
    http_method: str = Field(default="POST", description="HTTP method.")
    content_type: str = Field(
        default="application/json; charset=utf-8",
        description="Content-Type header value.",
    )
    headers: dict[str, str] = Field(default_factory=dict, description="Extra headers.")
    username: str = Field(default="", description="Basic-auth user.")
    password: SecretStr = Field(default=SecretStr(""), description="Basic-auth password.")

    def __repr__(self) -> str:
        return f"WebhookRequest(url={self.url!r}, http_method={self.http_method!r})"


class DeliveryOutcome(NamedTuple):
    """Result of one notification attempt: ``(delivered, error)``."""

    delivered: bool
    error: Exception | None = None
