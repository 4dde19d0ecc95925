"""
Abstract base class for notification channels.

Defines the :class:`Notifier` interface every channel implements, plus
the types a channel uses to describe itself to the registry:
:class:`FactoryConfig` (what a factory receives), :class:`ChannelOption`
and :class:`ChannelDescriptor`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from alert_notifier.images import ImageStore
from alert_notifier.models import Alert, DeliveryOutcome, NotifierConfig
from alert_notifier.secrets import SecretResolver
from alert_notifier.templating import TemplateRenderer
from alert_notifier.transport import WebhookSender

from .rendering import StateSymbols


class Notifier(ABC):
    """Base class every notification channel must implement.

    Subclasses override :meth:`notify` to deliver an alert batch to
    their destination.  :meth:`send_resolved` is defined here once so
    that resolve suppression behaves identically for every channel.

    Args:
        config: The notifier configuration this instance was built from.
    """

    def __init__(self, config: NotifierConfig) -> None:
        self._config = config

    @property
    def uid(self) -> str:
        return self._config.uid

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def type(self) -> str:
        return self._config.type

    def send_resolved(self) -> bool:
        """Whether the caller should notify this channel of resolved batches."""
        return not self._config.disable_resolve_message

    @abstractmethod
    async def notify(
        self,
        alerts: Sequence[Alert],
        *,
        timeout: float | None = None,
    ) -> DeliveryOutcome:
        """Deliver *alerts* to the channel's destination.

        Args:
            alerts: The alert batch.
            timeout: Optional deadline in seconds for the delivery.

        Returns:
            ``(delivered, error)``.  Delivery failures are returned, not
            raised; cancelling the calling task raises
            ``asyncio.CancelledError``.
        """

    async def close(self) -> None:
        """Release any resources held by the notifier (override if needed)."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(uid={self.uid!r}, name={self.name!r})"


@dataclass(frozen=True, slots=True)
class FactoryConfig:
    """Everything a channel factory needs to build a :class:`Notifier`.

    Attributes:
        config: Raw notifier configuration.
        decrypt: Secret resolver for secure settings.
        sender: Delivery transport.
        templates: Template engine.
        images: Optional image store.
        external_url: Public base URL of the alerting UI.
        symbols: State glyph mapping.
    """

    config: NotifierConfig
    decrypt: SecretResolver
    sender: WebhookSender
    templates: TemplateRenderer
    images: ImageStore | None = None
    external_url: str = "http://localhost:3000/"
    symbols: StateSymbols = field(default_factory=StateSymbols)


class ChannelOption(BaseModel):
    """Description of one settings field of a channel.

    Used only to describe a channel (e.g. to generate a settings form);
    validation is done by the channel's own validator.
    """

    model_config = ConfigDict(frozen=True)

    property_name: str = Field(..., description="Settings key.")
    label: str = Field(..., description="Display label.")
    description: str = Field(default="", description="Help text.")
    placeholder: str = Field(default="", description="Example value.")
    required: bool = Field(default=False, description="Whether the key is required.")
    secure: bool = Field(default=False, description="Stored in secure settings.")


NotifierFactory = Callable[[FactoryConfig], Notifier]


@dataclass(frozen=True, slots=True)
class ChannelDescriptor:
    """Static description of a channel type.

    Attributes:
        type: Channel type key (``NotifierConfig.type``).
        name: Display name.
        description: One-line description.
        factory: Builds a notifier; raises ``ChannelValidationError``.
        config_schema: Settings fields of the latest schema version.
    """

    type: str
    name: str
    description: str
    factory: NotifierFactory
    config_schema: tuple[ChannelOption, ...] = ()
