"""
Channel registry for alert-notifier.

Maps channel type names to :class:`ChannelDescriptor` objects and builds
configured :class:`Notifier` instances from :class:`NotifierConfig`
records.  A registry is an explicit object populated at application
startup, typically with :func:`build_registry`; there is no module-level
registration state.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from alert_notifier.channels import WEBEX_DESCRIPTOR, WEBHOOK_DESCRIPTOR
from alert_notifier.channels.base import ChannelDescriptor, FactoryConfig, Notifier
from alert_notifier.channels.rendering import StateSymbols
from alert_notifier.errors import ChannelValidationError, UnknownChannelError
from alert_notifier.images import ImageStore
from alert_notifier.models import NotifierConfig
from alert_notifier.secrets import SecretResolver
from alert_notifier.templating import TemplateRenderer
from alert_notifier.transport import WebhookSender

logger = structlog.get_logger()


class ChannelRegistry:
    """Registry of channel types.

    Args:
        descriptors: Channels to register up front.
    """

    def __init__(self, descriptors: Iterable[ChannelDescriptor] = ()) -> None:
        self._descriptors: dict[str, ChannelDescriptor] = {}
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: ChannelDescriptor) -> None:
        """Register *descriptor* under its type.

        Raises:
            ValueError: If the type is already registered.
        """
        if descriptor.type in self._descriptors:
            raise ValueError(f"channel type {descriptor.type!r} is already registered")
        self._descriptors[descriptor.type] = descriptor
        logger.debug("channel_registered", channel=descriptor.type)

    def descriptor(self, channel_type: str) -> ChannelDescriptor:
        """Look up the descriptor registered for *channel_type*.

        Raises:
            UnknownChannelError: If *channel_type* is not registered.
        """
        try:
            return self._descriptors[channel_type]
        except KeyError:
            available = sorted(self._descriptors)
            raise UnknownChannelError(
                f"unknown channel type {channel_type!r}. Available: {available}"
            ) from None

    def types(self) -> list[str]:
        """Return the registered channel types, sorted."""
        return sorted(self._descriptors)

    def __contains__(self, channel_type: object) -> bool:
        return channel_type in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    def build(
        self,
        config: NotifierConfig,
        *,
        decrypt: SecretResolver,
        sender: WebhookSender,
        templates: TemplateRenderer,
        images: ImageStore | None = None,
        external_url: str | None = None,
        symbols: StateSymbols | None = None,
    ) -> Notifier:
        """Validate *config* and build its notifier.

        ``external_url`` and ``symbols`` default to the configured
        :class:`~alert_notifier.config.Settings`.

        Raises:
            UnknownChannelError: If ``config.type`` is not registered.
            ChannelValidationError: If the channel rejects the settings;
                ``uid`` and ``name`` identify the configuration.
        """
        descriptor = self.descriptor(config.type)
        if external_url is None or symbols is None:
            from alert_notifier.config import get_settings

            if external_url is None:
                external_url = get_settings().external_url
            if symbols is None:
                symbols = StateSymbols.from_settings()

        fc = FactoryConfig(
            config=config,
            decrypt=decrypt,
            sender=sender,
            templates=templates,
            images=images,
            external_url=external_url,
            symbols=symbols,
        )
        log = logger.bind(channel=config.type, notifier=config.name, uid=config.uid)
        try:
            notifier = descriptor.factory(fc)
        except ChannelValidationError as exc:
            log.warning("notifier_build_failed", reason=exc.reason)
            raise ChannelValidationError(exc.reason, uid=config.uid, name=config.name) from exc
        log.info("notifier_built")
        return notifier


def default_channels() -> tuple[ChannelDescriptor, ...]:
    """Descriptors of the channels shipped with this package."""
    return (WEBEX_DESCRIPTOR, WEBHOOK_DESCRIPTOR)


def build_registry(descriptors: Iterable[ChannelDescriptor] | None = None) -> ChannelRegistry:
    """Create a registry holding *descriptors* (default: :func:`default_channels`)."""
    return ChannelRegistry(default_channels() if descriptors is None else descriptors)
