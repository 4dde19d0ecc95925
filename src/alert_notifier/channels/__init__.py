"""
Notification channel implementations for alert-notifier.

Contains the abstract :class:`Notifier` base class, the shared pipeline
helpers (validation, rendering, payload, delivery) and the concrete
channels.
"""

from .base import ChannelDescriptor, ChannelOption, FactoryConfig, Notifier
from .webex import WEBEX_DESCRIPTOR, WebexConfig, WebexNotifier, webex_factory
from .webhook import WEBHOOK_DESCRIPTOR, WebhookConfig, WebhookNotifier, webhook_factory

__all__ = [
    "WEBEX_DESCRIPTOR",
    "WEBHOOK_DESCRIPTOR",
    "ChannelDescriptor",
    "ChannelOption",
    "FactoryConfig",
    "Notifier",
    "WebexConfig",
    "WebexNotifier",
    "WebhookConfig",
    "WebhookNotifier",
    "webex_factory",
    "webhook_factory",
]
