"""
alert-notifier: pluggable alert notification channels.

Turns fired or resolved alert batches into channel-specific messages and
delivers them through a pluggable transport.  A :class:`ChannelRegistry`
validates notifier configurations and builds :class:`Notifier`
instances; each exposes ``notify`` and ``send_resolved``.
"""

from alert_notifier.channels.base import Notifier
from alert_notifier.config import Settings, get_settings
from alert_notifier.errors import (
    ChannelValidationError,
    DeliveryError,
    NotifierError,
    RenderError,
    UnknownChannelError,
)
from alert_notifier.models import Alert, AlertStatus, DeliveryOutcome, NotifierConfig
from alert_notifier.registry import ChannelRegistry, build_registry, default_channels

__version__ = "0.1.0"

__all__ = [
    "Alert",
    "AlertStatus",
    "ChannelRegistry",
    "ChannelValidationError",
    "DeliveryError",
    "DeliveryOutcome",
    "Notifier",
    "NotifierConfig",
    "NotifierError",
    "RenderError",
    "Settings",
    "UnknownChannelError",
    "build_registry",
    "default_channels",
    "get_settings",
]
