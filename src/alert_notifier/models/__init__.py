"""
Data models for alert-notifier.

Alerts and images (input), notifier configuration, and the per-attempt
value objects produced while rendering and delivering.
"""

from alert_notifier.models.alert import (
    NO_DATA_ALERT_NAME,
    Alert,
    AlertStatus,
    Image,
    batch_status,
)
from alert_notifier.models.message import DeliveryOutcome, RenderedMessage, WebhookRequest
from alert_notifier.models.notifier_config import LATEST_SCHEMA_VERSION, NotifierConfig

__all__ = [
    "LATEST_SCHEMA_VERSION",
    "NO_DATA_ALERT_NAME",
    "Alert",
    "AlertStatus",
    "DeliveryOutcome",
    "Image",
    "NotifierConfig",
    "RenderedMessage",
    "WebhookRequest",
    "batch_status",
]
