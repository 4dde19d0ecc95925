"""
Alert data models for alert-notifier.

An alert batch is the ordered sequence of :class:`Alert` instances that
the evaluation engine reports together in one notification.  Alerts are
immutable; notifiers only read them.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

# Label the evaluation engine sets on alerts raised because a query
# returned no data.
NO_DATA_ALERT_NAME = "DatasourceNoData"


def _utc_now() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


class AlertStatus(str, enum.Enum):
    """Status of a single alert instance."""

    FIRING = "firing"
    RESOLVED = "resolved"


class Alert(BaseModel):
    """A single alert instance as reported by the evaluation engine.

    Attributes:
        labels: Identifying labels (``alertname`` included).
        annotations: Descriptive annotations (summary, description, …).
        status: ``firing`` or ``resolved``.
        starts_at: When the alert started firing (UTC).
        ends_at: When the alert resolved (None while firing).
        generator_url: Link back to the rule that produced the alert.
        fingerprint: Stable identifier of the label set.
        image_token: Reference to a screenshot in the image store.
    """

    model_config = ConfigDict(frozen=True)

    labels: dict[str, str] = Field(default_factory=dict, description="Identifying labels.")
    annotations: dict[str, str] = Field(default_factory=dict, description="Annotations.")
    status: AlertStatus = Field(default=AlertStatus.FIRING, description="Alert status.")
    starts_at: datetime = Field(default_factory=_utc_now, description="Start timestamp (UTC).")
    ends_at: datetime | None = Field(default=None, description="End timestamp (UTC).")
    generator_url: str = Field(default="", description="Link to the generating rule.")
    fingerprint: str = Field(default="", description="Stable label-set identifier.")
    image_token: str | None = Field(default=None, description="Image store reference.")

    @property
    def name(self) -> str:
        """The ``alertname`` label, or an empty string."""
        return self.labels.get("alertname", "")

    @property
    def is_resolved(self) -> bool:
        return self.status is AlertStatus.RESOLVED

    @property
    def is_no_data(self) -> bool:
        """``True`` for alerts raised because the data source returned nothing."""
        return self.name == NO_DATA_ALERT_NAME


class Image(BaseModel):
    """A screenshot attached to an alert.

    Attributes:
        token: Image store key.
        url: Public URL of the uploaded image (empty if not uploaded).
        path: Local filesystem path of the image (empty if remote only).
    """

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., description="Image store key.")
    url: str = Field(default="", description="Public URL of the image.")
    path: str = Field(default="", description="Local path of the image.")


def batch_status(alerts: Sequence[Alert]) -> AlertStatus:
    """Return ``resolved`` if every alert in *alerts* is resolved.

    An empty batch counts as firing.
    """
    if alerts and all(a.is_resolved for a in alerts):
        return AlertStatus.RESOLVED
    return AlertStatus.FIRING
