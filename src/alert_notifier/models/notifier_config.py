"""
Notifier configuration model for alert-notifier.

A :class:`NotifierConfig` is the raw, channel-type-tagged record a
notifier is built from.  It is produced once from persisted settings,
frozen, and owned by the notifier built from it.  Channel validators
project it into a typed per-channel configuration; nothing downstream
reads ``settings`` directly.
"""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

# Latest settings schema a channel understands.  Version 1 is the legacy
# single-rule layout; version 2 is the batch-oriented layout.
LATEST_SCHEMA_VERSION = 2


def _new_uid() -> str:
    return uuid4().hex[:14]


class NotifierConfig(BaseModel):
    """Raw configuration of one notifier.

    Attributes:
        uid: Unique identifier.
        name: Human-readable name, used in logs.
        type: Channel type (``"webex"``, ``"webhook"``, …).
        schema_version: Version of the ``settings`` layout.
        disable_resolve_message: Suppress notifications for resolved
            alerts.  Also accepted as ``suppress_resolve_message``.
        settings: Channel-specific plain settings (JSON values).
        secure_settings: Channel-specific secrets, encrypted at rest.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    uid: str = Field(default_factory=_new_uid, min_length=1, description="Unique identifier.")
    name: str = Field(..., description="Human-readable name.")
    type: str = Field(..., min_length=1, description="Channel type.")
    schema_version: int = Field(
        default=LATEST_SCHEMA_VERSION,
        ge=1,
        description="Settings layout version.",
    )
    disable_resolve_message: bool = Field(
        default=False,
        validation_alias=AliasChoices("disable_resolve_message", "suppress_resolve_message"),
        description="Suppress notifications for resolved alerts.",
    )
    settings: dict[str, Any] = Field(default_factory=dict, description="Plain settings.")
    secure_settings: dict[str, str] = Field(
        default_factory=dict,
        description="Encrypted settings.",
    )
