"""
Error taxonomy for alert-notifier.

Only :class:`ChannelValidationError` (at build time) and
:class:`DeliveryError` (at send time) reach callers.  Render and
enrichment errors are absorbed by the notifier and logged.
"""

from __future__ import annotations


class NotifierError(Exception):
    """Base class for every error raised by this package."""


class ChannelValidationError(NotifierError):
    """A channel configuration is incomplete or its secrets cannot be resolved.

    Args:
        reason: Human-readable reason, e.g.
                ``"could not find webhook_url property in settings"``.
        uid: Identifier of the offending notifier configuration.
        name: Name of the offending notifier configuration.
    """

    def __init__(self, reason: str, *, uid: str | None = None, name: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.uid = uid
        self.name = name

    def __str__(self) -> str:
        if self.name:
            return f"failed to validate notifier {self.name!r}: {self.reason}"
        return self.reason


class SecretResolutionError(NotifierError):
    """A secure setting exists but could not be decrypted."""


class RenderError(NotifierError):
    """A message template failed to parse or execute."""


class EnrichmentError(NotifierError):
    """An auxiliary resource (e.g. an alert image) is unavailable."""


class DeliveryError(NotifierError):
    """The transport failed to deliver a notification."""


class UnknownChannelError(NotifierError, KeyError):
    """No channel is registered under the requested type."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
