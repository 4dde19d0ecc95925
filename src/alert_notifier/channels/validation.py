"""
Settings validation helpers shared by channel validators.

Every channel validator projects a :class:`NotifierConfig` into a typed
configuration with these helpers.  Required keys are fetched in the
order the channel consumes them, so a malformed input always fails on
the same key with the same message.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import SecretStr

from alert_notifier.errors import ChannelValidationError, SecretResolutionError
from alert_notifier.models import NotifierConfig
from alert_notifier.secrets import SecretResolver


def coerce_string(value: Any) -> str:
    """Coerce a JSON scalar to a stripped string.

    ``None``, booleans, objects and arrays coerce to ``""``.
    """
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def missing_field(key: str) -> ChannelValidationError:
    return ChannelValidationError(f"could not find {key} property in settings")


def require_string(settings: Mapping[str, Any], key: str) -> str:
    """Return ``settings[key]`` as a non-empty string.

    Raises:
        ChannelValidationError: If the key is missing or empty.
    """
    value = coerce_string(settings.get(key))
    if not value:
        raise missing_field(key)
    return value


def optional_string(settings: Mapping[str, Any], key: str, default: str = "") -> str:
    """Return ``settings[key]`` as a string, or *default* when empty."""
    return coerce_string(settings.get(key)) or default


def resolve_secret(
    config: NotifierConfig,
    decrypt: SecretResolver,
    key: str,
    *,
    required: bool = True,
) -> SecretStr | None:
    """Resolve the secure setting *key*, falling back to its plain value.

    Args:
        config: The notifier configuration.
        decrypt: Secret resolver.
        key: Setting name (same name in ``settings`` and ``secure_settings``).
        required: Raise when the resolved value is empty.

    Returns:
        The secret wrapped in :class:`SecretStr`, or ``None`` when empty
        and not required.

    Raises:
        ChannelValidationError: If resolution fails, or the value is empty
            and *required*.
    """
    fallback = coerce_string(config.settings.get(key))
    try:
        value = decrypt(config.secure_settings, key, fallback)
    except SecretResolutionError as exc:
        raise ChannelValidationError(f"could not decrypt {key} secure setting") from exc
    value = value or ""
    if not value.strip():
        if required:
            raise missing_field(key)
        return None
    return SecretStr(value)


def has_setting(config: NotifierConfig, key: str) -> bool:
    """``True`` when *key* is set in either plain or secure settings."""
    return bool(coerce_string(config.settings.get(key)) or config.secure_settings.get(key))
