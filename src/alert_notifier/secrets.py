"""
Secret resolution for secure channel settings.

Secure settings (API tokens, passwords) are stored Fernet-encrypted.
A :class:`SecretResolver` turns ``(secure_settings, key, fallback)`` into
plaintext; the fallback carries the plain ``settings`` value so that
channels configured before encryption was enabled keep working.

Key Derivation:
    SHA-256 of the configured secret string, base64-encoded, gives the
    32-byte key Fernet expects.
"""

from __future__ import annotations

import base64
import hashlib
from collections.abc import Mapping
from typing import Protocol

import structlog
from cryptography.fernet import Fernet, InvalidToken

from alert_notifier.errors import SecretResolutionError

logger = structlog.get_logger()


class SecretResolver(Protocol):
    """Callable that returns the plaintext of a secure setting."""

    def __call__(self, secure_settings: Mapping[str, str], key: str, fallback: str) -> str: ...


def _derive_fernet_key(secret: str) -> bytes:
    return base64.urlsafe_b64encode(hashlib.sha256(secret.encode("utf-8")).digest())


class FernetSecretResolver:
    """Decrypt secure settings with a key derived from *secret_key*.

    Args:
        secret_key: Shared secret; the Fernet key is derived from it.
    """

    def __init__(self, secret_key: str) -> None:
        self._fernet = Fernet(_derive_fernet_key(secret_key))

    def __call__(self, secure_settings: Mapping[str, str], key: str, fallback: str) -> str:
        """Return the decrypted value of *key*, or *fallback* if absent.

        Raises:
            SecretResolutionError: If the stored value is not a valid
                token for this key.
        """
        token = secure_settings.get(key)
        if not token:
            return fallback
        try:
            return self._fernet.decrypt(token.encode("utf-8")).decode("utf-8")
        except (InvalidToken, UnicodeDecodeError) as exc:
            logger.warning("secret_decrypt_failed", key=key)
            raise SecretResolutionError(f"failed to decrypt secure setting {key!r}") from exc

    def encrypt(self, plaintext: str) -> str:
        """Encrypt *plaintext* into a token suitable for ``secure_settings``."""
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("utf-8")

    def encrypt_settings(self, values: Mapping[str, str]) -> dict[str, str]:
        """Encrypt every value of *values*, keeping the keys."""
        return {k: self.encrypt(v) for k, v in values.items()}


class PlainSecretResolver:
    """Resolver for secure settings that are stored unencrypted (tests, dev)."""

    def __call__(self, secure_settings: Mapping[str, str], key: str, fallback: str) -> str:
        return secure_settings.get(key) or fallback


def resolver_from_settings() -> FernetSecretResolver:
    """Build a :class:`FernetSecretResolver` from the configured ``secret_key``."""
    from alert_notifier.config import get_settings

    return FernetSecretResolver(get_settings().secret_key)
