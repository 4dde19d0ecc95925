"""
Environment-based configuration management for alert-notifier.

Uses pydantic-settings to load configuration values from environment
variables and .env files. Channel factories, the HTTP transport and the
secret resolver read their defaults from this module so that a host
application configures them in one place.

All environment variables are prefixed with ``AN_`` to avoid collisions.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from ``AN_``-prefixed environment variables.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json: Render log lines as JSON (``False`` = console renderer).
        external_url: Public base URL of the alerting UI, used for deep links.
        http_timeout_s: Per-request timeout of the HTTP transport.
        http_user_agent: User-Agent header sent with every delivery.
        http_max_attempts: Attempts made by the HTTP transport per delivery.
        secret_key: Key material for decrypting secure channel settings.
        resolved_symbol: Glyph prefixed to resolved notifications.
        firing_symbol: Glyph prefixed to firing notifications.
        no_data_symbol: Glyph prefixed to no-data notifications.
        three_state_symbols: Distinguish no-data from firing when choosing
            the state glyph.
    """

    model_config = SettingsConfigDict(
        env_prefix="AN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Logging ──
    log_level: str = Field(default="INFO", description="Logging level.")
    log_json: bool = Field(default=True, description="Render log lines as JSON.")

    # ── Links ──
    external_url: str = Field(
        default="http://localhost:3000/",
        description="Public base URL of the alerting UI.",
    )

    # ── HTTP transport ──
    http_timeout_s: float = Field(default=10.0, gt=0.0, description="Per-request timeout.")
    http_user_agent: str = Field(
        default="alert-notifier/0.1",
        description="User-Agent header for outbound deliveries.",
    )
    http_max_attempts: int = Field(
        default=1,
        ge=1,
        description="Attempts per delivery made by the HTTP transport.",
    )

    # ── Secrets ──
    secret_key: str = Field(
        default="alert-notifier-dev-secret-change-in-production",
        description="Key material for secure channel settings.",
    )

    # ── State symbols ──
    resolved_symbol: str = Field(default="\u2705 ", description="Resolved glyph.")
    firing_symbol: str = Field(default="\u26a0\ufe0f ", description="Firing glyph.")
    no_data_symbol: str = Field(default="\u2753\ufe0f ", description="No-data glyph.")
    three_state_symbols: bool = Field(
        default=False,
        description="Use the no-data glyph instead of collapsing it into firing.",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached application settings singleton.

    Returns:
        The global ``Settings`` instance.
    """
    return Settings()
