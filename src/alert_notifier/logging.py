"""
Structured logging setup for alert-notifier.

Configures structlog for JSON-formatted structured logging. Every log
line includes timestamp, level and event. Per-notifier context (channel
type, notifier name, uid) is bound at notification time; secrets are
never bound to a logger.
"""

from __future__ import annotations

import logging

import structlog


def _resolve_level(level: str) -> int:
    """Map a level name to its numeric value, defaulting to INFO."""
    return logging.getLevelNamesMapping().get(level.strip().upper(), logging.INFO)


def configure_logging(level: str = "INFO", *, json_logs: bool = True) -> None:
    """Configure structlog for the whole process.

    Args:
        level: Minimum level name (``"DEBUG"``, ``"INFO"``, …).  Unknown
               names fall back to ``INFO``.
        json_logs: Render JSON lines when ``True``, human-readable console
                   output otherwise.
    """
    renderer: structlog.types.Processor
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(level)),
        cache_logger_on_first_use=False,
    )


def configure_from_settings() -> None:
    """Configure logging from :func:`alert_notifier.config.get_settings`."""
    from alert_notifier.config import get_settings

    settings = get_settings()
    configure_logging(settings.log_level, json_logs=settings.log_json)
