"""
Message rendering for alert notifications.

Turns an alert batch into a :class:`RenderedMessage`: picks the state
glyph, renders the title and message templates, appends the deep link to
the alert list and any stored image URLs.

Template failures are soft: the failing part renders as an empty string,
rendering carries on, and the first error is returned next to the
message for the caller to log.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass

from alert_notifier.errors import RenderError
from alert_notifier.images import ImageStore, for_each_stored_image
from alert_notifier.models import Alert, AlertStatus, Image, RenderedMessage, batch_status
from alert_notifier.templating import DEFAULT_TITLE_TEMPLATE, TemplateData, TemplateRenderer

ALERT_LIST_PATH = "/alerting/list"


class NotificationState(str, enum.Enum):
    """State of a whole batch, as shown by the state glyph."""

    FIRING = "firing"
    RESOLVED = "resolved"
    NO_DATA = "no_data"


def aggregate_state(alerts: Sequence[Alert]) -> NotificationState:
    """Return the batch state.

    ``resolved`` if every alert is resolved; ``no_data`` if every
    unresolved alert was raised for missing data; ``firing`` otherwise.
    """
    if batch_status(alerts) is AlertStatus.RESOLVED:
        return NotificationState.RESOLVED
    unresolved = [a for a in alerts if not a.is_resolved]
    if unresolved and all(a.is_no_data for a in unresolved):
        return NotificationState.NO_DATA
    return NotificationState.FIRING


@dataclass(frozen=True, slots=True)
class StateSymbols:
    """Glyph mapping for batch states.

    With ``no_data`` unset, no-data batches collapse into ``firing``
    (two-state mode).
    """

    resolved: str = "\u2705 "
    firing: str = "\u26a0\ufe0f "
    no_data: str | None = None

    @classmethod
    def from_settings(cls) -> StateSymbols:
        """Build the mapping from :func:`alert_notifier.config.get_settings`."""
        from alert_notifier.config import get_settings

        s = get_settings()
        return cls(
            resolved=s.resolved_symbol,
            firing=s.firing_symbol,
            no_data=s.no_data_symbol if s.three_state_symbols else None,
        )

    def for_state(self, state: NotificationState) -> str:
        if state is NotificationState.RESOLVED:
            return self.resolved
        if state is NotificationState.NO_DATA and self.no_data is not None:
            return self.no_data
        return self.firing


def alert_list_url(external_url: str) -> str:
    """Join *external_url* with the alert list path."""
    return external_url.rstrip("/") + ALERT_LIST_PATH


class MessageRenderer:
    """Render alert batches for one notifier.

    Args:
        templates: Template engine.
        external_url: Public base URL of the alerting UI.
        symbols: State glyph mapping.
        images: Optional image store for screenshot links.
    """

    def __init__(
        self,
        templates: TemplateRenderer,
        *,
        external_url: str,
        symbols: StateSymbols | None = None,
        images: ImageStore | None = None,
    ) -> None:
        self.templates = templates
        self.external_url = external_url
        self.symbols = symbols or StateSymbols()
        self.images = images

    def _render_soft(
        self,
        template: str,
        data: TemplateData,
        errors: list[RenderError],
    ) -> str:
        try:
            return self.templates.render(template, data)
        except RenderError as exc:
            errors.append(exc)
            return ""
        except Exception as exc:  # noqa: BLE001
            error = RenderError(f"template {template!r} failed: {exc}")
            error.__cause__ = exc
            errors.append(error)
            return ""

    async def render(
        self,
        alerts: Sequence[Alert],
        message_template: str,
        *,
        receiver: str = "",
        title_template: str = DEFAULT_TITLE_TEMPLATE,
        legacy: bool = False,
    ) -> tuple[RenderedMessage, RenderError | None]:
        """Render *alerts* into a message.

        Args:
            alerts: The alert batch (read only).
            message_template: Message template source or name.
            receiver: Notifier name exposed to templates.
            title_template: Title template source or name.
            legacy: Use the single-rule layout (``*State:*`` line, no deep
                    link or images).

        Returns:
            ``(message, error)`` where *error* is the first template error,
            or ``None``.
        """
        data = TemplateData.from_alerts(alerts, receiver=receiver, external_url=self.external_url)
        errors: list[RenderError] = []
        symbol = self.symbols.for_state(aggregate_state(alerts))
        title = self._render_soft(title_template, data, errors)
        text = self._render_soft(message_template, data, errors)

        if legacy:
            state_name = data.group_labels.get("alertname", "")
            body = f"{symbol}{title}\n\n*State:* {state_name}\n*Message:* {text}\n"
        else:
            body = (
                f"{symbol}{title}\n\n*Message:*\n{text}\n"
                f"*URL:* {alert_list_url(self.external_url)}\n"
            )
            image_lines: list[str] = []

            def _add_image(_index: int, image: Image) -> None:
                if image.url:
                    image_lines.append(f"*Image:* {image.url}\n")

            await for_each_stored_image(self.images, alerts, _add_image)
            body += "".join(image_lines)

        message = RenderedMessage(title=title, text=text, body=body, state_symbol=symbol)
        return message, (errors[0] if errors else None)
