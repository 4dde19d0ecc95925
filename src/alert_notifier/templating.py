"""
Template rendering for notification titles and messages.

The templating engine is consumed through the :class:`TemplateRenderer`
protocol: given a template (inline source or the name of a registered
template) and the alert batch context, it returns the rendered text or
raises :class:`~alert_notifier.errors.RenderError`.

:class:`JinjaTemplateRenderer` is the bundled implementation.  It runs
templates in a Jinja sandbox and ships the named templates
``default.title``, ``default.message`` and ``default.alert``; user
templates can include or override them.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

import jinja2
from jinja2.sandbox import SandboxedEnvironment

from alert_notifier.errors import RenderError
from alert_notifier.models import Alert, batch_status

DEFAULT_TITLE_TEMPLATE = '{% include "default.title" %}'
DEFAULT_MESSAGE_TEMPLATE = '{% include "default.message" %}'

_DEFAULT_TEMPLATES: dict[str, str] = {
    "default.title": (
        "[{{ status | upper }}{% if status == 'firing' %}:{{ firing | length }}{% endif %}] "
        "{{ group_labels.values() | join(' ') }}"
    ),
    "default.alert": (
        "{% for k, v in alert.labels | dictsort %} - {{ k }} = {{ v }}\n{% endfor %}"
        "{% if alert.annotations %}Annotations:\n"
        "{% for k, v in alert.annotations | dictsort %} - {{ k }} = {{ v }}\n{% endfor %}"
        "{% endif %}"
        "{% if alert.generator_url %}Source: {{ alert.generator_url }}\n{% endif %}"
    ),
    "default.message": (
        "{% if firing %}**Firing**\n"
        "{% for alert in firing %}\nLabels:\n{% include 'default.alert' %}{% endfor %}"
        "{% endif %}"
        "{% if firing and resolved %}\n{% endif %}"
        "{% if resolved %}**Resolved**\n"
        "{% for alert in resolved %}\nLabels:\n{% include 'default.alert' %}{% endfor %}"
        "{% endif %}"
    ),
}


@dataclass(frozen=True, slots=True)
class TemplateData:
    """Context exposed to templates for one alert batch.

    Attributes:
        receiver: Name of the notifier being rendered for.
        status: ``"firing"`` or ``"resolved"`` for the whole batch.
        alerts: All alerts, as plain dicts.
        group_labels: Labels shared by every alert in the batch.
        common_annotations: Annotations shared by every alert.
        external_url: Public base URL of the alerting UI.
    """

    receiver: str
    status: str
    alerts: tuple[dict[str, Any], ...]
    group_labels: Mapping[str, str] = field(default_factory=dict)
    common_annotations: Mapping[str, str] = field(default_factory=dict)
    external_url: str = ""

    @classmethod
    def from_alerts(
        cls,
        alerts: Sequence[Alert],
        *,
        receiver: str = "",
        external_url: str = "",
    ) -> TemplateData:
        """Build the template context for *alerts*."""
        return cls(
            receiver=receiver,
            status=batch_status(alerts).value,
            alerts=tuple(a.model_dump(mode="json") for a in alerts),
            group_labels=_common(a.labels for a in alerts),
            common_annotations=_common(a.annotations for a in alerts),
            external_url=external_url,
        )

    def as_context(self) -> dict[str, Any]:
        """Return the mapping handed to the template engine."""
        return {
            "receiver": self.receiver,
            "status": self.status,
            "alerts": list(self.alerts),
            "firing": [a for a in self.alerts if a["status"] == "firing"],
            "resolved": [a for a in self.alerts if a["status"] == "resolved"],
            "group_labels": dict(self.group_labels),
            "common_labels": dict(self.group_labels),
            "common_annotations": dict(self.common_annotations),
            "external_url": self.external_url,
        }


def _common(mappings: Any) -> dict[str, str]:
    """Return the key/value pairs present with equal values in every mapping."""
    result: dict[str, str] | None = None
    for m in mappings:
        if result is None:
            result = dict(m)
        else:
            result = {k: v for k, v in result.items() if m.get(k) == v}
    return dict(sorted((result or {}).items()))


class TemplateRenderer(Protocol):
    """Renders a template against an alert batch context."""

    def render(self, template: str, data: TemplateData) -> str:
        """Render *template* (source or registered name) with *data*.

        Raises:
            RenderError: If the template cannot be parsed or executed.
        """
        ...


class JinjaTemplateRenderer:
    """:class:`TemplateRenderer` backed by a sandboxed Jinja environment.

    Args:
        templates: Extra named templates; a name shared with a default
                   template overrides it.
    """

    def __init__(self, templates: Mapping[str, str] | None = None) -> None:
        sources = dict(_DEFAULT_TEMPLATES)
        if templates:
            sources.update(templates)
        self._env = SandboxedEnvironment(
            loader=jinja2.DictLoader(sources),
            autoescape=False,
            keep_trailing_newline=True,
        )
        self._names = frozenset(sources)

    @property
    def template_names(self) -> frozenset[str]:
        return self._names

    def render(self, template: str, data: TemplateData) -> str:
        try:
            if template in self._names:
                tmpl = self._env.get_template(template)
            else:
                tmpl = self._env.from_string(template)
            return tmpl.render(data.as_context())
        except Exception as exc:  # noqa: BLE001
            raise RenderError(f"template {template!r} failed: {exc}") from exc
