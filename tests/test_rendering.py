"""
Tests for the message renderer.

Validates state glyph selection, the default and legacy body layouts,
the alert list deep link, image lines and soft template failures.
"""

from __future__ import annotations

import os
from unittest.mock import MagicMock, patch

import pytest

from alert_notifier.channels.rendering import (
    MessageRenderer,
    NotificationState,
    StateSymbols,
    aggregate_state,
    alert_list_url,
)
from alert_notifier.errors import RenderError
from alert_notifier.images import InMemoryImageStore
from alert_notifier.models import Alert, Image

FIRING = "\u26a0\ufe0f "
RESOLVED = "\u2705 "
NO_DATA = "\u2753\ufe0f "
BASE_URL = "https://grafana.example.test/"


@pytest.fixture()
def renderer(templates) -> MessageRenderer:
    return MessageRenderer(templates, external_url=BASE_URL)


class TestAggregateState:
    def test_all_resolved(self, resolved_alert) -> None:
        assert aggregate_state([resolved_alert]) is NotificationState.RESOLVED

    def test_mixed_is_firing(self, firing_alert, resolved_alert) -> None:
        assert aggregate_state([firing_alert, resolved_alert]) is NotificationState.FIRING

    def test_only_no_data(self, no_data_alert) -> None:
        assert aggregate_state([no_data_alert]) is NotificationState.NO_DATA

    def test_no_data_with_real_firing(self, no_data_alert, firing_alert) -> None:
        assert aggregate_state([no_data_alert, firing_alert]) is NotificationState.FIRING

    def test_empty_batch_is_firing(self) -> None:
        assert aggregate_state([]) is NotificationState.FIRING


class TestStateSymbols:
    def test_two_state_collapses_no_data(self) -> None:
        symbols = StateSymbols()
        assert symbols.for_state(NotificationState.NO_DATA) == FIRING
        assert symbols.for_state(NotificationState.RESOLVED) == RESOLVED

    def test_three_state(self) -> None:
        symbols = StateSymbols(no_data=NO_DATA)
        assert symbols.for_state(NotificationState.NO_DATA) == NO_DATA
        assert symbols.for_state(NotificationState.FIRING) == FIRING

    def test_from_settings(self) -> None:
        env = {"AN_THREE_STATE_SYMBOLS": "true", "AN_FIRING_SYMBOL": "[!] "}
        with patch.dict(os.environ, env):
            symbols = StateSymbols.from_settings()
        assert symbols.firing == "[!] "
        assert symbols.no_data == NO_DATA

    def test_from_settings_two_state_by_default(self) -> None:
        assert StateSymbols.from_settings().no_data is None


class TestAlertListUrl:
    @pytest.mark.parametrize("base", ["https://g.test", "https://g.test/", "https://g.test//"])
    def test_join(self, base: str) -> None:
        assert alert_list_url(base) == "https://g.test/alerting/list"


class TestMessageRenderer:
    async def test_default_layout(self, renderer, firing_alert) -> None:
        message, err = await renderer.render([firing_alert], "Firing", receiver="ops")

        assert err is None
        assert message.title == "[FIRING:1] HighCPU web-1"
        assert message.text == "Firing"
        assert message.state_symbol == FIRING
        assert message.body == (
            f"{FIRING}[FIRING:1] HighCPU web-1\n\n*Message:*\nFiring\n"
            "*URL:* https://grafana.example.test/alerting/list\n"
        )

    async def test_resolved_symbol(self, renderer, resolved_alert) -> None:
        message, _ = await renderer.render([resolved_alert], "ok")
        assert message.body.startswith(RESOLVED)

    async def test_three_state_no_data(self, templates, no_data_alert) -> None:
        renderer = MessageRenderer(
            templates,
            external_url=BASE_URL,
            symbols=StateSymbols(no_data=NO_DATA),
        )
        message, _ = await renderer.render([no_data_alert], "x")
        assert message.state_symbol == NO_DATA

    async def test_receiver_visible_to_templates(self, renderer, firing_alert) -> None:
        message, _ = await renderer.render([firing_alert], "to {{ receiver }}", receiver="ops")
        assert message.text == "to ops"

    async def test_image_lines(self, templates) -> None:
        store = InMemoryImageStore(
            [Image(token="t1", url="https://img.test/1.png"), Image(token="t2", path="/tmp/2.png")]
        )
        renderer = MessageRenderer(templates, external_url=BASE_URL, images=store)
        alerts = [
            Alert(labels={"alertname": "A"}, image_token="t1"),
            Alert(labels={"alertname": "A"}, image_token="t2"),
            Alert(labels={"alertname": "A"}, image_token="missing"),
        ]

        message, err = await renderer.render(alerts, "m")

        assert err is None
        assert message.body.endswith(
            "*URL:* https://grafana.example.test/alerting/list\n*Image:* https://img.test/1.png\n"
        )

    async def test_message_template_error_is_soft(self, renderer, firing_alert) -> None:
        message, err = await renderer.render([firing_alert], "{{ broken")

        assert err is not None
        assert message.text == ""
        assert message.title == "[FIRING:1] HighCPU web-1"
        assert "*URL:*" in message.body

    async def test_renderer_crash_is_soft(self, firing_alert) -> None:
        broken = MagicMock()
        broken.render.side_effect = ValueError("engine exploded")
        renderer = MessageRenderer(broken, external_url=BASE_URL)

        message, err = await renderer.render([firing_alert], "m")

        assert isinstance(err, RenderError)
        assert isinstance(err.__cause__, ValueError)
        assert message.title == ""
        assert message.text == ""
        assert message.body.endswith("*URL:* https://grafana.example.test/alerting/list\n")

    async def test_first_error_is_reported(self, renderer, firing_alert) -> None:
        message, err = await renderer.render(
            [firing_alert], "{{ broken", title_template="{% if %}"
        )
        assert err is not None
        assert "{% if %}" in str(err)
        assert message.title == ""
        assert message.text == ""

    async def test_legacy_layout(self, renderer, firing_alert) -> None:
        message, _ = await renderer.render([firing_alert], "cpu high", legacy=True)
        assert message.body == (
            f"{FIRING}[FIRING:1] HighCPU web-1\n\n*State:* HighCPU\n*Message:* cpu high\n"
        )

    async def test_input_alerts_not_mutated(self, renderer, firing_alert) -> None:
        alerts = [firing_alert]
        before = [a.model_dump() for a in alerts]
        await renderer.render(alerts, "x")
        assert [a.model_dump() for a in alerts] == before
