"""
Payload construction for JSON webhook channels.

Builders return plain dicts; :func:`encode_json` turns them into the
request body.  Content type is fixed for every JSON channel.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import SecretStr

from alert_notifier.errors import DeliveryError

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def build_webhook_payload(markdown: str) -> dict[str, Any]:
    """Incoming-webhook body; the ``markdown`` key only when there is content."""
    payload: dict[str, Any] = {}
    if markdown:
        payload["markdown"] = markdown
    return payload


def build_room_payload(room_id: str, markdown: str) -> dict[str, Any]:
    """Authenticated room-API body."""
    return {"roomId": room_id, "markdown": markdown}


def bearer_headers(token: SecretStr | None) -> dict[str, str]:
    """``Authorization: Bearer <token>`` headers, or none without a token."""
    if token is None:
        return {}
    return {"Authorization": f"Bearer {token.get_secret_value()}"}


def encode_json(payload: dict[str, Any]) -> bytes:
    """Encode *payload* as compact UTF-8 JSON.

    Raises:
        DeliveryError: If the payload is not JSON serialisable.
    """
    try:
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise DeliveryError(f"failed to encode payload: {exc}") from exc
