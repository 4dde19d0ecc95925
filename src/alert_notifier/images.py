"""
Alert image enrichment.

Images are optional decoration: a missing or unavailable image must
never block a notification, so :func:`for_each_stored_image` skips
every image it cannot fetch.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol

import structlog

from alert_notifier.errors import EnrichmentError
from alert_notifier.models import Alert, Image

logger = structlog.get_logger()


class ImageStore(Protocol):
    """Lookup of screenshots attached to alerts."""

    async def get_image(self, token: str) -> Image:
        """Return the image stored under *token*.

        Raises:
            EnrichmentError: If the image is missing or the store is
                unavailable.
        """
        ...


class InMemoryImageStore:
    """Dict-backed :class:`ImageStore`.

    Args:
        images: Initial images; keyed by their token.
    """

    def __init__(self, images: Sequence[Image] = ()) -> None:
        self._images: dict[str, Image] = {img.token: img for img in images}

    def add(self, image: Image) -> None:
        self._images[image.token] = image

    async def get_image(self, token: str) -> Image:
        try:
            return self._images[token]
        except KeyError:
            raise EnrichmentError(f"image {token!r} not found") from None


async def for_each_stored_image(
    store: ImageStore | None,
    alerts: Sequence[Alert],
    callback: Callable[[int, Image], None],
) -> None:
    """Call *callback(index, image)* for every alert with a stored image.

    Alerts without an image token are skipped.  Lookup and callback
    errors are logged and skipped; this function never raises.

    Args:
        store: Image store, or ``None`` when images are disabled.
        alerts: The alert batch being notified.
        callback: Receives the index of the alert in *alerts* and its image.
    """
    if store is None:
        return
    for index, alert in enumerate(alerts):
        if not alert.image_token:
            continue
        try:
            image = await store.get_image(alert.image_token)
            callback(index, image)
        except Exception as exc:  # noqa: BLE001
            logger.debug(
                "image_skipped",
                alert=alert.name,
                token=alert.image_token,
                error=str(exc),
            )
