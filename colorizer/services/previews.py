"""In-memory object URLs for previewing uploaded images.

A preview handle stays resolvable from the moment it is created until it is
released. Releasing is explicit and happens once; the registry logs (but
tolerates) attempts to release a handle twice.
"""
from __future__ import annotations

import logging
import uuid

from colorizer.models import PreviewHandle, SourceImage

logger = logging.getLogger(__name__)


class PreviewRegistry:
    """Hands out and revokes preview URLs for in-memory images."""

    _URL_PREFIX = "/previews/"

    def __init__(self) -> None:
        self._images: dict[str, SourceImage] = {}

    def create(self, image: SourceImage) -> PreviewHandle:
        token = uuid.uuid4().hex
        self._images[token] = image
        logger.debug("Created preview %s for %s", token, image.filename)
        return PreviewHandle(token=token, url=f"{self._URL_PREFIX}{token}")

    def resolve(self, token: str) -> SourceImage | None:
        return self._images.get(token)

    def release(self, handle: PreviewHandle) -> bool:
        """Revoke *handle*. Returns False if it was already released."""

        if self._images.pop(handle.token, None) is None:
            logger.warning("Preview %s released more than once", handle.token)
            return False
        logger.debug("Released preview %s", handle.token)
        return True

    def is_alive(self, handle: PreviewHandle) -> bool:
        return handle.token in self._images

    def __len__(self) -> int:
        return len(self._images)


# Singleton instance
preview_registry = PreviewRegistry()
