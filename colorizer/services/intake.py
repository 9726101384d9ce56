"""Image Intake Manager.

Owns the currently selected source image of a session and the preview handle
derived from it. Replacing the image or tearing the manager down always
releases the previous preview.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from colorizer.models import Idle, PreviewHandle, SourceImage

from .previews import PreviewRegistry, preview_registry

if TYPE_CHECKING:  # pragma: no cover
    from .workflow import ColorizerSession

logger = logging.getLogger(__name__)


class ImageIntakeManager:
    def __init__(self, session: "ColorizerSession", *, previews: PreviewRegistry | None = None) -> None:
        self._session = session
        self._previews = previews if previews is not None else preview_registry

    @property
    def preview(self) -> PreviewHandle | None:
        return self._session.preview

    def select_image(self, file: SourceImage) -> PreviewHandle:
        """Make *file* the session's source image.

        The previous preview is released, a new one is derived, and any
        result, error or pending request of the old image is cleared.
        """

        session = self._session
        self._release_preview()

        session.source = file
        session.preview = self._previews.create(file)
        # Any in-flight request now belongs to a superseded image.
        session.generation += 1
        session.state = Idle()
        session.message = None

        logger.info("Selected image %s (%s, %d bytes)", file.filename, file.content_type, file.size)
        return session.preview

    def close(self) -> None:
        """Release the current preview. Safe to call more than once."""

        self._release_preview()

    def _release_preview(self) -> None:
        handle = self._session.preview
        if handle is None:
            return
        self._session.preview = None
        self._previews.release(handle)

    def __enter__(self) -> "ImageIntakeManager":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
