from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from colorizer.models import SourceImage
from colorizer.utils.image_codec import downscale_image


class ColorizationError(Exception):
    """Raised by a provider binding when a colorization attempt fails.

    ``str(exc)`` is the human-readable description shown to the user; it may
    be empty when the provider gave nothing usable.
    """

    def __init__(self, message: str = "", *, provider: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class ColorizationProvider(ABC):
    """Abstract interface for a remote image colorization service."""

    name: str = "abstract"

    @abstractmethod
    async def colorize(self, image: SourceImage, prompt: str) -> str:
        """Colorize *image* following *prompt*.

        Returns
        -------
        str
            The colored image as a displayable ``data:`` URI.

        Raises
        ------
        ColorizationError
            If the provider rejects the request or returns no image.
        """

    async def close(self) -> None:
        """Release transport resources held by the binding."""


def build_instruction(prompt: str) -> str:
    return (
        "Colorize this line-art outline image. Keep every original line, the "
        "composition and the framing exactly as they are; only fill in color. "
        f"Color description: {prompt.strip()}"
    )


async def prepare_image(image: SourceImage, *, max_dim: int, provider: str) -> tuple[bytes, str]:
    """Downscale *image* off the event loop; returns (bytes, content_type)."""

    try:
        return await asyncio.to_thread(downscale_image, image.data, image.content_type, max_dim=max_dim)
    except ValueError as exc:
        raise ColorizationError("The uploaded file is not a readable image.", provider=provider) from exc
