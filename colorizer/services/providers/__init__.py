from __future__ import annotations

from colorizer.models import SourceImage

from .base import ColorizationError, ColorizationProvider
from .registry import get_provider

__all__ = [
    "ColorizationError",
    "ColorizationProvider",
    "colorize_image",
    "get_provider",
]


async def colorize_image(image: SourceImage, prompt: str) -> str:
    """Facade for the configured colorization provider.

    Returns the colored image as a data URI.
    """

    return await get_provider().colorize(image, prompt)
