from __future__ import annotations

import logging

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from colorizer.config import get_settings
from colorizer.models import SourceImage
from colorizer.utils.image_codec import encode_data_uri

from .base import ColorizationError, ColorizationProvider, build_instruction, prepare_image

logger = logging.getLogger(__name__)


class GeminiProvider(ColorizationProvider):
    name = "gemini"

    def __init__(self) -> None:
        self._settings = get_settings()
        self._client: genai.Client | None = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self._settings.gemini_api_key:
                raise ColorizationError("Gemini API key is not configured.", provider=self.name)
            self._client = genai.Client(
                api_key=self._settings.gemini_api_key,
                http_options=genai_types.HttpOptions(timeout=int(self._settings.request_timeout * 1000)),
            )
        return self._client

    async def colorize(self, image: SourceImage, prompt: str) -> str:
        client = self._get_client()
        data, content_type = await prepare_image(image, max_dim=self._settings.image_max_dim, provider=self.name)
        contents = [
            genai_types.Part.from_bytes(data=data, mime_type=content_type),
            build_instruction(prompt),
        ]

        logger.debug("Gemini colorize %s (%d bytes) with model %s", image.filename, len(data), self._settings.gemini_model)
        try:
            resp = await client.aio.models.generate_content(
                model=self._settings.gemini_model,
                contents=contents,
                config=genai_types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
            )
        except genai_errors.APIError as exc:
            raise ColorizationError(exc.message or str(exc), provider=self.name) from exc

        return _extract_image(resp)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aio.aclose()
            self._client = None


def _extract_image(resp) -> str:
    """Return the first inline image of a response as a data URI."""

    text_parts: list[str] = []
    for cand in getattr(resp, "candidates", None) or []:
        content = getattr(cand, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            if inline is not None and getattr(inline, "data", None):
                return encode_data_uri(inline.data, inline.mime_type or "image/png")
            if getattr(part, "text", None):
                text_parts.append(part.text)

    if text_parts:
        raise ColorizationError(
            "The model returned no image. Model said: " + " ".join(t.strip() for t in text_parts),
            provider=GeminiProvider.name,
        )
    raise ColorizationError("The model returned no image data.", provider=GeminiProvider.name)
