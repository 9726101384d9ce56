from __future__ import annotations

import logging

import openai
from openai import AsyncOpenAI

from colorizer.config import get_settings
from colorizer.models import SourceImage

from .base import ColorizationError, ColorizationProvider, build_instruction, prepare_image

logger = logging.getLogger(__name__)


class OpenAIProvider(ColorizationProvider):
    name = "openai"

    def __init__(self) -> None:
        self._settings = get_settings()
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self._settings.openai_api_key:
                raise ColorizationError("OpenAI API key is not configured.", provider=self.name)
            self._client = AsyncOpenAI(
                api_key=self._settings.openai_api_key,
                timeout=self._settings.request_timeout,
                max_retries=0,
            )
        return self._client

    async def colorize(self, image: SourceImage, prompt: str) -> str:
        client = self._get_client()
        data, content_type = await prepare_image(image, max_dim=self._settings.image_max_dim, provider=self.name)

        logger.debug("OpenAI image edit %s with model %s", image.filename, self._settings.openai_image_model)
        try:
            resp = await client.images.edit(
                model=self._settings.openai_image_model,
                image=(image.filename, data, content_type),
                prompt=build_instruction(prompt),
            )
        except openai.APIStatusError as exc:
            body = exc.body if isinstance(exc.body, dict) else {}
            detail = body.get("message") or exc.message
            raise ColorizationError(detail, provider=self.name) from exc
        except openai.OpenAIError as exc:
            raise ColorizationError(str(exc), provider=self.name) from exc

        items = resp.data or []
        if not items or not items[0].b64_json:
            raise ColorizationError("The model returned no image data.", provider=self.name)
        # gpt-image-1 always answers with base64 PNG
        return f"data:image/png;base64,{items[0].b64_json}"

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
