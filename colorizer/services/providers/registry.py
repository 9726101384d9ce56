from __future__ import annotations

from functools import lru_cache

from colorizer.config import get_settings

from .base import ColorizationProvider
from .gemini_provider import GeminiProvider
from .openai_provider import OpenAIProvider

_PROVIDERS: dict[str, type[ColorizationProvider]] = {
    "gemini": GeminiProvider,
    "openai": OpenAIProvider,
}


@lru_cache()
def get_provider() -> ColorizationProvider:
    settings = get_settings()
    provider_key = settings.colorizer_provider.lower()
    if provider_key not in _PROVIDERS:
        raise ValueError(f"Unsupported colorization provider: {provider_key}")
    return _PROVIDERS[provider_key]()
