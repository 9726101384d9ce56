from __future__ import annotations

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from a .env file if present (local dev only)
load_dotenv()


class Settings(BaseSettings):
    """Application configuration loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Provider selection
    colorizer_provider: str = Field("gemini", description="Key of the colorization provider to use.")

    # Gemini
    gemini_api_key: Optional[str] = Field(default=None, description="Google AI Studio API key.")
    gemini_model: str = Field("gemini-2.5-flash-image-preview")

    # OpenAI
    openai_api_key: Optional[str] = Field(default=None)
    openai_image_model: str = Field("gpt-image-1")

    # Transport
    request_timeout: float = Field(120.0, description="Seconds before a provider call is abandoned by the client binding.")

    # Image intake
    image_max_dim: int = Field(1536, description="Maximum width or height sent to the provider (pixels).")
    accepted_content_types: list[str] = Field(
        default_factory=lambda: ["image/png", "image/jpeg", "image/webp"],
        description="Upload mime types accepted at the API/CLI boundary.",
    )

    # Sessions
    session_idle_ttl: float = Field(3600.0, description="Seconds of inactivity before a session and its preview are released.")

    log_level: str = Field("INFO")


@lru_cache()
def get_settings() -> Settings:  # pragma: no cover
    """Return a cached Settings instance so it is only parsed once."""

    return Settings()
