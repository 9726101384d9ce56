"""Tests for provider bindings and the provider registry."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from colorizer.config import Settings
from colorizer.models import Failed, SourceImage
from colorizer.services.providers import registry
from colorizer.services.providers.base import ColorizationError, build_instruction
from colorizer.services.providers.gemini_provider import GeminiProvider, _extract_image
from colorizer.services.providers.openai_provider import OpenAIProvider
from colorizer.services.workflow import ColorizationController

from conftest import make_image


def _settings(**overrides):
    return Settings(_env_file=None, **overrides)


def _gemini_response(*parts):
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))])


@pytest.fixture
def clear_provider_cache():
    registry.get_provider.cache_clear()
    yield
    registry.get_provider.cache_clear()


class TestRegistry:
    def test_selects_provider_case_insensitively(self, monkeypatch, clear_provider_cache):
        monkeypatch.setattr(registry, "get_settings", lambda: SimpleNamespace(colorizer_provider="OpenAI"))

        assert isinstance(registry.get_provider(), OpenAIProvider)

    def test_default_is_gemini(self, monkeypatch, clear_provider_cache):
        monkeypatch.setattr(registry, "get_settings", lambda: _settings())

        assert isinstance(registry.get_provider(), GeminiProvider)

    def test_unknown_provider(self, monkeypatch, clear_provider_cache):
        monkeypatch.setattr(registry, "get_settings", lambda: SimpleNamespace(colorizer_provider="dalle9"))

        with pytest.raises(ValueError, match="Unsupported colorization provider"):
            registry.get_provider()


def test_instruction_includes_trimmed_prompt():
    assert build_instruction("  red car \n").endswith("Color description: red car")


class TestGemini:
    def test_extract_first_inline_image(self):
        resp = _gemini_response(
            SimpleNamespace(text="Here you go", inline_data=None),
            SimpleNamespace(text=None, inline_data=SimpleNamespace(data=b"\x89PNG", mime_type="image/png")),
        )

        assert _extract_image(resp) == "data:image/png;base64,iVBORw=="

    def test_text_only_response_reports_model_text(self):
        resp = _gemini_response(SimpleNamespace(text="I cannot do that.", inline_data=None))

        with pytest.raises(ColorizationError, match="I cannot do that."):
            _extract_image(resp)

    def test_empty_response(self):
        with pytest.raises(ColorizationError, match="no image data"):
            _extract_image(SimpleNamespace(candidates=None))

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        provider = GeminiProvider()
        provider._settings = _settings(gemini_api_key=None)

        with pytest.raises(ColorizationError, match="API key"):
            await provider.colorize(make_image(), "red")

    @pytest.mark.asyncio
    async def test_colorize_sends_image_and_instruction(self):
        provider = GeminiProvider()
        provider._settings = _settings(gemini_api_key="test-key", gemini_model="test-model")
        generate = AsyncMock(
            return_value=_gemini_response(
                SimpleNamespace(text=None, inline_data=SimpleNamespace(data=b"\x89PNG", mime_type="image/png"))
            )
        )
        provider._client = SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate)))

        result = await provider.colorize(make_image(), "a red car")

        assert result == "data:image/png;base64,iVBORw=="
        kwargs = generate.await_args.kwargs
        assert kwargs["model"] == "test-model"
        image_part, instruction = kwargs["contents"]
        assert image_part.inline_data.mime_type == "image/png"
        assert "a red car" in instruction

    @pytest.mark.asyncio
    async def test_unreadable_upload_fails_cleanly(self, previews):
        provider = GeminiProvider()
        provider._settings = _settings(gemini_api_key="test-key")
        generate = AsyncMock()
        provider._client = SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate)))
        controller = ColorizationController(provider.colorize, previews=previews)
        controller.select_image(SourceImage(filename="broken.png", content_type="image/png", data=b"not an image"))
        controller.set_prompt("a red car")

        await controller.submit_colorization()

        assert controller.session.state == Failed(error="The uploaded file is not a readable image.")
        generate.assert_not_awaited()


class TestOpenAI:
    def _provider(self, edit):
        provider = OpenAIProvider()
        provider._settings = _settings(openai_api_key="test-key")
        provider._client = SimpleNamespace(images=SimpleNamespace(edit=edit))
        return provider

    @pytest.mark.asyncio
    async def test_colorize_returns_png_data_uri(self):
        edit = AsyncMock(return_value=SimpleNamespace(data=[SimpleNamespace(b64_json="AAAA")]))
        provider = self._provider(edit)

        result = await provider.colorize(make_image("cat.png"), "orange cat")

        assert result == "data:image/png;base64,AAAA"
        filename, _, content_type = edit.await_args.kwargs["image"]
        assert (filename, content_type) == ("cat.png", "image/png")

    @pytest.mark.asyncio
    async def test_no_image_in_response(self):
        provider = self._provider(AsyncMock(return_value=SimpleNamespace(data=[])))

        with pytest.raises(ColorizationError, match="no image data"):
            await provider.colorize(make_image(), "orange cat")

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        provider = OpenAIProvider()
        provider._settings = _settings(openai_api_key=None)

        with pytest.raises(ColorizationError):
            await provider.colorize(make_image(), "orange cat")

    @pytest.mark.asyncio
    async def test_unreadable_upload(self):
        edit = AsyncMock()
        provider = self._provider(edit)
        broken = SourceImage(filename="broken.webp", content_type="image/webp", data=b"\x00\x01garbage")

        with pytest.raises(ColorizationError, match="not a readable image") as exc_info:
            await provider.colorize(broken, "orange cat")

        assert exc_info.value.provider == "openai"
        edit.assert_not_awaited()
