import asyncio
import io

import pytest
from PIL import Image

from colorizer.models import SourceImage
from colorizer.services.previews import PreviewRegistry
from colorizer.services.workflow import ColorizationController

RESULT_URI = "data:image/png;base64,iVBORw0KGgo="


def png_bytes(size=(8, 8), color=(255, 255, 255)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_image(name="outline.png", content_type="image/png") -> SourceImage:
    return SourceImage(filename=name, content_type=content_type, data=png_bytes())


class StubProvider:
    """Records calls; resolves with ``result`` or raises ``error``.

    When ``gate`` is set the call waits on it, so tests can inspect the
    session while a request is still in flight.
    """

    def __init__(self, result=RESULT_URI, error=None, gate=None):
        self.result = result
        self.error = error
        self.gate = gate
        self.calls = []

    async def __call__(self, image, prompt):
        self.calls.append((image, prompt))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def previews():
    return PreviewRegistry()


@pytest.fixture
def stub():
    return StubProvider()


@pytest.fixture
def controller(stub, previews):
    with ColorizationController(stub, previews=previews) as ctrl:
        yield ctrl


@pytest.fixture
def gate():
    return asyncio.Event()
