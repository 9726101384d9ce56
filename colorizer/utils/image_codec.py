"""Helpers for moving image bytes in and out of providers.

Results travel as inline ``data:<mime>;base64,<payload>`` URIs so they can be
displayed directly; uploads are optionally downscaled with Pillow before they
are sent out.
"""
from __future__ import annotations

import base64
import binascii
import io
import logging
from typing import Tuple

from PIL import Image

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

_PIL_FORMATS = {
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
}


def content_type_to_extension(content_type: str) -> str:
    return _EXTENSIONS.get(content_type.lower(), "png")


def encode_data_uri(data: bytes, content_type: str) -> str:
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{content_type};base64,{payload}"


def decode_data_uri(uri: str) -> Tuple[bytes, str]:
    """Return (bytes, content_type) for a base64 data URI."""

    if not uri.startswith("data:"):
        raise ValueError("Not a data URI")
    try:
        header, payload = uri[5:].split(",", 1)
    except ValueError as exc:
        raise ValueError("Malformed data URI") from exc
    content_type, _, encoding = header.partition(";")
    if encoding != "base64":
        raise ValueError("Only base64 data URIs are supported, got %r" % header)
    try:
        data = base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise ValueError("Invalid base64 payload in data URI") from exc
    return data, content_type or "application/octet-stream"


def downscale_image(file_bytes: bytes, content_type: str, *, max_dim: int) -> Tuple[bytes, str]:
    """Shrink an image so neither side exceeds *max_dim*.

    The original bytes are returned untouched when the image is already small
    enough. Format is preserved for png/jpeg/webp; anything else is re-encoded
    as PNG. Raises ``ValueError`` when Pillow cannot decode the bytes.
    """

    try:
        return _downscale(file_bytes, content_type, max_dim=max_dim)
    except OSError as exc:  # UnidentifiedImageError and truncated files
        raise ValueError(f"Not a readable image: {exc}") from exc


def _downscale(file_bytes: bytes, content_type: str, *, max_dim: int) -> Tuple[bytes, str]:
    with Image.open(io.BytesIO(file_bytes)) as img:
        width, height = img.size
        if max(width, height) <= max_dim:
            return file_bytes, content_type

        fmt = _PIL_FORMATS.get(content_type.lower(), "PNG")
        if fmt == "JPEG" and img.mode not in ("RGB", "L"):
            img = img.convert("RGB")
        img.thumbnail((max_dim, max_dim))
        buffer = io.BytesIO()
        img.save(buffer, format=fmt)
        logger.debug("Downscaled %dx%d image to %dx%d", width, height, img.size[0], img.size[1])
        new_type = content_type if fmt != "PNG" or content_type.lower() == "image/png" else "image/png"
        return buffer.getvalue(), new_type
