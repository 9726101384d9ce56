#!/usr/bin/env python
"""Colorize a single line-art image from the command line."""
from __future__ import annotations

import argparse
import asyncio
import logging
import mimetypes
import sys
from pathlib import Path

from colorizer.config import get_settings
from colorizer.models import Failed, SourceImage, Succeeded
from colorizer.services.providers import get_provider
from colorizer.services.workflow import ColorizationController
from colorizer.utils.image_codec import content_type_to_extension, decode_data_uri


async def run(image_path: Path, prompt: str, output: Path | None) -> int:
    settings = get_settings()
    if not image_path.is_file():
        print(f"No such file: {image_path}", file=sys.stderr)
        return 1
    content_type = mimetypes.guess_type(image_path.name)[0] or ""
    if content_type not in settings.accepted_content_types:
        print(f"Unsupported image type: {content_type or image_path.suffix}", file=sys.stderr)
        return 1

    try:
        provider = get_provider()
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1

    try:
        with ColorizationController(provider.colorize) as controller:
            controller.select_image(
                SourceImage(filename=image_path.name, content_type=content_type, data=image_path.read_bytes())
            )
            controller.set_prompt(prompt)
            outcome = await controller.submit_colorization()
    finally:
        await provider.close()

    if outcome.message:
        print(outcome.message, file=sys.stderr)
        return 1
    if isinstance(outcome.state, Failed):
        print(outcome.state.error, file=sys.stderr)
        return 1

    if not isinstance(outcome.state, Succeeded):
        print(f"Unexpected colorization state: {outcome.state.status}", file=sys.stderr)
        return 1

    try:
        data, result_type = decode_data_uri(outcome.state.result)
    except ValueError as exc:
        print(f"Provider returned an unusable image: {exc}", file=sys.stderr)
        return 1
    if output is None:
        output = image_path.with_name(f"{image_path.stem}_colored.{content_type_to_extension(result_type)}")
    try:
        output.write_bytes(data)
    except OSError as exc:
        print(f"Could not write {output}: {exc}", file=sys.stderr)
        return 1
    print(f"Wrote {output}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Colorize a line-art image with AI")
    parser.add_argument("image", type=Path)
    parser.add_argument("--prompt", required=True, help="e.g. 'A red car with a blue background, sunset lighting'")
    parser.add_argument("--output", type=Path, default=None)
    args = parser.parse_args()

    logging.basicConfig(level=get_settings().log_level.upper())
    sys.exit(asyncio.run(run(args.image, args.prompt, args.output)))


if __name__ == "__main__":
    main()
