"""Writing the packed atlas and its manifest to disk."""

from __future__ import annotations

import io
import logging
import os
from typing import Tuple

from PIL import Image

from .errors import OutputWriteError
from .manifest import Spritesheet, dumps_manifest

LOGGER = logging.getLogger(__name__)

__all__ = ["output_paths", "write_atlas"]


def output_paths(output: str) -> Tuple[str, str]:
    """Return the ``(png, json)`` paths for the output base name ``output``."""

    return f"{output}.png", f"{output}.json"


def _write_bytes(path: str, payload: bytes) -> None:
    try:
        with open(path, "wb") as handle:
            handle.write(payload)
    except OSError as exc:
        raise OutputWriteError(f"cannot write '{path}': {exc}") from exc


def write_atlas(canvas: Image.Image, sheet: Spritesheet, output: str) -> Tuple[str, str]:
    """Save ``canvas`` as ``<output>.png`` and ``sheet`` as ``<output>.json``.

    Both artifacts are encoded in memory before either file is opened, so an
    encoding failure leaves nothing behind.
    """

    png_path, json_path = output_paths(output)

    buffer = io.BytesIO()
    canvas.save(buffer, format="PNG")
    sheet = sheet.with_meta(image=os.path.basename(png_path))
    manifest = dumps_manifest(sheet).encode("utf-8")

    parent = os.path.dirname(png_path)
    if parent:
        try:
            os.makedirs(parent, exist_ok=True)
        except OSError as exc:
            raise OutputWriteError(f"cannot create output directory '{parent}': {exc}") from exc

    _write_bytes(png_path, buffer.getvalue())
    _write_bytes(json_path, manifest)
    LOGGER.info("wrote %s and %s", png_path, json_path)
    return png_path, json_path
