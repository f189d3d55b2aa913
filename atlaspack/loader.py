"""Reading sprite images from an input directory."""

from __future__ import annotations

import logging
import os
from typing import List

import numpy as np
from PIL import Image

from .errors import DirectoryListingError, SpriteLoadError
from .packer import Sprite

LOGGER = logging.getLogger(__name__)

# guard against decompression bombs from untrusted images
Image.MAX_IMAGE_PIXELS = 64_000_000

__all__ = ["list_sprite_files", "load_image", "load_sprites"]


def list_sprite_files(directory: str) -> List[str]:
    """Return the file names in ``directory``, sorted, skipping subdirectories."""

    try:
        entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
    except OSError as exc:
        raise DirectoryListingError(f"cannot list input directory '{directory}': {exc}") from exc
    return [entry.name for entry in entries if not entry.is_dir()]


def _to_8bit(img: Image.Image) -> Image.Image:
    """Scale 16- and 32-bit integer images down to 8-bit grayscale."""

    if not img.mode.startswith("I"):
        return img
    pixels = np.clip(np.asarray(img).astype(np.int64), 0, 0xFFFF) >> 8
    return Image.fromarray(pixels.astype(np.uint8))


def load_image(path: str) -> Image.Image:
    """Open and fully decode ``path``, returning an RGBA copy."""

    try:
        with Image.open(path) as payload:
            return _to_8bit(payload).convert("RGBA")
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise SpriteLoadError(path, exc) from exc


def load_sprites(directory: str) -> List[Sprite]:
    """Load every file in ``directory`` as a sprite named after the file.

    The first file that fails to open or decode aborts the whole load.
    """

    sprites: List[Sprite] = []
    for name in list_sprite_files(directory):
        path = os.path.join(directory, name)
        sprites.append(Sprite(name=name, image=load_image(path)))
        LOGGER.debug("loaded %s", path)
    LOGGER.info("loaded %d sprite(s) from %s", len(sprites), directory)
    return sprites
