"""Naive strip packing of sprites onto a fixed-size atlas canvas."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from PIL import Image

from .extrude import extrude, to_rgba
from .errors import CanvasOverflowError, DuplicateSpriteError
from .manifest import Rect, Spritesheet, build_manifest

LOGGER = logging.getLogger(__name__)

DEFAULT_PROTOCOL = "atlaspack/1.0"
OVERFLOW_POLICIES = ("clip", "error")

__all__ = [
    "DEFAULT_PROTOCOL",
    "OVERFLOW_POLICIES",
    "PlacementCursor",
    "Sprite",
    "pack",
]


@dataclass(frozen=True)
class Sprite:
    name: str
    image: Image.Image


@dataclass
class PlacementCursor:
    """Where the next block goes, plus the area covered so far."""

    x: int = 0
    y: int = 0
    bounds: Rect = field(default_factory=Rect)

    def place(self, width: int, height: int) -> Rect:
        """Claim a ``width`` x ``height`` block at the cursor and advance past it."""

        block = Rect(self.x, self.y, width, height)
        self.bounds = self.bounds.union(block)
        self.x += width
        return block


def _check_unique(sprites: Sequence[Sprite]) -> None:
    seen = set()
    for sprite in sprites:
        if sprite.name in seen:
            raise DuplicateSpriteError(sprite.name)
        seen.add(sprite.name)


def pack(
    sprites: Sequence[Sprite],
    width: int,
    height: int,
    padding: int,
    *,
    overflow: str = "clip",
    protocol: str = DEFAULT_PROTOCOL,
) -> Tuple[Image.Image, Spritesheet]:
    """Lay ``sprites`` out left to right on a ``width`` x ``height`` canvas.

    Each sprite is extruded by ``padding`` and pasted at the running cursor.
    The recorded frame is the sprite's original rectangle, offset by
    ``padding`` from the extruded block. With ``overflow="clip"`` anything
    past the canvas edge is dropped by the paste; with ``overflow="error"``
    :class:`CanvasOverflowError` is raised instead.
    """

    if width <= 0 or height <= 0:
        raise ValueError("canvas width and height must be positive")
    if padding < 0:
        raise ValueError("padding must be >= 0")
    if overflow not in OVERFLOW_POLICIES:
        raise ValueError(f"unknown overflow policy: {overflow}")
    _check_unique(sprites)

    canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    cursor = PlacementCursor()
    placements: List[Tuple[str, Rect]] = []
    clipped: List[str] = []

    for sprite in sprites:
        orig_w, orig_h = sprite.image.size
        block_img = to_rgba(extrude(sprite.image, padding))
        block = cursor.place(*block_img.size)

        if block.right > width or block.bottom > height:
            if overflow == "error":
                raise CanvasOverflowError(
                    f"sprite '{sprite.name}' needs {block.right}x{block.bottom} "
                    f"but the canvas is {width}x{height}"
                )
            clipped.append(sprite.name)

        canvas.paste(block_img, (block.x, block.y))
        frame = Rect(block.x + padding, block.y + padding, orig_w, orig_h)
        placements.append((sprite.name, frame))
        LOGGER.debug("placed %s at %s", sprite.name, frame)

    if clipped:
        LOGGER.warning(
            "%d sprite(s) extend past the %dx%d canvas and were clipped: %s",
            len(clipped),
            width,
            height,
            ", ".join(clipped),
        )

    meta = {
        "app": "atlaspack",
        "format": "RGBA8888",
        "size": {"w": width, "h": height},
        "extrude": padding,
    }
    sheet = build_manifest(placements, protocol=protocol, meta=meta)
    LOGGER.info(
        "packed %d sprite(s), used %dx%d of %dx%d",
        len(placements),
        cursor.bounds.w,
        cursor.bounds.h,
        width,
        height,
    )
    return canvas, sheet
