"""Border extrusion for atlas sprites.

Extruding a sprite repeats its outermost rows and columns outward so that
texture filtering near the sprite edge samples the sprite's own colours rather
than whatever happens to sit next to it in the atlas.
"""

from __future__ import annotations

import numpy as np
from PIL import Image

from .errors import EmptySpriteError

__all__ = ["extrude", "extrude_once", "to_rgba"]


def to_rgba(img: Image.Image) -> Image.Image:
    """Return ``img`` in RGBA mode, converting only when needed."""

    return img if img.mode == "RGBA" else img.convert("RGBA")


def _check_area(img: Image.Image) -> None:
    if img.width <= 0 or img.height <= 0:
        raise EmptySpriteError(f"cannot extrude a zero-area image ({img.width}x{img.height})")


def extrude_once(img: Image.Image) -> Image.Image:
    """Grow ``img`` by one pixel on every side, repeating its edge pixels."""

    _check_area(img)
    src = to_rgba(img)
    w, h = src.size
    out = Image.new("RGBA", (w + 2, h + 2), (0, 0, 0, 0))
    out.paste(src, (1, 1))

    out.paste(src.crop((0, 0, w, 1)), (1, 0))
    out.paste(src.crop((0, h - 1, w, h)), (1, h + 1))
    out.paste(src.crop((0, 0, 1, h)), (0, 1))
    out.paste(src.crop((w - 1, 0, w, h)), (w + 1, 1))

    out.putpixel((0, 0), src.getpixel((0, 0)))
    out.putpixel((w + 1, 0), src.getpixel((w - 1, 0)))
    out.putpixel((0, h + 1), src.getpixel((0, h - 1)))
    out.putpixel((w + 1, h + 1), src.getpixel((w - 1, h - 1)))
    return out


def extrude(img: Image.Image, padding: int) -> Image.Image:
    """Return ``img`` grown by ``padding`` pixels on every side.

    The result matches calling :func:`extrude_once` ``padding`` times: each
    band repeats the nearest edge row or column and each corner block is
    filled with the nearest corner pixel. ``padding == 0`` hands back ``img``
    itself.
    """

    if padding < 0:
        raise ValueError("padding must be >= 0")
    _check_area(img)
    if padding == 0:
        return img

    pixels = np.asarray(to_rgba(img))
    padded = np.pad(pixels, ((padding, padding), (padding, padding), (0, 0)), mode="edge")
    return Image.fromarray(padded)
