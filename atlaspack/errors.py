"""Exceptions raised by the atlaspack pipeline.

Library code raises these; only :mod:`atlaspack.cli` catches them and turns
them into a diagnostic plus a non-zero exit code.
"""

from __future__ import annotations


class AtlasError(Exception):
    """Base class for every fatal atlaspack failure."""


class ConfigError(AtlasError):
    """The configuration file or environment holds an unusable value."""


class DirectoryListingError(AtlasError):
    """The input directory could not be listed."""


class SpriteLoadError(AtlasError):
    """A sprite file could not be opened or decoded."""

    def __init__(self, path: str, reason: object) -> None:
        super().__init__(f"failed to load sprite '{path}': {reason}")
        self.path = path


class OutputWriteError(AtlasError):
    """An output artifact could not be written."""


class EmptySpriteError(AtlasError, ValueError):
    """A sprite has zero width or zero height."""


class DuplicateSpriteError(AtlasError, ValueError):
    """Two sprites in one run share the same name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"duplicate sprite name: {name}")
        self.name = name


class CanvasOverflowError(AtlasError):
    """A sprite would be placed past the right or bottom edge of the canvas."""


__all__ = [
    "AtlasError",
    "CanvasOverflowError",
    "ConfigError",
    "DirectoryListingError",
    "DuplicateSpriteError",
    "EmptySpriteError",
    "OutputWriteError",
    "SpriteLoadError",
]
