"""Pack a directory of sprites into a single extruded texture atlas."""

from .errors import (
    AtlasError,
    CanvasOverflowError,
    ConfigError,
    DirectoryListingError,
    DuplicateSpriteError,
    EmptySpriteError,
    OutputWriteError,
    SpriteLoadError,
)
from .exports import write_atlas
from .extrude import extrude, extrude_once
from .loader import list_sprite_files, load_image, load_sprites
from .manifest import Dim, FrameRecord, Pos, Rect, Spritesheet, build_manifest, dumps_manifest, loads_manifest
from .packer import PlacementCursor, Sprite, pack

__version__ = "1.0.0"

__all__ = [
    "AtlasError",
    "CanvasOverflowError",
    "ConfigError",
    "Dim",
    "DirectoryListingError",
    "DuplicateSpriteError",
    "EmptySpriteError",
    "FrameRecord",
    "OutputWriteError",
    "PlacementCursor",
    "Pos",
    "Rect",
    "Sprite",
    "SpriteLoadError",
    "Spritesheet",
    "build_manifest",
    "dumps_manifest",
    "extrude",
    "extrude_once",
    "list_sprite_files",
    "load_image",
    "load_sprites",
    "loads_manifest",
    "pack",
    "write_atlas",
]
