"""Sprite sheet manifest model and its JSON form."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from .errors import DuplicateSpriteError

__all__ = [
    "Dim",
    "FrameRecord",
    "Pos",
    "Rect",
    "Spritesheet",
    "build_manifest",
    "dumps_manifest",
    "loads_manifest",
]


@dataclass(frozen=True)
class Rect:
    x: int = 0
    y: int = 0
    w: int = 0
    h: int = 0

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    def is_empty(self) -> bool:
        return self.w <= 0 or self.h <= 0

    def union(self, other: "Rect") -> "Rect":
        """Smallest rectangle covering both; empty rectangles are ignored."""

        if self.is_empty():
            return other
        if other.is_empty():
            return self
        x0, y0 = min(self.x, other.x), min(self.y, other.y)
        x1, y1 = max(self.right, other.right), max(self.bottom, other.bottom)
        return Rect(x0, y0, x1 - x0, y1 - y0)

    def to_dict(self) -> Dict[str, int]:
        return {"X": self.x, "Y": self.y, "W": self.w, "H": self.h}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Rect":
        return cls(int(data["X"]), int(data["Y"]), int(data["W"]), int(data["H"]))


@dataclass(frozen=True)
class Pos:
    x: int = 0
    y: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"X": self.x, "Y": self.y}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Pos":
        return cls(int(data["X"]), int(data["Y"]))


@dataclass(frozen=True)
class Dim:
    w: int = 0
    h: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"W": self.w, "H": self.h}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Dim":
        return cls(int(data["W"]), int(data["H"]))


@dataclass(frozen=True)
class FrameRecord:
    """Where one sprite's original pixels live inside the atlas.

    ``rotated``, ``trimmed``, ``sprite_source_size``, ``source_size`` and
    ``pivot`` are always written with their zero values; renderers that read
    the TexturePacker-style layout expect the keys to exist.
    """

    frame: Rect
    rotated: bool = False
    trimmed: bool = False
    sprite_source_size: Rect = field(default_factory=Rect)
    source_size: Dim = field(default_factory=Dim)
    pivot: Pos = field(default_factory=Pos)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frame": self.frame.to_dict(),
            "rotated": self.rotated,
            "trimmed": self.trimmed,
            "spriteSourceSize": self.sprite_source_size.to_dict(),
            "sourceSize": self.source_size.to_dict(),
            "pivot": self.pivot.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FrameRecord":
        return cls(
            frame=Rect.from_dict(data["frame"]),
            rotated=bool(data.get("rotated", False)),
            trimmed=bool(data.get("trimmed", False)),
            sprite_source_size=Rect.from_dict(data.get("spriteSourceSize", Rect().to_dict())),
            source_size=Dim.from_dict(data.get("sourceSize", Dim().to_dict())),
            pivot=Pos.from_dict(data.get("pivot", Pos().to_dict())),
        )


@dataclass(frozen=True)
class Spritesheet:
    frames: Mapping[str, FrameRecord]
    meta: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "frames", MappingProxyType(dict(self.frames)))
        object.__setattr__(self, "meta", MappingProxyType(dict(self.meta)))

    def with_meta(self, **extra: Any) -> "Spritesheet":
        """Return a copy whose metadata also holds ``extra``."""

        return Spritesheet(frames=self.frames, meta={**self.meta, **extra})

    @property
    def protocol(self) -> Optional[str]:
        return self.meta.get("protocol")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frames": {name: self.frames[name].to_dict() for name in sorted(self.frames)},
            "meta": dict(self.meta),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Spritesheet":
        if not isinstance(data, Mapping) or "frames" not in data:
            raise ValueError("manifest must be an object with a 'frames' key")
        frames = {name: FrameRecord.from_dict(entry) for name, entry in data["frames"].items()}
        return cls(frames=frames, meta=data.get("meta") or {})


def build_manifest(
    placements: Iterable[Tuple[str, Rect]],
    *,
    protocol: str,
    meta: Optional[Mapping[str, Any]] = None,
) -> Spritesheet:
    """Turn ``(name, frame rect)`` placements into a :class:`Spritesheet`."""

    frames: Dict[str, FrameRecord] = {}
    for name, rect in placements:
        if name in frames:
            raise DuplicateSpriteError(name)
        frames[name] = FrameRecord(frame=rect)

    bag: Dict[str, Any] = dict(meta or {})
    bag["protocol"] = protocol
    return Spritesheet(frames=frames, meta=bag)


def dumps_manifest(sheet: Spritesheet) -> str:
    return json.dumps(sheet.to_dict(), indent=2, sort_keys=True) + "\n"


def loads_manifest(text: str) -> Spritesheet:
    return Spritesheet.from_dict(json.loads(text))
