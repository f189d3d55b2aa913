"""Public API definitions for atlaspack hook plugins."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Protocol

from .packer import Sprite

API_VERSION = "1.0"

_PLUGIN_LOGGER = logging.getLogger("atlaspack.plugins")


@dataclass
class Context:
    """Execution context shared with plugins."""

    api_version: str = API_VERSION
    config: Dict[str, Any] = field(default_factory=dict)
    log: Callable[[str], None] = _PLUGIN_LOGGER.info


class HookPlugin(Protocol):
    """Protocol for pack lifecycle hooks. Either method may be omitted."""

    name: str

    def on_pack_pre(self, sprites: List[Sprite], args, ctx: Context) -> List[Sprite]:
        """Return the sprite list to pack just before packing begins."""

    def on_pack_post(self, png_path: str, json_path: str, args, ctx: Context) -> None:
        """Run after both artifacts have been written."""


__all__ = ["API_VERSION", "Context", "HookPlugin"]
