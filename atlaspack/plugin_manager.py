"""Hook plugin discovery and dispatch."""

from __future__ import annotations

import importlib
import importlib.metadata
import importlib.util
import logging
import pathlib
import sys
from typing import List

from .api import Context, HookPlugin
from .packer import Sprite

LOGGER = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "atlaspack.plugins"
HOOK_NAMES = ("on_pack_pre", "on_pack_post")


def load_entrypoint_plugins() -> list:
    """Load plugin modules registered under the ``atlaspack.plugins`` group."""

    modules = []
    for entry in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
        try:
            modules.append(entry.load())
        except Exception as exc:
            LOGGER.warning("failed to load plugin entry point %s: %s", entry.name, exc)
    return modules


def load_local_plugins(root: str = "plugins") -> list:
    """Import ``<root>/<name>/plugin.py`` modules."""

    modules = []
    base = pathlib.Path(root)
    if not base.is_dir():
        return modules

    for pkg in sorted(base.iterdir()):
        plugin_file = pkg / "plugin.py"
        if not plugin_file.is_file():
            continue
        spec = importlib.util.spec_from_file_location(f"atlaspack_plugin_{pkg.name}", plugin_file)
        module = importlib.util.module_from_spec(spec)
        sys.modules[spec.name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            sys.modules.pop(spec.name, None)
            LOGGER.warning("failed to import plugin %s: %s", pkg.name, exc)
            continue
        modules.append(module)
    return modules


def collect(modules: list) -> List[HookPlugin]:
    """Return the ``PLUGIN`` objects of ``modules`` that implement a hook."""

    plugins: List[HookPlugin] = []
    for module in modules:
        plugin = getattr(module, "PLUGIN", None)
        if plugin is None:
            continue
        if any(hasattr(plugin, name) for name in HOOK_NAMES):
            plugins.append(plugin)
    return plugins


def discover(plugins_dir: str = "plugins") -> List[HookPlugin]:
    plugins = collect(load_entrypoint_plugins() + load_local_plugins(plugins_dir))
    if plugins:
        LOGGER.debug("hook plugins: %s", ", ".join(getattr(p, "name", "?") for p in plugins))
    return plugins


def run_pack_pre(plugins: List[HookPlugin], sprites: List[Sprite], args, ctx: Context) -> List[Sprite]:
    for plugin in plugins:
        hook = getattr(plugin, "on_pack_pre", None)
        if hook is not None:
            sprites = list(hook(sprites, args, ctx))
    return sprites


def run_pack_post(plugins: List[HookPlugin], png_path: str, json_path: str, args, ctx: Context) -> None:
    for plugin in plugins:
        hook = getattr(plugin, "on_pack_post", None)
        if hook is not None:
            hook(png_path, json_path, args, ctx)


__all__ = [
    "ENTRY_POINT_GROUP",
    "collect",
    "discover",
    "load_entrypoint_plugins",
    "load_local_plugins",
    "run_pack_post",
    "run_pack_pre",
]
