"""Command-line entry point: pack a directory of sprites into one atlas."""

from __future__ import annotations

import argparse
import logging
import sys

from .api import Context
from .config import load_config
from .errors import AtlasError, ConfigError
from .exports import write_atlas
from .loader import load_sprites
from .logging_config import LEVEL_NAMES, configure_logging
from .packer import OVERFLOW_POLICIES, pack
from .plugin_manager import discover, run_pack_post, run_pack_pre

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "atlaspack",
        description="Pack every image in a directory into a single atlas PNG plus a JSON manifest.",
    )
    parser.add_argument("--input", help="Directory of sprite images (default: input)")
    parser.add_argument("--output", help="Base name of the output .png and .json (default: packed)")
    parser.add_argument(
        "--extrude",
        "--padding",
        dest="extrude",
        type=int,
        help="Pixels of edge extrusion around each sprite (default: 1)",
    )
    parser.add_argument("--width", type=int, help="Atlas width in pixels (default: 1024)")
    parser.add_argument("--height", type=int, help="Atlas height in pixels (default: 32)")
    parser.add_argument(
        "--overflow",
        choices=OVERFLOW_POLICIES,
        help="What to do when sprites run past the canvas edge (default: clip)",
    )
    parser.add_argument("--config", help="Path to a JSON config file")
    parser.add_argument("--log-level", type=str.upper, choices=LEVEL_NAMES, help="Logging level (default: INFO)")
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--no-plugins", action="store_true", help="Skip hook plugin discovery")
    return parser


def resolve_settings(args: argparse.Namespace) -> dict:
    """Merge parsed flags over the file and environment configuration."""

    settings = load_config(args.config)
    for key in ("input", "output", "extrude", "width", "height", "overflow"):
        value = getattr(args, key)
        if value is not None:
            settings[key] = value
    if settings["extrude"] < 0:
        raise ConfigError("extrude must be >= 0")
    if settings["width"] <= 0 or settings["height"] <= 0:
        raise ConfigError("width and height must be positive")
    return settings


def run(args: argparse.Namespace) -> tuple:
    settings = resolve_settings(args)
    ctx = Context(config=settings)
    plugins = [] if args.no_plugins else discover(settings["plugins_dir"])

    sprites = load_sprites(settings["input"])
    sprites = run_pack_pre(plugins, sprites, args, ctx)

    canvas, sheet = pack(
        sprites,
        settings["width"],
        settings["height"],
        settings["extrude"],
        overflow=settings["overflow"],
        protocol=settings["protocol"],
    )
    png_path, json_path = write_atlas(canvas, sheet, settings["output"])
    run_pack_post(plugins, png_path, json_path, args, ctx)
    return png_path, json_path


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    try:
        run(args)
    except (AtlasError, OSError) as exc:
        LOGGER.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
