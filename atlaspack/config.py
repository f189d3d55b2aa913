"""Runtime configuration for atlaspack.

Values are resolved from, lowest to highest precedence: the built-in
defaults, an optional ``.atlaspack/config.json`` file (or the file named by
``ATLASPACK_CONFIG``), ``ATLASPACK_*`` environment variables, and finally the
command-line flags handled in :mod:`atlaspack.cli`. The config file is only
read; a missing file simply means the defaults apply.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigError
from .packer import DEFAULT_PROTOCOL, OVERFLOW_POLICIES

CONFIG_DIR = Path(".atlaspack")
CONFIG_PATH = CONFIG_DIR / "config.json"

_DEFAULT_CONFIG: Dict[str, Any] = {
    "input": "input",
    "output": "packed",
    "extrude": 1,
    "width": 1024,
    "height": 32,
    "overflow": "clip",
    "protocol": DEFAULT_PROTOCOL,
    "plugins_dir": "plugins",
}

_INT_KEYS = ("extrude", "width", "height")

_ENV_KEYS = {
    "ATLASPACK_INPUT": "input",
    "ATLASPACK_OUTPUT": "output",
    "ATLASPACK_EXTRUDE": "extrude",
    "ATLASPACK_WIDTH": "width",
    "ATLASPACK_HEIGHT": "height",
    "ATLASPACK_OVERFLOW": "overflow",
    "ATLASPACK_PLUGINS_DIR": "plugins_dir",
}


def default_config() -> Dict[str, Any]:
    return dict(_DEFAULT_CONFIG)


def _read_file(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"config file {path} is not valid JSON: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must hold a JSON object")
    return data


def _coerce(key: str, value: Any, source: str, *, from_file: bool = False) -> Any:
    if key in _INT_KEYS and from_file:
        # bool is an int subclass; JSON true must not become 1
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{source}: '{key}' must be an integer, got {value!r}")
        return value
    if key in _INT_KEYS:
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"{source}: '{key}' must be an integer, got {value!r}") from exc
    if key == "overflow" and value not in OVERFLOW_POLICIES:
        raise ConfigError(f"{source}: 'overflow' must be one of {', '.join(OVERFLOW_POLICIES)}")
    return value


def load_config(
    path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Return the merged configuration.

    ``path`` names an explicit config file, which must exist. Without it the
    ``ATLASPACK_CONFIG`` variable is consulted, then ``.atlaspack/config.json``
    is used when present.
    """

    env = os.environ if environ is None else environ
    merged = default_config()

    explicit = path or env.get("ATLASPACK_CONFIG")
    config_file = Path(explicit) if explicit else CONFIG_PATH
    if explicit or config_file.is_file():
        for key, value in _read_file(config_file).items():
            if key in merged:
                merged[key] = _coerce(key, value, str(config_file), from_file=True)

    for var, key in _ENV_KEYS.items():
        if var in env:
            merged[key] = _coerce(key, env[var], var)

    return merged


__all__ = ["CONFIG_DIR", "CONFIG_PATH", "default_config", "load_config"]
