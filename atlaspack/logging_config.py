import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

_DEFAULT_LEVEL = os.getenv("ATLASPACK_LOG_LEVEL", "INFO").upper()
FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def resolve_level(name: Optional[str]) -> int:
    level = logging.getLevelName((name or _DEFAULT_LEVEL).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    desired_level = resolve_level(level)
    root = logging.getLogger()
    if getattr(configure_logging, "_configured", False):
        root.setLevel(desired_level)
        return

    for handler in list(root.handlers):
        root.removeHandler(handler)

    root.setLevel(desired_level)
    formatter = logging.Formatter(FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if log_file:
        parent = os.path.dirname(log_file)
        if parent:
            os.makedirs(parent, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    configure_logging._configured = True  # type: ignore[attr-defined]
    root.debug("Logging configured at %s", logging.getLevelName(desired_level))
