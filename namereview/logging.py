"""Logger hierarchy and handler setup for the CLI and the HTTP service."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, TextIO

_LOGGER_NAME = "namereview"
LOG_LEVEL_ENV = "LOG_LEVEL"

_CONSOLE_FORMAT = "[namereview] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LEVEL_ALIASES = {"WARN": "WARNING"}


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``namereview.<name>``, or the package logger when *name* is empty."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def resolve_level(verbose: bool = False, environ: Mapping[str, str] | None = None) -> int:
    """``--verbose`` wins; otherwise ``LOG_LEVEL`` picks the level, defaulting to INFO."""
    if verbose:
        return logging.DEBUG
    env = os.environ if environ is None else environ
    name = env.get(LOG_LEVEL_ENV, "").strip().upper()
    name = _LEVEL_ALIASES.get(name, name)
    level = logging.getLevelName(name) if name else logging.INFO
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    stream: TextIO | None = None,
    environ: Mapping[str, str] | None = None,
) -> logging.Logger:
    """Install the console handler (stderr by default) and an optional file sink.

    Reports and JSON go to stdout, so log lines never mix with them.
    """
    level = resolve_level(verbose, environ)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Replace handlers from an earlier call in the same process.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(stream)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "get_logger", "resolve_level"]
