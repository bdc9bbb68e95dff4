"""Tests for logger configuration."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from namereview.logging import configure_logging, get_logger, resolve_level


@pytest.mark.parametrize(
    ("verbose", "env", "expected"),
    [
        (False, {}, logging.INFO),
        (True, {"LOG_LEVEL": "error"}, logging.DEBUG),
        (False, {"LOG_LEVEL": "warn"}, logging.WARNING),
        (False, {"LOG_LEVEL": "ERROR"}, logging.ERROR),
        (False, {"LOG_LEVEL": "chatty"}, logging.INFO),
    ],
)
def test_resolve_level(verbose: bool, env: dict, expected: int) -> None:
    assert resolve_level(verbose, env) == expected


def test_console_and_file_handlers(tmp_path: Path) -> None:
    stream = io.StringIO()
    log_file = tmp_path / "namereview.log"

    logger = configure_logging(log_file=log_file, stream=stream, environ={})
    get_logger("rename").info("Renamed %s", "data")
    get_logger("rename").debug("hidden")
    for handler in logger.handlers:
        handler.flush()

    assert stream.getvalue() == "[namereview] INFO Renamed data\n"
    assert "INFO namereview.rename: Renamed data" in log_file.read_text(encoding="utf-8")


def test_reconfiguring_replaces_handlers() -> None:
    configure_logging(stream=io.StringIO(), environ={})
    logger = configure_logging(verbose=True, stream=io.StringIO(), environ={})

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
