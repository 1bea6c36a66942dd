"""Tests for portfolio.logging."""

from __future__ import annotations

import logging
from pathlib import Path

from portfolio.logging import configure_logging, get_logger


def test_configure_logging_replaces_handlers_and_writes_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "build.log"
    configure_logging(verbose=True)
    logger = configure_logging(verbose=True, log_file=log_file)

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    assert logging.getLogger("httpx").level == logging.DEBUG

    get_logger("pipeline").info("Adding demo")
    for handler in logger.handlers:
        handler.flush()
    assert "portfolio.pipeline: Adding demo" in log_file.read_text(encoding="utf-8")

    quiet = configure_logging()
    assert quiet.level == logging.INFO
    assert len(quiet.handlers) == 1
    assert logging.getLogger("httpx").level == logging.WARNING
