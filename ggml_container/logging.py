# ggml_container/logging.py
"""
Logging setup using Loguru.

The package logs through loguru but stays silent until an application
opts in, either via :func:`configure_logging` or ``logger.enable``.
"""
from __future__ import annotations

import sys
from typing import Any

from loguru import logger

PACKAGE = "ggml_container"


def configure_logging(*, debug: bool = False, sink: Any = None) -> None:
    """Route package logs to a single human-readable sink.

    Args:
        debug: Enable verbose debug logging (decoder header/offset traces).
        sink: Destination passed to ``logger.add``; defaults to stderr.
    """
    logger.remove()
    level = "DEBUG" if debug else "INFO"
    fmt = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> "
        "| <level>{level: <8}</level> "
        "<cyan>{module}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> "
        "- <level>{message}</level>"
    )
    logger.add(sink or sys.stderr, level=level, format=fmt, backtrace=debug, diagnose=debug)
    logger.enable(PACKAGE)
