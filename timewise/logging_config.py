"""
Structured log rendering for the timewise logger tree.

Engine modules log through the standard library
(`logger = logging.getLogger(__name__)`) and stay silent until an
application opts in. setup_logging() attaches a structlog ProcessorFormatter
to the "timewise" logger, so those records render as console lines or JSON.
Output goes to stderr by default, keeping stdout free for CLI results.

Usage:
    from timewise.logging_config import setup_logging
    setup_logging()                         # TIMEWISE_LOG_LEVEL / TIMEWISE_LOG_FORMAT
    setup_logging("DEBUG", json_output=True)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

import structlog

LOGGER_NAME = "timewise"

# Identifies the handler installed here, so repeated setup replaces it
HANDLER_NAME = "timewise-structlog"


def _build_formatter(json_output: bool, colors: bool) -> structlog.stdlib.ProcessorFormatter:
    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def setup_logging(
    level: str | None = None,
    json_output: bool | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Route timewise log records through structlog renderers.

    Args:
        level: Log level name (default: TIMEWISE_LOG_LEVEL or INFO)
        json_output: JSON lines instead of console output
            (default: TIMEWISE_LOG_FORMAT == "json")
        stream: Destination (default: sys.stderr)

    Returns:
        The configured "timewise" logger
    """
    if level is None:
        level = os.environ.get("TIMEWISE_LOG_LEVEL", "INFO")

    if json_output is None:
        json_output = os.environ.get("TIMEWISE_LOG_FORMAT", "").lower() == "json"

    stream = stream or sys.stderr
    colors = hasattr(stream, "isatty") and stream.isatty()

    handler = logging.StreamHandler(stream)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(_build_formatter(json_output, colors))

    logger = logging.getLogger(LOGGER_NAME)
    for existing in [h for h in logger.handlers if h.get_name() == HANDLER_NAME]:
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    return logger


__all__ = ["HANDLER_NAME", "LOGGER_NAME", "setup_logging"]
