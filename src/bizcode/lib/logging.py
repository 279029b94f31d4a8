"""Structlog setup for the bizcode CLI and host applications."""

from __future__ import annotations

import logging as std_logging
import sys
from typing import TextIO

import structlog

_VERBOSITY_LEVELS = (std_logging.WARNING, std_logging.INFO, std_logging.DEBUG)


def level_from_verbosity(verbosity: int) -> int:
    """Map `-v` counts to a stdlib level: none=WARNING, 1=INFO, 2+=DEBUG."""

    index = min(max(verbosity, 0), len(_VERBOSITY_LEVELS) - 1)
    return _VERBOSITY_LEVELS[index]


def configure_logging(
    json_mode: bool = False,
    verbosity: int = 0,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog and stdlib logging to write to `stream` (stderr)."""

    level = level_from_verbosity(verbosity)
    target = stream if stream is not None else sys.stderr
    # Registry warnings must never mix with formatted output on stdout.
    handler = std_logging.StreamHandler(target)
    handler.setFormatter(std_logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    std_logging.basicConfig(level=level, handlers=[handler], force=True)

    renderer: structlog.typing.Processor = (
        structlog.processors.JSONRenderer() if json_mode else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=target),
        cache_logger_on_first_use=True,
    )
