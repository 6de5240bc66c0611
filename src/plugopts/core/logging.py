"""Structured logging setup.

Library modules log through get_logger() and never configure output
themselves; hosts (or the CLI) call configure_logging() once.
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(*, json_output: bool = False, level: str = "WARNING") -> None:
    """Configure structlog output.

    Args:
        json_output: Emit one JSON object per line instead of console text
        level: Minimum level name ("DEBUG", "INFO", "WARNING", ...)

    Raises:
        ValueError: If level is not a known logging level name
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a lazily configured structlog logger, optionally tagged with a module name.

    Safe to call at import time: configuration is resolved on each log call,
    so configure_logging() applies to loggers created before it.
    """
    if name is None:
        return structlog.get_logger()
    # Initial values, not bind(): configuration resolves on each call
    return structlog.get_logger(logger_name=name)
