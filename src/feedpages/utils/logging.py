"""Structured logging configuration for feedpages."""

import logging
import sys
from typing import Any

import structlog


def setup_logging(log_level: str = "INFO", verbose: bool = False) -> None:
    """Configure structured logging for a feedpages run.

    Args:
        log_level: Name of the minimum level to emit.
        verbose: Force DEBUG level, which also logs every HTTP response status.
    """
    level = logging.DEBUG if verbose else getattr(logging, log_level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    # Human-readable lines on a terminal, JSON when piped (cron, CI).
    renderer: Any
    if sys.stderr.isatty():
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a structured logger instance.

    Note: Returns Any because structlog.get_logger() returns a dynamically
    configured logger type that varies based on setup_logging() configuration.
    """
    return structlog.get_logger(name)
