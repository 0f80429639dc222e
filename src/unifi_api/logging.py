"""Structured logging configuration for UniFi API."""

from __future__ import annotations

import logging
import sys
from typing import List, Literal

import structlog


def configure_logging(
    log_format: Literal["json", "text"] = "text",
    log_level: str = "INFO",
) -> None:
    """Configure structlog for the application.

    Args:
        log_format: Output format - "json" for production, "text" for development.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
    """
    shared_processors: List[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors: List[structlog.typing.Processor] = [
            *shared_processors,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    level = getattr(logging, log_level.upper(), logging.INFO)

    # Log to stderr so command output on stdout stays clean
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )


def get_logger() -> structlog.stdlib.BoundLogger:
    """Get a configured structlog logger instance."""
    return structlog.get_logger()
