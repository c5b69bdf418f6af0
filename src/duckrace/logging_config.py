"""Structured logging configuration.

The simulator itself never configures logging; scripts call
``configure_logging`` once at startup and modules obtain loggers through
``get_logger``.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import FilteringBoundLogger, Processor


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    enable_colors: bool = True,
) -> None:
    """Configure structured logging for scripts and batch runs.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format ('json' or 'console')
        enable_colors: Whether to enable colored output for console format
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    structlog.configure(
        processors=_get_processors(log_format, enable_colors),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def _get_processors(log_format: str, enable_colors: bool) -> list[Processor]:
    """Get the processors for the given output format."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format.lower() == "json":
        processors.extend([
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ])
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=enable_colors))

    return processors


def get_logger(name: str, **context: Any) -> FilteringBoundLogger:
    """Get a structured logger with optional bound context.

    Args:
        name: Logger name (typically __name__)
        **context: Additional context to bind to the logger

    Returns:
        Bound structlog logger
    """
    logger = structlog.get_logger(name)
    if context:
        logger = logger.bind(**context)
    return logger
