"""
Logging configuration for numeric_kernel.

Uses structlog on top of the standard logging module:
- Human-readable console rendering (development)
- JSON rendering (production / log shipping)

The kernel never configures logging on import. Until an application calls
``configure_logging`` (or ``configure_logging_from_settings``) kernel events
go to standard-library loggers under ``numeric_kernel``, which carry only a
NullHandler, so nothing is written anywhere.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict

from .config import KernelSettings, get_settings


def add_log_level(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add log level to the event dict.
    """
    if method_name == "warn":
        method_name = "warning"
    event_dict["level"] = method_name.upper()
    return event_dict


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render events as JSON instead of the console format
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)

    logging.basicConfig(
        format="%(message)s",
        handlers=[handler],
        level=numeric_level,
        force=True
        )

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
        )


def configure_logging_from_settings(settings: Optional[KernelSettings] = None) -> None:
    """
    Configure logging from ``KernelSettings`` (``NUMERIC_KERNEL_LOG_LEVEL``,
    ``NUMERIC_KERNEL_JSON_LOGS``).
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, json_logs=settings.json_logs)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance (structured logger).

    Args:
        name: Logger name (typically __name__)

    Usage:
        logger = get_logger(__name__)
        logger.debug("bootstrap interval floored", maturity="5")
    """
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)
