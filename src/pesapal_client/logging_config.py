"""Structured logging configuration using structlog.

The client never configures logging on import. Applications call
configure_logging() once and pass get_logger(...) to the client; without an
injected logger the client logs to get_null_logger(), which drops everything.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

REDACTED = "***"
_SENSITIVE_KEYS = frozenset({"consumer_secret", "token", "authorization"})


def redact_secrets(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask credentials if they slip into a log event."""
    for key in _SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def _drop_event(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    raise structlog.DropEvent


def configure_logging(
    log_level: str = "INFO",
    format_as_json: bool = True,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_as_json: If True, output logs as JSON; otherwise use console format
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        redact_secrets,
    ]

    if format_as_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def get_null_logger() -> Any:
    """Return a logger that discards every event."""
    return structlog.wrap_logger(
        structlog.PrintLogger(),
        processors=[_drop_event],
        wrapper_class=structlog.BoundLogger,
    )
