"""Structured logging configuration with redaction support."""

import logging
import sys
from typing import Any, Dict

import structlog

COORDINATE_KEYS = {"latitude", "longitude", "lat", "lon"}
COORDINATE_PRECISION = 2  # ~1km, enough to debug without pinpointing a user


def redact_sensitive(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Redact operator contact details from log entries.

    Redacts:
    - user_agent fields (Nominatim asks for a contact address in it)
    - Any field containing 'email'
    """
    sensitive_keys = {
        "user_agent",
        "email",
    }

    for key in list(event_dict.keys()):
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in sensitive_keys):
            event_dict[key] = "REDACTED"

    return event_dict


def coarsen_coordinates(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Round latitude/longitude fields so logs never carry a precise position."""
    for key in list(event_dict.keys()):
        if key.lower() in COORDINATE_KEYS and isinstance(event_dict[key], (int, float)):
            event_dict[key] = round(float(event_dict[key]), COORDINATE_PRECISION)
    return event_dict


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog for JSON output with correlation ID support.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_sensitive,
        coarsen_coordinates,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance.

    Args:
        name: Optional logger name for context

    Returns:
        Configured structlog logger
    """
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger
