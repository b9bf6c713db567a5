"""
Structured logging setup.

structlog is configured once, on import, to render JSON through the
standard library logging machinery. Library modules just call
get_logger(__name__); applications call configure_logging() to pick
the level and attach a handler.
"""

import logging
import sys
from typing import Optional

import structlog


structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(log_level: Optional[str] = None) -> None:
    """
    Route structured logs to stderr at the given level.

    Defaults to the level from AppSettings.
    """
    if log_level is None:
        from spliteasy.config import get_settings
        log_level = get_settings().app.log_level

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger."""
    return structlog.get_logger(name)
