"""
Structured Logging

Every significant action (portfolio loaded, saved, analysis requested)
is logged as a structured event with keyword context.

The logger:
- Is configured once per process
- Renders JSON lines to stderr through the stdlib logging module
- Supports correlation IDs to trace related events of one user action
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Safe to call repeatedly; only the first call has an effect.
    """
    global _configured
    if _configured:
        return

    if level is None:
        from invertrack.config import get_settings

        try:
            level = get_settings().app.log_level
        except Exception:
            level = "INFO"

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
    )

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
    _configured = True


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, configuring logging on first use."""
    configure_logging()
    return structlog.get_logger(name)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., an AI analysis).
    Bind it to the logger of all subsequent operations.
    """
    return uuid4()
