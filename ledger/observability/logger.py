"""
Structured Logging

DESIGN DECISION: Every state change and every absorbed failure is logged
as a structured event. This gives:
1. Debugging capability when a wallet looks wrong
2. Visibility into storage problems that are deliberately not raised
3. One session id to tie together everything a user did

Logs go to stderr through the stdlib logging module so the terminal menu
on stdout stays readable. This is diagnostics only; the wallet's
operation list remains the only record of financial history.
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog


def configure_logging(
    level: str = "WARNING",
    log_format: str = "console",
) -> None:
    """
    Configure structlog on top of stdlib logging.

    Args:
        level: Minimum stdlib level name (DEBUG, INFO, ...)
        log_format: "json" for JSON lines, "console" for readable output
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.WARNING),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None, **initial_values):
    """Get a structlog logger, optionally with bound context."""
    return structlog.get_logger(name, **initial_values)


def create_session_id() -> UUID:
    """
    Create a new id for one login session.

    Bind it once at session start so every event of the session carries it.
    """
    return uuid4()


def bind_session(session_id: UUID, account: str) -> None:
    """Attach session context to every log line emitted from now on."""
    structlog.contextvars.bind_contextvars(
        session_id=str(session_id),
        account=account,
    )


def clear_session() -> None:
    structlog.contextvars.clear_contextvars()
