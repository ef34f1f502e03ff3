"""Structured logging package."""

from ledger.observability.logger import (
    bind_session,
    clear_session,
    configure_logging,
    create_session_id,
    get_logger,
)

__all__ = [
    "bind_session",
    "clear_session",
    "configure_logging",
    "create_session_id",
    "get_logger",
]
