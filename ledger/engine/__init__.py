"""Ledger engine package."""

from ledger.engine.ledger_engine import (
    AccountNotFound,
    InvalidAmount,
    InvalidCategory,
    InvalidDescription,
    InvalidRecipient,
    LedgerEngine,
    LedgerError,
    parse_amount,
)

__all__ = [
    "AccountNotFound",
    "InvalidAmount",
    "InvalidCategory",
    "InvalidDescription",
    "InvalidRecipient",
    "LedgerEngine",
    "LedgerError",
    "parse_amount",
]
