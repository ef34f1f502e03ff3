"""
Data Models Package

This package contains all Pydantic models used by the ledger.
All data flowing through the system must conform to these schemas.
"""

from ledger.models.account import UserAccount
from ledger.models.outcome import (
    CategoryReport,
    CategoryStat,
    LedgerOutcome,
    Notice,
    NoticeKind,
    OutcomeStatus,
    OverallStats,
)
from ledger.models.wallet import (
    Category,
    Operation,
    OperationDirection,
    Wallet,
)

__all__ = [
    # Ledger models
    "Category",
    "Operation",
    "OperationDirection",
    "Wallet",
    # Accounts
    "UserAccount",
    # Outcomes
    "CategoryReport",
    "CategoryStat",
    "LedgerOutcome",
    "Notice",
    "NoticeKind",
    "OutcomeStatus",
    "OverallStats",
]
