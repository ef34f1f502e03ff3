"""
Outcome Models

Everything the engine reports back to a front end is one of these values.
The engine never prints; a presentation layer decides how outcomes look.

DESIGN DECISION: Warnings (budget exceeded, overdrawn) ride along on a
successful outcome as notices. They are information, not failures.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class NoticeKind(str, Enum):
    """Non-fatal conditions worth telling the user about."""
    BUDGET_EXCEEDED = "budget_exceeded"
    OVERDRAWN = "overdrawn"
    NO_CATEGORIES = "no_categories"
    SAVE_FAILED = "save_failed"


class Notice(BaseModel):
    """A single informational notice."""

    kind: NoticeKind
    message: str
    category_name: Optional[str] = None
    limit: Optional[Decimal] = None
    spent: Optional[Decimal] = None
    balance: Optional[Decimal] = None


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class LedgerOutcome(BaseModel):
    """
    Result of one command.

    Failures carry the error code of the LedgerError that caused them.
    """

    status: OutcomeStatus
    message: str
    error_code: Optional[str] = None
    amount: Optional[Decimal] = None
    balance: Optional[Decimal] = None
    notices: list[Notice] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    def has_notice(self, kind: NoticeKind) -> bool:
        return any(notice.kind == kind for notice in self.notices)

    @classmethod
    def success(cls, message: str, **fields) -> 'LedgerOutcome':
        return cls(status=OutcomeStatus.SUCCESS, message=message, **fields)

    @classmethod
    def failure(
        cls,
        message: str,
        error_code: Optional[str] = None,
    ) -> 'LedgerOutcome':
        return cls(
            status=OutcomeStatus.FAILURE,
            message=message,
            error_code=error_code,
        )


class CategoryStat(BaseModel):
    """One row of the category table."""

    name: str
    limit: Decimal
    spent: Decimal
    remaining: Decimal = Field(
        ...,
        description="limit - spent; negative when over budget"
    )

    @property
    def is_over_budget(self) -> bool:
        return self.limit > 0 and self.spent > self.limit


class CategoryReport(BaseModel):
    """
    Category listing or statistics.

    When the wallet has no categories, rows is empty and empty_notice
    explains why, so the front end shows a message instead of a bare table.
    """

    title: str
    rows: list[CategoryStat] = Field(default_factory=list)
    empty_notice: Optional[Notice] = None

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def get(self, name: str) -> Optional[CategoryStat]:
        for row in self.rows:
            if row.name == name:
                return row
        return None


class OverallStats(BaseModel):
    """Aggregate figures for the whole wallet."""

    total_income: Decimal
    total_expense: Decimal
    current_balance: Decimal
