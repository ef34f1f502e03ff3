"""
Core Ledger Models

The wallet is the unit of ownership: one per account, holding the balance,
the append-only operation history and the category budgets.

DESIGN DECISION: Money is Decimal everywhere.
Float drift would eventually break the accounting identity
balance == total income - total expense.

These models do no I/O and no business validation beyond their own
field constraints. Deciding whether an amount is acceptable is the
engine's job.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


class OperationDirection(str, Enum):
    """Which way money moved."""
    INCOME = "income"
    EXPENSE = "expense"


class Operation(BaseModel):
    """
    One income or expense event.

    Operations are frozen: once recorded they are never edited or removed.
    Expenses always name a category, income never does.
    """
    model_config = ConfigDict(frozen=True)

    direction: OperationDirection
    description: str = Field(
        default="",
        description="Free-text description"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount moved (always positive)"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the operation was captured"
    )
    category_name: Optional[str] = Field(
        default=None,
        description="Expense category (None for income)"
    )

    @model_validator(mode='after')
    def validate_category(self) -> 'Operation':
        if self.direction == OperationDirection.EXPENSE:
            if not self.category_name or not self.category_name.strip():
                raise ValueError("Expense operations require a category name")
        elif self.category_name:
            raise ValueError("Income operations cannot have a category")
        return self

    @property
    def is_income(self) -> bool:
        return self.direction == OperationDirection.INCOME

    @classmethod
    def income(cls, description: str, amount: Decimal) -> 'Operation':
        return cls(
            direction=OperationDirection.INCOME,
            description=description,
            amount=amount,
        )

    @classmethod
    def expense(
        cls,
        description: str,
        amount: Decimal,
        category_name: str,
    ) -> 'Operation':
        return cls(
            direction=OperationDirection.EXPENSE,
            description=description,
            amount=amount,
            category_name=category_name,
        )


class Category(BaseModel):
    """
    A named budget bucket.

    A limit of 0 means "no limit set". total_spent only ever grows.
    """

    name: str = Field(
        ...,
        min_length=1,
        description="Category name (unique within a wallet)"
    )
    budget_limit: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Spending limit, 0 when unset"
    )
    total_spent: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Sum of all expenses recorded against this category"
    )

    @property
    def has_limit(self) -> bool:
        return self.budget_limit > 0

    @property
    def remaining(self) -> Decimal:
        """Limit minus spend. Negative when over budget."""
        return self.budget_limit - self.total_spent

    @property
    def is_over_budget(self) -> bool:
        return self.has_limit and self.total_spent > self.budget_limit

    def set_budget_limit(self, limit: Decimal) -> None:
        """Replace the limit (absolute, not additive)."""
        self.budget_limit = limit

    def add_spent(self, amount: Decimal) -> None:
        self.total_spent += amount


class Wallet(BaseModel):
    """
    Per-account container of balance, operations and categories.

    The balance is maintained incrementally by credit/debit and is
    authoritative: it is never recomputed from the operation history.
    """

    current_balance: Decimal = Field(
        default=Decimal("0"),
        description="Current balance (may be negative)"
    )
    operations: list[Operation] = Field(
        default_factory=list,
        description="Operations in chronological (insertion) order"
    )
    # dicts keep insertion order, which gives a deterministic listing order
    categories: dict[str, Category] = Field(
        default_factory=dict,
        description="Category name -> Category"
    )

    @model_validator(mode='after')
    def validate_category_keys(self) -> 'Wallet':
        for key, category in self.categories.items():
            if key != category.name:
                raise ValueError(
                    f"Category key '{key}' does not match category name '{category.name}'"
                )
        return self

    def credit(self, amount: Decimal) -> None:
        self.current_balance += amount

    def debit(self, amount: Decimal) -> None:
        self.current_balance -= amount

    def record_operation(self, operation: Operation) -> None:
        self.operations.append(operation)

    def category_or_create(self, name: str) -> Category:
        """Return the named category, creating it with no limit if missing."""
        category = self.categories.get(name)
        if category is None:
            category = Category(name=name)
            self.categories[name] = category
        return category

    def category_lookup(self, name: str) -> Optional[Category]:
        return self.categories.get(name)
