"""
Ledger Engine

The business-logic layer. One engine serves one authenticated account
and owns that account's wallet for its whole lifetime.

RULES:
1. Every input is validated, and every Operation built, before anything
   is mutated. A raised LedgerError always means "nothing changed".
2. Budget-exceeded and overdrawn conditions are notices on a successful
   outcome. They never block or reverse an operation.
3. The balance is maintained incrementally. Totals are recomputed from
   history on every call, so any disagreement between the two is a bug.

TRANSFERS:
A transfer is an expense on the sender (under a per-recipient category,
so it counts against budgets like any other expense) plus an income on
the recipient's freshly loaded wallet. Both wallets are mutated in memory
first, then the sender is persisted, then the recipient. The two writes
are not atomic: a crash between them leaves the sender debited on disk
while the recipient is not yet credited.
"""

from decimal import Decimal, DecimalException, InvalidOperation
from typing import Any, Optional

from ledger.config import AppSettings, get_settings
from ledger.models.outcome import (
    CategoryReport,
    CategoryStat,
    LedgerOutcome,
    Notice,
    NoticeKind,
    OverallStats,
)
from ledger.models.wallet import Operation, OperationDirection, Wallet
from ledger.observability import get_logger
from ledger.services.storage import (
    AccountDirectoryInterface,
    WalletStorageInterface,
)


logger = get_logger(__name__)

CENT = Decimal("0.01")


class LedgerError(Exception):
    """Base exception for rejected ledger commands."""

    error_code = "ledger_error"


class InvalidAmount(LedgerError):
    """Amount is not a finite number in the allowed range."""

    error_code = "invalid_amount"

    def __init__(self, amount: Any, message: str):
        self.amount = amount
        super().__init__(message)


class InvalidDescription(LedgerError):
    """Description is not text."""

    error_code = "invalid_description"

    def __init__(self, message: str = "Description must be text"):
        super().__init__(message)


class InvalidCategory(LedgerError):
    """Category name is missing or blank."""

    error_code = "invalid_category"

    def __init__(self, message: str = "Category name cannot be empty"):
        super().__init__(message)


class AccountNotFound(LedgerError):
    """Transfer recipient is not a registered account."""

    error_code = "account_not_found"

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"User with login '{account_id}' not found")


class InvalidRecipient(LedgerError):
    """Transfer recipient cannot receive this transfer (e.g. the sender)."""

    error_code = "invalid_recipient"

    def __init__(self, account_id: str, message: str):
        self.account_id = account_id
        super().__init__(message)


def parse_amount(value: Any) -> Decimal:
    """
    Convert user or caller input to a finite Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its
    binary expansion.

    Raises:
        InvalidAmount: If the value is not a finite number, or is too
                       large to be carried to the cent
    """
    if isinstance(value, bool):
        raise InvalidAmount(value, f"Not a valid amount: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmount(value, f"Not a valid amount: {value!r}")
    if not amount.is_finite():
        raise InvalidAmount(value, f"Amount must be a finite number: {value!r}")
    try:
        amount.quantize(CENT)
    except DecimalException:
        raise InvalidAmount(value, f"Amount is out of range: {value!r}")
    return amount


class LedgerEngine:
    """
    Income, expense, budget, statistics and transfer operations on one wallet.

    The wallet is loaded exactly once, at construction, and persisted
    only when save() is called (or as part of a transfer).
    """

    def __init__(
        self,
        account_id: str,
        wallet_storage: WalletStorageInterface,
        account_directory: AccountDirectoryInterface,
        settings: Optional[AppSettings] = None,
    ):
        self._account_id = account_id
        self._storage = wallet_storage
        self._directory = account_directory
        self._settings = settings or get_settings().app
        self._wallet = wallet_storage.load_wallet(account_id)
        logger.debug(
            "wallet_loaded",
            account=account_id,
            operations=len(self._wallet.operations),
            categories=len(self._wallet.categories),
        )

    @property
    def account_id(self) -> str:
        return self._account_id

    @property
    def wallet(self) -> Wallet:
        return self._wallet

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _require_positive(value: Any, message: str) -> Decimal:
        amount = parse_amount(value)
        if amount <= 0:
            raise InvalidAmount(value, message)
        return amount

    @staticmethod
    def _require_description(description: Any) -> str:
        if not isinstance(description, str):
            raise InvalidDescription()
        return description

    @staticmethod
    def _require_category(category_name: Optional[str]) -> str:
        if not isinstance(category_name, str) or not category_name.strip():
            raise InvalidCategory()
        return category_name

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def record_income(self, description: str, amount: Any) -> LedgerOutcome:
        """
        Add income to the wallet.

        Raises:
            InvalidAmount: If amount <= 0 (nothing is changed)
            InvalidDescription: If the description is not text
        """
        value = self._require_positive(amount, "Income amount must be positive")
        operation = Operation.income(self._require_description(description), value)

        self._wallet.credit(value)
        self._wallet.record_operation(operation)
        logger.info(
            "income_recorded",
            amount=str(value),
            balance=str(self._wallet.current_balance),
        )

        return LedgerOutcome.success(
            "Income added.",
            amount=value,
            balance=self._wallet.current_balance,
            notices=self._check_balance(),
        )

    def record_expense(
        self,
        description: str,
        amount: Any,
        category_name: Optional[str],
    ) -> LedgerOutcome:
        """
        Spend from the wallet against a category.

        The category is created on first use. If its limit is set and
        this expense pushes spending past it, a budget notice is attached.

        Raises:
            InvalidAmount: If amount <= 0
            InvalidCategory: If the category name is empty
            InvalidDescription: If the description is not text
        """
        value = self._require_positive(amount, "Expense amount must be positive")
        name = self._require_category(category_name)
        operation = Operation.expense(
            self._require_description(description), value, name,
        )

        notices = self._apply_expense(operation)
        return LedgerOutcome.success(
            "Expense added.",
            amount=value,
            balance=self._wallet.current_balance,
            notices=notices,
        )

    def _apply_expense(self, operation: Operation) -> list[Notice]:
        """Debit, record and categorize an already built expense."""
        amount = operation.amount
        category_name = operation.category_name
        self._wallet.debit(amount)
        self._wallet.record_operation(operation)

        category = self._wallet.category_or_create(category_name)
        category.add_spent(amount)
        logger.info(
            "expense_recorded",
            amount=str(amount),
            category=category_name,
            balance=str(self._wallet.current_balance),
        )

        notices = []
        if category.is_over_budget:
            logger.warning(
                "budget_exceeded",
                category=category_name,
                limit=str(category.budget_limit),
                spent=str(category.total_spent),
            )
            notices.append(Notice(
                kind=NoticeKind.BUDGET_EXCEEDED,
                message=f"Budget limit exceeded for category: {category_name}",
                category_name=category_name,
                limit=category.budget_limit,
                spent=category.total_spent,
            ))

        notices.extend(self._check_balance())
        return notices

    def _check_balance(self) -> list[Notice]:
        balance = self._wallet.current_balance
        if balance >= 0:
            return []
        logger.warning("balance_negative", balance=str(balance))
        return [Notice(
            kind=NoticeKind.OVERDRAWN,
            message="Your balance is negative. Expenses exceed income.",
            balance=balance,
        )]

    def set_category_budget(
        self,
        category_name: Optional[str],
        limit: Any,
    ) -> LedgerOutcome:
        """
        Set (replace) a category's budget limit. 0 clears the limit.

        Spending already recorded is untouched, and no notice is raised
        retroactively when the new limit is below it.

        Raises:
            InvalidAmount: If limit < 0
            InvalidCategory: If the category name is empty
        """
        value = parse_amount(limit)
        if value < 0:
            raise InvalidAmount(limit, "Budget limit cannot be negative")
        name = self._require_category(category_name)

        category = self._wallet.category_or_create(name)
        category.set_budget_limit(value)
        logger.info("budget_set", category=name, limit=str(value))

        return LedgerOutcome.success(
            f"Budget for category '{name}' set: {value:.2f}",
            amount=value,
        )

    def transfer(
        self,
        recipient_account_id: str,
        description: str,
        amount: Any,
    ) -> LedgerOutcome:
        """
        Move money to another registered account.

        The recipient's wallet is loaded from storage, never shared with
        a live session. Both wallets are persisted before returning.

        Raises:
            InvalidAmount: If amount <= 0
            AccountNotFound: If the recipient is not registered
            InvalidRecipient: If the recipient is the sender
            InvalidDescription: If the description is not text
        """
        value = self._require_positive(amount, "Transfer amount must be positive")
        if not self._directory.resolve_account(recipient_account_id):
            raise AccountNotFound(recipient_account_id)
        if recipient_account_id == self._account_id:
            raise InvalidRecipient(
                recipient_account_id,
                "Cannot transfer funds to yourself",
            )

        sent = Operation.expense(
            self._require_description(description),
            value,
            self._settings.transfer_category_template.format(
                recipient=recipient_account_id,
            ),
        )
        received = Operation.income(
            self._settings.transfer_income_template.format(sender=self._account_id),
            value,
        )
        recipient_wallet = self._storage.load_wallet(recipient_account_id)

        notices = self._apply_expense(sent)

        recipient_wallet.credit(value)
        recipient_wallet.record_operation(received)

        for login, wallet in (
            (self._account_id, self._wallet),
            (recipient_account_id, recipient_wallet),
        ):
            if not self._storage.save_wallet(login, wallet):
                notices.append(Notice(
                    kind=NoticeKind.SAVE_FAILED,
                    message=f"Could not save the wallet of '{login}'",
                ))

        logger.info(
            "transfer_completed",
            recipient=recipient_account_id,
            amount=str(value),
            balance=str(self._wallet.current_balance),
        )
        return LedgerOutcome.success(
            f"Transfer of {value:.2f} to '{recipient_account_id}' completed.",
            amount=value,
            balance=self._wallet.current_balance,
            notices=notices,
        )

    def save(self) -> bool:
        """Persist the wallet (session end)."""
        return self._storage.save_wallet(self._account_id, self._wallet)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _total(self, direction: OperationDirection) -> Decimal:
        return sum(
            (op.amount for op in self._wallet.operations if op.direction == direction),
            Decimal("0"),
        )

    def total_income(self) -> Decimal:
        return self._total(OperationDirection.INCOME)

    def total_expense(self) -> Decimal:
        return self._total(OperationDirection.EXPENSE)

    def current_balance(self) -> Decimal:
        return self._wallet.current_balance

    def overall_statistics(self) -> OverallStats:
        return OverallStats(
            total_income=self.total_income(),
            total_expense=self.total_expense(),
            current_balance=self.current_balance(),
        )

    def _category_report(self, title: str, empty_message: str) -> CategoryReport:
        if not self._wallet.categories:
            return CategoryReport(
                title=title,
                empty_notice=Notice(
                    kind=NoticeKind.NO_CATEGORIES,
                    message=empty_message,
                ),
            )

        rows = [
            CategoryStat(
                name=category.name,
                limit=category.budget_limit,
                spent=category.total_spent,
                remaining=category.remaining,
            )
            for category in self._wallet.categories.values()
        ]
        return CategoryReport(title=title, rows=rows)

    def list_categories(self) -> CategoryReport:
        return self._category_report("Categories", "No categories yet.")

    def category_statistics(self) -> CategoryReport:
        return self._category_report("Category statistics", "No categories.")
