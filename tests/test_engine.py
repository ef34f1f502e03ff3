"""Tests for the ledger engine: accounting identities, budgets and transfers."""

import pytest
from decimal import Decimal

from ledger.engine import (
    AccountNotFound,
    InvalidAmount,
    InvalidCategory,
    InvalidDescription,
    InvalidRecipient,
    LedgerEngine,
    parse_amount,
)
from ledger.models import NoticeKind, OperationDirection, Wallet
from ledger.services.storage import InMemoryWalletStorage


def snapshot(engine):
    """Everything a rejected command must leave untouched."""
    wallet = engine.wallet
    return (
        wallet.current_balance,
        list(wallet.operations),
        {name: (c.budget_limit, c.total_spent) for name, c in wallet.categories.items()},
    )


class TestParseAmount:
    """Tests for amount parsing."""

    @pytest.mark.parametrize("raw, expected", [
        ("100", Decimal("100")),
        (" 12.50 ", Decimal("12.50")),
        (0.1, Decimal("0.1")),
        (7, Decimal("7")),
        (Decimal("3.3"), Decimal("3.3")),
    ])
    def test_valid_values(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "", None, "NaN", "Infinity", True])
    def test_invalid_values(self, raw):
        with pytest.raises(InvalidAmount):
            parse_amount(raw)

    @pytest.mark.parametrize("raw", ["1e999999999", Decimal("1e30"), "-1e40"])
    def test_out_of_range_values(self, raw):
        """Test amounts too large to carry to the cent are rejected."""
        with pytest.raises(InvalidAmount, match="out of range"):
            parse_amount(raw)

    def test_large_but_representable_value(self):
        assert parse_amount("1e20") == Decimal("1e20")


class TestIncome:
    """Tests for record_income."""

    def test_salary_scenario(self, engine):
        """Test empty wallet → income 1000."""
        outcome = engine.record_income("Salary", 1000)

        assert outcome.succeeded is True
        assert engine.current_balance() == Decimal("1000")
        assert engine.total_income() == Decimal("1000")
        assert engine.total_expense() == Decimal("0")

    def test_income_operation_has_no_category(self, engine):
        engine.record_income("Salary", 1000)
        op = engine.wallet.operations[-1]
        assert op.direction == OperationDirection.INCOME
        assert op.description == "Salary"
        assert op.category_name is None

    @pytest.mark.parametrize("amount", [0, -1, "-0.01", "0"])
    def test_non_positive_income_rejected(self, engine, amount):
        """Test InvalidAmount and no mutation."""
        engine.record_income("Salary", 100)
        before = snapshot(engine)

        with pytest.raises(InvalidAmount):
            engine.record_income("Oops", amount)

        assert snapshot(engine) == before

    def test_long_description_is_recorded(self, engine):
        """Test free-text descriptions have no length cap."""
        description = "x" * 5000
        engine.record_income(description, 100)

        assert engine.wallet.operations[-1].description == description
        assert engine.current_balance() == engine.total_income() - engine.total_expense()

    @pytest.mark.parametrize("description", [None, 42])
    def test_non_text_description_rejected(self, engine, description):
        """Test InvalidDescription and no mutation."""
        engine.record_income("Salary", 100)
        before = snapshot(engine)

        with pytest.raises(InvalidDescription):
            engine.record_income(description, 100)

        assert snapshot(engine) == before

    def test_income_still_warns_while_negative(self, engine):
        """Test overdrawn notice repeats while balance stays negative."""
        engine.record_expense("Rent", 500, "Housing")
        outcome = engine.record_income("Part-time", 100)
        assert outcome.has_notice(NoticeKind.OVERDRAWN) is True


class TestExpense:
    """Tests for record_expense."""

    def test_expense_debits_and_categorizes(self, engine):
        engine.record_income("Salary", 1000)
        outcome = engine.record_expense("Groceries", 300, "Food")

        assert outcome.succeeded is True
        assert outcome.notices == []
        assert engine.current_balance() == Decimal("700")
        assert engine.wallet.category_lookup("Food").total_spent == Decimal("300")
        assert engine.wallet.operations[-1].category_name == "Food"

    @pytest.mark.parametrize("amount", [0, -10])
    def test_non_positive_expense_rejected(self, engine, amount):
        before = snapshot(engine)
        with pytest.raises(InvalidAmount):
            engine.record_expense("Lunch", amount, "Food")
        assert snapshot(engine) == before

    @pytest.mark.parametrize("category", ["", "   ", None, 5, ["Food"]])
    def test_empty_category_rejected(self, engine, category):
        """Test InvalidCategory and no mutation (no category created either)."""
        before = snapshot(engine)
        with pytest.raises(InvalidCategory):
            engine.record_expense("Lunch", 10, category)
        assert snapshot(engine) == before
        assert engine.wallet.categories == {}

    def test_long_description_is_recorded(self, engine):
        engine.record_expense("y" * 5000, 100, "Food")

        assert engine.wallet.category_lookup("Food").total_spent == Decimal("100")
        assert engine.current_balance() == engine.total_income() - engine.total_expense()

    def test_non_text_description_rejected(self, engine):
        before = snapshot(engine)
        with pytest.raises(InvalidDescription):
            engine.record_expense(None, 100, "Food")
        assert snapshot(engine) == before
        assert engine.wallet.categories == {}

    def test_invalid_amount_checked_before_category(self, engine):
        with pytest.raises(InvalidAmount):
            engine.record_expense("Lunch", 0, "")

    def test_overdrawn_notice_does_not_block(self, engine):
        """Test negative balance warns but the expense stays recorded."""
        outcome = engine.record_expense("Rent", 500, "Housing")

        assert outcome.succeeded is True
        assert outcome.has_notice(NoticeKind.OVERDRAWN) is True
        assert engine.current_balance() == Decimal("-500")
        assert len(engine.wallet.operations) == 1

    def test_budget_exceeded_notice(self, engine):
        engine.record_income("Salary", 1000)
        engine.set_category_budget("Food", 100)

        within = engine.record_expense("Lunch", 60, "Food")
        at_limit = engine.record_expense("Lunch", 40, "Food")
        over = engine.record_expense("Dinner", 1, "Food")

        assert within.has_notice(NoticeKind.BUDGET_EXCEEDED) is False
        # Reaching the limit exactly is not exceeding it
        assert at_limit.has_notice(NoticeKind.BUDGET_EXCEEDED) is False
        assert over.has_notice(NoticeKind.BUDGET_EXCEEDED) is True

        notice = next(n for n in over.notices if n.kind == NoticeKind.BUDGET_EXCEEDED)
        assert notice.category_name == "Food"
        assert notice.limit == Decimal("100")
        assert notice.spent == Decimal("101")
        assert engine.wallet.category_lookup("Food").total_spent == Decimal("101")

    def test_unlimited_category_never_warns(self, engine):
        engine.record_income("Salary", 10000)
        outcome = engine.record_expense("Laptop", 5000, "Electronics")
        assert outcome.has_notice(NoticeKind.BUDGET_EXCEEDED) is False


class TestCategoryBudget:
    """Tests for set_category_budget."""

    def test_set_is_overwrite_not_additive(self, engine):
        engine.record_expense("Lunch", 25, "Food")
        engine.set_category_budget("Food", 100)
        engine.set_category_budget("Food", 40)

        category = engine.wallet.category_lookup("Food")
        assert category.budget_limit == Decimal("40")
        assert category.total_spent == Decimal("25")

    def test_set_creates_category(self, engine):
        outcome = engine.set_category_budget("Travel", 250)
        assert outcome.succeeded is True
        assert engine.wallet.category_lookup("Travel").total_spent == Decimal("0")

    def test_zero_limit_is_allowed(self, engine):
        engine.set_category_budget("Food", 0)
        assert engine.wallet.category_lookup("Food").budget_limit == Decimal("0")

    def test_negative_limit_rejected(self, engine):
        with pytest.raises(InvalidAmount):
            engine.set_category_budget("Food", -1)
        assert engine.wallet.categories == {}

    def test_empty_category_rejected(self, engine):
        with pytest.raises(InvalidCategory):
            engine.set_category_budget("", 10)

    def test_limit_after_expense_is_not_retroactive(self, engine):
        """
        Test Food 50 then limit 40.

        The first expense happened while no limit was set, so it raised no
        notice, and setting the limit raises none either. Only the next
        expense against Food reports the breach.
        """
        engine.record_income("Salary", 1000)
        first = engine.record_expense("Lunch", 50, "Food")
        budget = engine.set_category_budget("Food", 40)

        assert first.has_notice(NoticeKind.BUDGET_EXCEEDED) is False
        assert budget.notices == []

        row = engine.category_statistics().get("Food")
        assert row.limit == Decimal("40")
        assert row.spent == Decimal("50")
        assert row.remaining == Decimal("-10")

        following = engine.record_expense("Snack", 5, "Food")
        assert following.has_notice(NoticeKind.BUDGET_EXCEEDED) is True


class TestStatistics:
    """Tests for totals and category reports."""

    def test_balance_identity_holds_after_every_call(self, engine):
        steps = [
            ("income", "Salary", 1000, None),
            ("expense", "Groceries", "123.45", "Food"),
            ("expense", "Taxi", "19.99", "Transport"),
            ("income", "Gift", "50.05", None),
            ("expense", "Rent", 2000, "Housing"),
            ("expense", "Lunch", "0.01", "Food"),
        ]
        for kind, description, amount, category in steps:
            if kind == "income":
                engine.record_income(description, amount)
            else:
                engine.record_expense(description, amount, category)
            assert engine.current_balance() == engine.total_income() - engine.total_expense()

    def test_category_spend_matches_operations(self, engine):
        engine.record_expense("Lunch", 10, "Food")
        engine.record_expense("Taxi", 15, "Transport")
        engine.record_expense("Dinner", "22.5", "Food")

        for name, category in engine.wallet.categories.items():
            expected = sum(
                (op.amount for op in engine.wallet.operations if op.category_name == name),
                Decimal("0"),
            )
            assert category.total_spent == expected

    def test_empty_reports_carry_notice(self, engine):
        listing = engine.list_categories()
        stats = engine.category_statistics()

        assert listing.is_empty is True
        assert listing.empty_notice.kind == NoticeKind.NO_CATEGORIES
        assert listing.empty_notice.message == "No categories yet."
        assert stats.is_empty is True
        assert stats.empty_notice.message == "No categories."

    def test_report_rows_in_insertion_order(self, engine):
        engine.set_category_budget("Transport", 100)
        engine.record_expense("Lunch", 10, "Food")
        engine.set_category_budget("Books", 30)

        names = [row.name for row in engine.list_categories().rows]
        assert names == ["Transport", "Food", "Books"]

    def test_overall_statistics(self, engine):
        engine.record_income("Salary", 1000)
        engine.record_expense("Lunch", 50, "Food")

        stats = engine.overall_statistics()
        assert stats.total_income == Decimal("1000")
        assert stats.total_expense == Decimal("50")
        assert stats.current_balance == Decimal("950")

    def test_balance_is_not_recomputed_from_history(self, wallet_storage, directory, app_settings):
        """Test the stored balance is authoritative even if history disagrees."""
        wallet_storage.save_wallet("alice", Wallet(current_balance=Decimal("42")))
        engine = LedgerEngine("alice", wallet_storage, directory, app_settings)

        assert engine.current_balance() == Decimal("42")
        assert engine.total_income() == Decimal("0")


class TestTransfer:
    """Tests for transfers between accounts."""

    def test_unknown_recipient(self, engine, wallet_storage):
        engine.record_income("Salary", 1000)
        before = snapshot(engine)

        with pytest.raises(AccountNotFound) as exc_info:
            engine.transfer("carol", "Gift", 100)

        assert exc_info.value.account_id == "carol"
        assert snapshot(engine) == before
        assert wallet_storage.wallet_exists("carol") is False

    def test_invalid_amount_checked_first(self, engine):
        with pytest.raises(InvalidAmount):
            engine.transfer("carol", "Gift", 0)

    def test_self_transfer_rejected(self, engine):
        engine.record_income("Salary", 1000)
        before = snapshot(engine)
        with pytest.raises(InvalidRecipient):
            engine.transfer("alice", "Self", 100)
        assert snapshot(engine) == before

    def test_non_text_description_rejected(self, engine, wallet_storage):
        engine.record_income("Salary", 1000)
        before = snapshot(engine)

        with pytest.raises(InvalidDescription):
            engine.transfer("bob", None, 100)

        assert snapshot(engine) == before
        assert wallet_storage.saved_logins == []

    def test_transfer_to_existing_user(self, engine, wallet_storage):
        """Test sender -100 as an expense, bob's stored wallet +100."""
        outcome = engine.transfer("bob", "Gift", 100)

        assert outcome.succeeded is True
        assert engine.current_balance() == Decimal("-100")
        sender_op = engine.wallet.operations[-1]
        assert sender_op.direction == OperationDirection.EXPENSE
        assert sender_op.description == "Gift"
        assert sender_op.category_name == "Transfer to bob"
        assert engine.wallet.category_lookup("Transfer to bob").total_spent == Decimal("100")

        bob = wallet_storage.load_wallet("bob")
        assert bob.current_balance == Decimal("100")
        assert len(bob.operations) == 1
        assert bob.operations[0].direction == OperationDirection.INCOME
        assert bob.operations[0].description == "Transfer from alice"
        assert bob.operations[0].amount == Decimal("100")

    def test_transfer_persists_sender_then_recipient(self, engine, wallet_storage):
        engine.record_income("Salary", 500)
        engine.transfer("bob", "Gift", 100)

        assert wallet_storage.saved_logins == ["alice", "bob"]
        assert wallet_storage.load_wallet("alice").current_balance == Decimal("400")

    def test_transfer_adds_to_existing_recipient_wallet(self, engine, wallet_storage, directory, app_settings):
        bob_engine = LedgerEngine("bob", wallet_storage, directory, app_settings)
        bob_engine.record_income("Salary", 300)
        bob_engine.save()

        engine.record_income("Salary", 1000)
        engine.transfer("bob", "Dinner share", 50)

        bob = wallet_storage.load_wallet("bob")
        assert bob.current_balance == Decimal("350")
        assert [op.description for op in bob.operations] == ["Salary", "Transfer from alice"]

    def test_transfer_counts_against_budget(self, engine):
        engine.record_income("Salary", 1000)
        engine.set_category_budget("Transfer to bob", 50)

        outcome = engine.transfer("bob", "Loan", 80)

        assert outcome.has_notice(NoticeKind.BUDGET_EXCEEDED) is True

    def test_transfer_overdrawn_notice(self, engine):
        outcome = engine.transfer("bob", "Loan", 80)
        assert outcome.has_notice(NoticeKind.OVERDRAWN) is True

    def test_failed_saves_become_notices(self, directory, app_settings):
        storage = InMemoryWalletStorage(fail_saves=True)
        engine = LedgerEngine("alice", storage, directory, app_settings)
        engine.record_income("Salary", 1000)

        outcome = engine.transfer("bob", "Gift", 100)

        assert outcome.succeeded is True
        save_notices = [n for n in outcome.notices if n.kind == NoticeKind.SAVE_FAILED]
        assert len(save_notices) == 2
        assert engine.current_balance() == Decimal("900")

    def test_custom_transfer_labels(self, wallet_storage, directory, app_settings):
        settings = app_settings.model_copy(update={
            "transfer_category_template": "P2P:{recipient}",
            "transfer_income_template": "From {sender} (P2P)",
        })
        engine = LedgerEngine("alice", wallet_storage, directory, settings)
        engine.transfer("bob", "Gift", 10)

        assert engine.wallet.operations[-1].category_name == "P2P:bob"
        assert wallet_storage.load_wallet("bob").operations[0].description == "From alice (P2P)"


class TestSessionPersistence:
    """Tests for saving the wallet at session end."""

    def test_save_and_reload(self, engine, wallet_storage, directory, app_settings):
        engine.record_income("Salary", 1000)
        engine.record_expense("Lunch", 50, "Food")
        engine.set_category_budget("Food", 40)
        assert engine.save() is True

        reloaded = LedgerEngine("alice", wallet_storage, directory, app_settings)
        assert reloaded.wallet == engine.wallet

    def test_nothing_persisted_without_save(self, engine, wallet_storage):
        engine.record_income("Salary", 1000)
        assert wallet_storage.wallet_exists("alice") is False
