"""Tests for console formatting."""

from decimal import Decimal

from ledger.models import (
    CategoryReport,
    CategoryStat,
    LedgerOutcome,
    Notice,
    NoticeKind,
    OverallStats,
)
from ledger.presentation import (
    format_amount,
    format_category_list,
    format_category_statistics,
    format_outcome,
    format_overall_stats,
)


def food_report(title: str) -> CategoryReport:
    return CategoryReport(
        title=title,
        rows=[CategoryStat(
            name="Food",
            limit=Decimal("40"),
            spent=Decimal("50"),
            remaining=Decimal("-10"),
        )],
    )


class TestFormatter:

    def test_format_amount(self):
        assert format_amount(Decimal("1234.5")) == "1,234.50"
        assert format_amount(Decimal("-10")) == "-10.00"

    def test_success_with_notices(self):
        outcome = LedgerOutcome.success(
            "Expense added.",
            notices=[
                Notice(kind=NoticeKind.BUDGET_EXCEEDED, message="Budget limit exceeded for category: Food"),
                Notice(kind=NoticeKind.OVERDRAWN, message="Your balance is negative."),
            ],
        )
        text = format_outcome(outcome)
        assert text.splitlines()[0] == "✅ Expense added."
        assert "Budget limit exceeded for category: Food" in text
        assert len(text.splitlines()) == 3

    def test_failure(self):
        text = format_outcome(LedgerOutcome.failure("Income amount must be positive"))
        assert text == "❌ Error: Income amount must be positive"

    def test_category_list(self):
        text = format_category_list(food_report("Categories"))
        assert text.splitlines() == [
            "Categories:",
            "- Food | Limit: 40.00 | Spent: 50.00 | Remaining: -10.00",
        ]

    def test_category_statistics_marks_over_budget(self):
        text = format_category_statistics(food_report("Category statistics"))
        assert "Category 'Food': Limit=40.00, Spent=50.00, Remaining=-10.00" in text
        assert "(over budget)" in text

    def test_empty_reports_show_message(self):
        report = CategoryReport(
            title="Categories",
            empty_notice=Notice(kind=NoticeKind.NO_CATEGORIES, message="No categories yet."),
        )
        assert format_category_list(report) == "No categories yet."
        assert format_category_statistics(report) == "No categories yet."

    def test_overall_stats(self):
        text = format_overall_stats(OverallStats(
            total_income=Decimal("1000"),
            total_expense=Decimal("50"),
            current_balance=Decimal("950"),
        ))
        assert text.splitlines() == [
            "Total income: 1,000.00",
            "Total expenses: 50.00",
            "Current balance: 950.00",
        ]
