"""
Console Formatting

Turns engine outcomes into the text the terminal shows. Nothing here
touches a wallet; it only reads the structured values it is given.
"""

from decimal import Decimal

from ledger.models.outcome import (
    CategoryReport,
    LedgerOutcome,
    Notice,
    OverallStats,
)


def format_amount(value: Decimal) -> str:
    """Two decimal places, thousands separated."""
    return f"{value:,.2f}"


def format_notice(notice: Notice) -> str:
    return f"⚠️ {notice.message}"


def format_outcome(outcome: LedgerOutcome) -> str:
    """
    Render a command result.

    Success or failure comes first, then one line per notice.
    """
    if outcome.succeeded:
        lines = [f"✅ {outcome.message}"]
    else:
        lines = [f"❌ Error: {outcome.message}"]

    for notice in outcome.notices:
        lines.append(format_notice(notice))

    return "\n".join(lines)


def format_category_list(report: CategoryReport) -> str:
    if report.is_empty:
        return report.empty_notice.message if report.empty_notice else ""

    lines = [f"{report.title}:"]
    for row in report.rows:
        lines.append(
            f"- {row.name} | Limit: {format_amount(row.limit)}"
            f" | Spent: {format_amount(row.spent)}"
            f" | Remaining: {format_amount(row.remaining)}"
        )
    return "\n".join(lines)


def format_category_statistics(report: CategoryReport) -> str:
    if report.is_empty:
        return report.empty_notice.message if report.empty_notice else ""

    lines = [f"{report.title}:"]
    for row in report.rows:
        line = (
            f"Category '{row.name}': Limit={format_amount(row.limit)},"
            f" Spent={format_amount(row.spent)},"
            f" Remaining={format_amount(row.remaining)}"
        )
        if row.is_over_budget:
            line += "  (over budget)"
        lines.append(line)
    return "\n".join(lines)


def format_overall_stats(stats: OverallStats) -> str:
    return "\n".join([
        f"Total income: {format_amount(stats.total_income)}",
        f"Total expenses: {format_amount(stats.total_expense)}",
        f"Current balance: {format_amount(stats.current_balance)}",
    ])
