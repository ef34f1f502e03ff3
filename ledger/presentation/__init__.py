"""Console presentation package."""

from ledger.presentation.formatter import (
    format_amount,
    format_category_list,
    format_category_statistics,
    format_notice,
    format_outcome,
    format_overall_stats,
)

__all__ = [
    "format_amount",
    "format_category_list",
    "format_category_statistics",
    "format_notice",
    "format_outcome",
    "format_overall_stats",
]
