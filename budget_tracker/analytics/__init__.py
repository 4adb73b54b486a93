"""Transaction aggregation package."""

from budget_tracker.analytics.aggregator import (
    amount_text,
    category_breakdown,
    expense_distribution,
    filter_transactions,
    month_label,
    monthly_series,
    summarize,
)

__all__ = [
    "amount_text",
    "category_breakdown",
    "expense_distribution",
    "filter_transactions",
    "month_label",
    "monthly_series",
    "summarize",
]
