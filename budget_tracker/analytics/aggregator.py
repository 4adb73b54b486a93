"""
Transaction Aggregation

DESIGN DECISION: Aggregation is PURE and DETERMINISTIC.
Every function takes a sequence of transactions and returns fresh
result rows. Nothing is cached or stored; the dashboard simply
recomputes on every render.

Ordering guarantees:
- Groups are created in first-encountered order
- Python's sort is stable, so equal totals keep that order
- Empty input gives empty rows (no synthetic zero rows) and an
  all-zero summary
"""

import datetime as dt
from decimal import Decimal
from typing import Iterable, Optional

from budget_tracker.models.analytics import (
    CategoryTotals,
    ExpenseShare,
    MonthlyTotals,
    SummaryStatistics,
)
from budget_tracker.models.transaction import Transaction, TransactionKind, month_key_for


ZERO = Decimal("0")


def _sum(transactions: Iterable[Transaction], kind: TransactionKind) -> Decimal:
    return sum((t.amount for t in transactions if t.kind == kind), ZERO)


def month_label(month_key: str) -> str:
    """Turn '2024-01' into 'Jan 2024'."""
    year, month = month_key.split("-")
    return dt.date(int(year), int(month), 1).strftime("%b %Y")


def summarize(
    transactions: Iterable[Transaction],
    today: Optional[dt.date] = None,
) -> SummaryStatistics:
    """
    Compute the dashboard headline numbers.

    Args:
        transactions: Any iterable of transactions
        today: Evaluation date for the "this month" figures.
               Defaults to the current local date.
    """
    transactions = list(transactions)
    today = today or dt.date.today()
    month_key = month_key_for(today)

    total_income = _sum(transactions, TransactionKind.INCOME)
    total_expenses = _sum(transactions, TransactionKind.EXPENSE)

    this_month = [t for t in transactions if t.month_key == month_key]

    return SummaryStatistics(
        total_income=total_income,
        total_expenses=total_expenses,
        balance=total_income - total_expenses,
        month_key=month_key,
        month_income=_sum(this_month, TransactionKind.INCOME),
        month_expenses=_sum(this_month, TransactionKind.EXPENSE),
        transaction_count=len(transactions),
    )


def monthly_series(transactions: Iterable[Transaction]) -> list[MonthlyTotals]:
    """
    Income, expenses and net per calendar month.

    Rows are sorted ascending by YYYY-MM key, which is chronological.
    """
    groups: dict[str, dict[str, Decimal]] = {}

    for t in transactions:
        totals = groups.setdefault(t.month_key, {"income": ZERO, "expenses": ZERO})
        if t.kind == TransactionKind.INCOME:
            totals["income"] += t.amount
        else:
            totals["expenses"] += t.amount

    rows = [
        MonthlyTotals(
            month=key,
            label=month_label(key),
            income=totals["income"],
            expenses=totals["expenses"],
            net=totals["income"] - totals["expenses"],
        )
        for key, totals in groups.items()
    ]
    return sorted(rows, key=lambda row: row.month)


def category_breakdown(transactions: Iterable[Transaction]) -> list[CategoryTotals]:
    """
    Income, expenses and combined total per category, whatever the kind.

    Rows are sorted descending by total.
    """
    groups: dict[str, dict[str, Decimal]] = {}

    for t in transactions:
        totals = groups.setdefault(t.category, {"income": ZERO, "expenses": ZERO})
        if t.kind == TransactionKind.INCOME:
            totals["income"] += t.amount
        else:
            totals["expenses"] += t.amount

    rows = [
        CategoryTotals(
            category=category,
            income=totals["income"],
            expenses=totals["expenses"],
            total=totals["income"] + totals["expenses"],
        )
        for category, totals in groups.items()
    ]
    return sorted(rows, key=lambda row: row.total, reverse=True)


def expense_distribution(transactions: Iterable[Transaction]) -> list[ExpenseShare]:
    """
    Expense amount per category with its share of all expenses.

    Rows are sorted descending by amount. Percentages are rounded to
    two decimals for display and may not add up to exactly 100.
    """
    groups: dict[str, Decimal] = {}

    for t in transactions:
        if t.kind != TransactionKind.EXPENSE:
            continue
        groups[t.category] = groups.get(t.category, ZERO) + t.amount

    total = sum(groups.values(), ZERO)

    rows = [
        ExpenseShare(
            category=category,
            amount=amount,
            percentage=round(float(amount / total * 100), 2) if total else 0.0,
        )
        for category, amount in groups.items()
    ]
    # reverse=True keeps stability for equal keys
    return sorted(rows, key=lambda row: row.amount, reverse=True)


def amount_text(amount: Decimal) -> str:
    """Plain decimal text of an amount without trailing zeros ('50.5', '1000')."""
    return format(amount.normalize(), "f")


def filter_transactions(
    transactions: Iterable[Transaction],
    term: Optional[str],
) -> list[Transaction]:
    """
    Search transactions the way the history view does.

    A transaction matches when the term is a case-insensitive substring
    of its category or note, or a substring of its amount text.
    A blank term matches everything. Order is preserved.
    """
    transactions = list(transactions)
    if term is None or not term.strip():
        return transactions

    needle = term.strip().lower()
    return [
        t for t in transactions
        if needle in t.category.lower()
        or (t.note is not None and needle in t.note.lower())
        or needle in amount_text(t.amount)
    ]
