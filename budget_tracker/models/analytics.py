"""
Aggregate Result Models

Chart-ready rows produced by `budget_tracker.analytics`.
These are plain value objects; the aggregator builds them and the
presentation layer reads them. Nothing persists them.
"""

from decimal import Decimal

from pydantic import BaseModel, Field


ZERO = Decimal("0")


class SummaryStatistics(BaseModel):
    """Headline numbers for the dashboard."""

    total_income: Decimal = ZERO
    total_expenses: Decimal = ZERO
    balance: Decimal = ZERO

    # Calendar month of the evaluation date
    month_key: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}$",
        description="The month the month_* fields cover (YYYY-MM)"
    )
    month_income: Decimal = ZERO
    month_expenses: Decimal = ZERO

    transaction_count: int = Field(default=0, ge=0)

    @property
    def month_net(self) -> Decimal:
        return self.month_income - self.month_expenses

    @property
    def is_positive(self) -> bool:
        """True when the overall balance is not negative."""
        return self.balance >= 0


class MonthlyTotals(BaseModel):
    """One row of the monthly trend series."""

    month: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}$",
        description="Year-month key (YYYY-MM)"
    )
    label: str = Field(
        ...,
        description="Display label, e.g. 'Jan 2024'"
    )
    income: Decimal = ZERO
    expenses: Decimal = ZERO
    net: Decimal = ZERO


class CategoryTotals(BaseModel):
    """One row of the kind-agnostic category breakdown."""

    category: str
    income: Decimal = ZERO
    expenses: Decimal = ZERO
    total: Decimal = ZERO


class ExpenseShare(BaseModel):
    """One slice of the expense distribution."""

    category: str
    amount: Decimal = ZERO
    percentage: float = Field(
        default=0.0,
        ge=0.0,
        le=100.0,
        description="Share of all expenses, 0-100"
    )
