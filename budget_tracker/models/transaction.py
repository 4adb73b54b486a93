"""
Transaction Models for Budget Tracker

A transaction is one income or expense entry recorded by a user.

DESIGN DECISION: The amount is always stored as a positive Decimal.
Whether it adds to or subtracts from the balance is decided by `kind`,
never by the sign of the number. This keeps every aggregate a plain sum.

Transactions are immutable once created. An "edit" is a delete
followed by an add.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMS & CATEGORY LISTS
# =============================================================================

class TransactionKind(str, Enum):
    """Transaction polarity."""
    INCOME = "income"
    EXPENSE = "expense"


# Recommended (not enforced) category labels shown in the add form.
INCOME_CATEGORIES: tuple[str, ...] = (
    "Salary",
    "Freelance",
    "Business",
    "Investment",
    "Gift",
    "Other Income",
)

EXPENSE_CATEGORIES: tuple[str, ...] = (
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Education",
    "Travel",
    "Other Expense",
)


def month_key_for(day: dt.date) -> str:
    """YYYY-MM for a date, zero-padded for years before 1000."""
    return f"{day.year:04d}-{day.month:02d}"


def recommended_categories(kind: TransactionKind) -> tuple[str, ...]:
    """Get the suggested category labels for a transaction kind."""
    if kind == TransactionKind.INCOME:
        return INCOME_CATEGORIES
    return EXPENSE_CATEGORIES


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A single recorded income or expense.

    Owned by exactly one user. The owning user is implied by the
    storage key the collection lives under, so it is not a field here.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )
    kind: TransactionKind = Field(
        ...,
        description="Income or expense"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Strictly positive amount, currency-agnostic"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Free-form category label"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the transaction"
    )
    note: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Optional free-text note"
    )

    @field_validator('note')
    @classmethod
    def blank_note_is_none(cls, v: Optional[str]) -> Optional[str]:
        """An empty note is stored as no note at all."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by kind (expenses negative)."""
        if self.kind == TransactionKind.INCOME:
            return self.amount
        return -self.amount

    @property
    def month_key(self) -> str:
        """Calendar year-month of the transaction as YYYY-MM."""
        return month_key_for(self.date)

    @property
    def is_recommended_category(self) -> bool:
        return self.category in recommended_categories(self.kind)
