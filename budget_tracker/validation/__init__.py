"""Form validation package."""

from budget_tracker.validation.validator import (
    TransactionValidator,
    ValidatedTransaction,
    ValidationIssue,
    parse_amount,
    parse_date,
    parse_kind,
    validate_login,
    validate_registration,
)

__all__ = [
    "TransactionValidator",
    "ValidatedTransaction",
    "ValidationIssue",
    "parse_amount",
    "parse_date",
    "parse_kind",
    "validate_login",
    "validate_registration",
]
