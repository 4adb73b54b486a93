"""
Form Input Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - REQUIRED & FORMAT CHECKS (blocking):
- Required field presence
- Kind is income or expense
- Amount is a finite number greater than zero
- Date is a calendar date
These raise the matching BudgetTrackerError and nothing is stored.

STAGE 2 - SANITY CHECKS (non-blocking):
- Category outside the recommended list for the kind
- Date far in the future
These come back as warnings next to the accepted transaction.

IMPORTANT: Validation NEVER silently fixes values beyond trimming
whitespace. Anything else is reported.
"""

import datetime as dt
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from budget_tracker.config import AppSettings, get_settings
from budget_tracker.errors import (
    InvalidAmountError,
    InvalidFieldError,
    MissingFieldError,
)
from budget_tracker.models.transaction import (
    Transaction,
    TransactionKind,
    recommended_categories,
)


class ValidationIssue(BaseModel):
    """A single non-blocking issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'uncommon_category', 'future_date')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="warning",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidatedTransaction(BaseModel):
    """A transaction that passed stage 1, plus any stage 2 warnings."""

    transaction: Transaction
    warnings: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def parse_kind(value: Any) -> TransactionKind:
    """Interpret a kind value from a form."""
    if isinstance(value, TransactionKind):
        return value
    try:
        return TransactionKind(str(value).strip().lower())
    except ValueError:
        raise InvalidFieldError("kind", "must be 'income' or 'expense'")


def parse_amount(value: Any) -> Decimal:
    """
    Interpret an amount from a form.

    Accepts Decimal, int, float or a numeric string.
    Raises InvalidAmountError unless the result is finite and > 0.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(value)

    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, (int, float)):
            amount = Decimal(str(value))
        else:
            amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(value)

    if not amount.is_finite() or amount <= 0:
        raise InvalidAmountError(value)

    return amount


def parse_date(value: Any) -> dt.date:
    """Interpret a calendar date (date object or ISO string) from a form."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    try:
        return dt.date.fromisoformat(str(value).strip())
    except ValueError:
        raise InvalidFieldError("date", f"{value!r} is not a YYYY-MM-DD date")


class TransactionValidator:
    """
    Validates add-transaction form input.

    Stage 1 raises on the first blocking problem.
    Stage 2 collects warnings.
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings()

    def _check_required(
        self,
        kind: Any,
        amount: Any,
        category: Any,
        date: Any,
    ) -> None:
        """Raise MissingFieldError for the first blank required field."""
        for field, value in (
            ("kind", kind),
            ("amount", amount),
            ("category", category),
            ("date", date),
        ):
            if _is_blank(value):
                raise MissingFieldError(field)

    def _sanity_warnings(
        self,
        transaction: Transaction,
        today: dt.date,
    ) -> list[ValidationIssue]:
        """Stage 2: non-blocking checks."""
        issues = []

        if not transaction.is_recommended_category:
            issues.append(ValidationIssue(
                field="category",
                issue_type="uncommon_category",
                message=(
                    f"'{transaction.category}' is not a usual "
                    f"{transaction.kind.value} category"
                ),
            ))

        max_future_days = self._settings.future_date_tolerance_days
        if transaction.date > today + dt.timedelta(days=max_future_days):
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Date ({transaction.date.isoformat()}) is in the future",
            ))

        return issues

    def validate(
        self,
        kind: Any,
        amount: Any,
        category: Any,
        date: Any,
        note: Optional[str] = None,
        today: Optional[dt.date] = None,
    ) -> ValidatedTransaction:
        """
        Run the full validation pipeline.

        Returns:
            The new Transaction (with a fresh ID) and its warnings

        Raises:
            MissingFieldError, InvalidFieldError, InvalidAmountError
        """
        # Stage 1
        self._check_required(kind, amount, category, date)
        parsed_kind = parse_kind(kind)
        parsed_amount = parse_amount(amount)
        parsed_date = parse_date(date)

        try:
            transaction = Transaction(
                kind=parsed_kind,
                amount=parsed_amount,
                category=str(category),
                date=parsed_date,
                note=note,
            )
        except ValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error["loc"] else "transaction"
            raise InvalidFieldError(field, error["msg"])

        # Stage 2
        warnings = self._sanity_warnings(transaction, today or dt.date.today())

        return ValidatedTransaction(transaction=transaction, warnings=warnings)

    def get_user_friendly_summary(self, result: ValidatedTransaction) -> str:
        """Short text for the confirmation toast."""
        tx = result.transaction
        lines = [
            f"{tx.kind.value.capitalize()} of "
            f"{self._settings.format_amount(tx.amount)} has been recorded."
        ]
        for warning in result.warnings:
            lines.append(f"Note: {warning.message}")
        return "\n".join(lines)


def validate_registration(name: Any, email: Any, secret: Any) -> tuple[str, str, str]:
    """
    Check the registration form.

    Returns:
        (name, email, secret) with surrounding whitespace removed from
        name and email. The secret is returned untouched.
    """
    if _is_blank(name):
        raise MissingFieldError("name")
    if _is_blank(email):
        raise MissingFieldError("email")
    if secret is None or secret == "":
        raise MissingFieldError("password")
    return str(name).strip(), str(email).strip(), str(secret)


def validate_login(email: Any, secret: Any) -> tuple[str, str]:
    """Check the login form. Same normalisation as registration."""
    if _is_blank(email):
        raise MissingFieldError("email")
    if secret is None or secret == "":
        raise MissingFieldError("password")
    return str(email).strip(), str(secret)
