"""
Tests for Budget Tracker models

Test strategy:
1. Unit tests for individual components (models, validators, aggregates)
2. Store tests run against the in-memory key/value store
3. No real files outside pytest's tmp_path
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from budget_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from budget_tracker.models.transaction import (
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    Transaction,
    TransactionKind,
    recommended_categories,
)
from budget_tracker.models.user import Session, StoredUser, User


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        tx = Transaction(
            kind=TransactionKind.INCOME,
            amount=Decimal("1000"),
            category="Salary",
            date=date(2024, 1, 15),
        )
        assert tx.kind == TransactionKind.INCOME
        assert tx.amount == Decimal("1000")
        assert tx.note is None
        assert tx.id is not None

    def test_transaction_ids_are_unique(self):
        """Two transactions created back to back get different IDs."""
        a = Transaction(kind="expense", amount=1, category="Food & Dining", date=date(2024, 1, 1))
        b = Transaction(kind="expense", amount=1, category="Food & Dining", date=date(2024, 1, 1))
        assert a.id != b.id

    def test_transaction_rejects_zero_amount(self):
        """Test that zero amounts are rejected."""
        with pytest.raises(ValidationError):
            Transaction(
                kind=TransactionKind.EXPENSE,
                amount=Decimal("0"),
                category="Shopping",
                date=date(2024, 1, 1),
            )

    def test_transaction_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            Transaction(
                kind=TransactionKind.EXPENSE,
                amount=Decimal("-5"),
                category="Shopping",
                date=date(2024, 1, 1),
            )

    def test_transaction_strips_whitespace(self):
        """Test that whitespace is stripped from category."""
        tx = Transaction(
            kind=TransactionKind.EXPENSE,
            amount=Decimal("10"),
            category="  Travel  ",
            date=date(2024, 1, 1),
        )
        assert tx.category == "Travel"

    def test_blank_note_becomes_none(self):
        """Test that an empty note is not stored."""
        tx = Transaction(
            kind=TransactionKind.EXPENSE,
            amount=Decimal("10"),
            category="Travel",
            date=date(2024, 1, 1),
            note="   ",
        )
        assert tx.note is None

    def test_transaction_is_immutable(self):
        """Transactions are never mutated in place."""
        tx = Transaction(
            kind=TransactionKind.EXPENSE,
            amount=Decimal("10"),
            category="Travel",
            date=date(2024, 1, 1),
        )
        with pytest.raises(ValidationError):
            tx.amount = Decimal("20")

    def test_signed_amount(self):
        """Test sign is derived from kind."""
        income = Transaction(kind="income", amount=5, category="Gift", date=date(2024, 1, 1))
        expense = Transaction(kind="expense", amount=5, category="Travel", date=date(2024, 1, 1))
        assert income.signed_amount == Decimal("5")
        assert expense.signed_amount == Decimal("-5")

    def test_month_key(self):
        """Test the YYYY-MM key."""
        tx = Transaction(kind="expense", amount=5, category="Travel", date=date(2024, 3, 9))
        assert tx.month_key == "2024-03"

    def test_json_round_trip_keeps_decimal_precision(self):
        """Amounts are serialized as strings and read back exactly."""
        tx = Transaction(kind="expense", amount=Decimal("0.10"), category="Travel", date=date(2024, 1, 1))
        restored = Transaction.model_validate_json(tx.model_dump_json())
        assert restored == tx
        assert restored.amount == Decimal("0.10")


class TestCategories:
    """Tests for the recommended category lists."""

    def test_income_categories(self):
        """Test income list contents."""
        assert recommended_categories(TransactionKind.INCOME) == INCOME_CATEGORIES
        assert "Salary" in INCOME_CATEGORIES
        assert "Other Income" in INCOME_CATEGORIES

    def test_expense_categories(self):
        """Test expense list contents."""
        assert recommended_categories(TransactionKind.EXPENSE) == EXPENSE_CATEGORIES
        assert "Food & Dining" in EXPENSE_CATEGORIES
        assert len(EXPENSE_CATEGORIES) == 9

    def test_is_recommended_category(self):
        """Category membership depends on kind."""
        tx = Transaction(kind="income", amount=1, category="Food & Dining", date=date(2024, 1, 1))
        assert tx.is_recommended_category is False

    def test_kind_values(self):
        """Test kind string values."""
        assert TransactionKind.INCOME.value == "income"
        assert TransactionKind("expense") is TransactionKind.EXPENSE


class TestUserModels:
    """Tests for user and session models."""

    def test_stored_user_to_public_strips_secret(self):
        """Test that the public view has no secret."""
        stored = StoredUser(name="Ada", email="ada@example.com", secret="hunter2")
        public = stored.to_public()
        assert isinstance(public, User)
        assert public.id == stored.id
        assert "secret" not in public.model_dump()

    def test_session_wraps_user(self):
        """Test Session creation."""
        user = User(name="Ada", email="ada@example.com")
        session = Session(user=user)
        assert session.user == user
        assert session.started_at.tzinfo is not None

    def test_user_requires_email(self):
        """Test that email cannot be empty."""
        with pytest.raises(ValidationError):
            User(name="Ada", email="")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            description="Test user registered",
        )
        assert event.event_type == AuditEventType.USER_REGISTERED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        user_id = uuid4()
        event = AuditEventBuilder.transaction_added(
            user_id=user_id,
            transaction_id=uuid4(),
            kind="expense",
            amount="200",
            category="Food & Dining",
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "transaction_added"
        assert log_dict["user_id"] == str(user_id)
        assert log_dict["details"]["category"] == "Food & Dining"

    def test_login_failed_is_not_an_error(self):
        """Rejected input is ordinary behaviour, not a fault."""
        event = AuditEventBuilder.login_failed(email="a@b.c", reason="invalid_credentials")
        assert event.severity == AuditSeverity.INFO
        assert event.is_user_action is True

    def test_storage_recovered_is_warning(self):
        """Test AuditEventBuilder.storage_recovered."""
        event = AuditEventBuilder.storage_recovered(key="users", error_message="bad json")
        assert event.event_type == AuditEventType.STORAGE_RECOVERED
        assert event.severity == AuditSeverity.WARNING
        assert event.details["key"] == "users"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
