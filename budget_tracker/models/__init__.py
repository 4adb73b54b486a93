"""
Data Models Package

This package contains all Pydantic models used in Budget Tracker.
All data flowing through the system must conform to these schemas.
"""

from budget_tracker.models.analytics import (
    CategoryTotals,
    ExpenseShare,
    MonthlyTotals,
    SummaryStatistics,
)
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
    month_key_for,
    recommended_categories,
)
from budget_tracker.models.user import Session, StoredUser, User

__all__ = [
    # Transaction models
    "EXPENSE_CATEGORIES",
    "INCOME_CATEGORIES",
    "Transaction",
    "TransactionKind",
    "month_key_for",
    "recommended_categories",
    # User models
    "Session",
    "StoredUser",
    "User",
    # Aggregate models
    "CategoryTotals",
    "ExpenseShare",
    "MonthlyTotals",
    "SummaryStatistics",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
