"""
Main Orchestrator for Budget Tracker

This module ties together all the components and defines the
end-to-end flow the dashboard runs on every render:

    current user -> that user's transactions -> every aggregate

DESIGN DECISION: The orchestrator owns wiring, not rules.
Validation lives in `validation`, persistence in the stores,
arithmetic in `analytics`. This module only decides which concrete
storage to use and passes the same AuditLogger to everyone.
"""

import datetime as dt
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, Field

from budget_tracker.analytics import (
    category_breakdown,
    expense_distribution,
    filter_transactions,
    monthly_series,
    summarize,
)
from budget_tracker.audit import AuditLogger, configure_logging
from budget_tracker.config import AppSettings, get_settings
from budget_tracker.models.analytics import (
    CategoryTotals,
    ExpenseShare,
    MonthlyTotals,
    SummaryStatistics,
)
from budget_tracker.models.transaction import Transaction
from budget_tracker.models.user import User
from budget_tracker.services import CredentialStore, TransactionStore
from budget_tracker.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
)
from budget_tracker.validation import TransactionValidator


class DashboardData(BaseModel):
    """Everything the dashboard shows for one user."""

    user: User
    transactions: list[Transaction] = Field(
        default_factory=list,
        description="Stored order, filtered by the search term if one was given"
    )
    search_term: Optional[str] = None
    summary: SummaryStatistics
    monthly: list[MonthlyTotals] = Field(default_factory=list)
    categories: list[CategoryTotals] = Field(default_factory=list)
    expense_shares: list[ExpenseShare] = Field(default_factory=list)
    total_transaction_count: int = Field(default=0, ge=0)

    @property
    def is_empty(self) -> bool:
        """True when the user has not recorded anything yet."""
        return self.total_transaction_count == 0

    def monthly_chart_rows(self) -> list[dict]:
        """
        Monthly rows keyed by YYYY-MM for charting.

        Charts order text axes lexically, which for YYYY-MM keys is
        chronological. Display labels like "Jan 2024" are not.
        """
        return [
            {
                "Month": row.month,
                "Income": float(row.income),
                "Expenses": float(row.expenses),
                "Net": float(row.net),
            }
            for row in self.monthly
        ]


class DashboardFlow:
    """
    Orchestrates the dashboard read path.

    Flow:
    1. Load the user's transactions (explicit user, no global)
    2. Compute summary and chart groupings over ALL of them
    3. Apply the optional search term to the list only
    """

    def __init__(self, transaction_store: TransactionStore):
        self._transactions = transaction_store

    def load(
        self,
        user: User,
        today: Optional[dt.date] = None,
        search: Optional[str] = None,
    ) -> DashboardData:
        transactions = self._transactions.list(user)

        return DashboardData(
            user=user,
            transactions=filter_transactions(transactions, search),
            search_term=search.strip() if search and search.strip() else None,
            summary=summarize(transactions, today=today),
            monthly=monthly_series(transactions),
            categories=category_breakdown(transactions),
            expense_shares=expense_distribution(transactions),
            total_transaction_count=len(transactions),
        )


@dataclass
class AppComponents:
    """The wired-up application, as handed to the presentation layer."""

    settings: AppSettings
    storage: KeyValueStore
    audit_logger: AuditLogger
    credentials: CredentialStore
    transactions: TransactionStore
    dashboard: DashboardFlow


def create_storage(settings: AppSettings) -> KeyValueStore:
    """Build the keyed store selected by settings."""
    if settings.storage_backend == "memory":
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(settings.data_file)


def create_app_components(
    settings: Optional[AppSettings] = None,
    storage: Optional[KeyValueStore] = None,
    configure_logs: bool = True,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use. Defaults to get_settings().
        storage: Pre-built store (tests pass an InMemoryKeyValueStore).
                 Defaults to the backend named in settings.
        configure_logs: Configure structlog from settings.

    Returns:
        AppComponents sharing one storage and one audit logger
    """
    settings = settings or get_settings()

    if configure_logs:
        configure_logging(
            level=settings.log_level,
            json_logs=not settings.debug_mode,
        )

    audit_logger = AuditLogger(buffer_size=settings.audit_buffer_size)
    storage = storage if storage is not None else create_storage(settings)

    credentials = CredentialStore(storage, audit_logger=audit_logger)
    transactions = TransactionStore(
        storage,
        validator=TransactionValidator(settings),
        audit_logger=audit_logger,
    )

    return AppComponents(
        settings=settings,
        storage=storage,
        audit_logger=audit_logger,
        credentials=credentials,
        transactions=transactions,
        dashboard=DashboardFlow(transactions),
    )
