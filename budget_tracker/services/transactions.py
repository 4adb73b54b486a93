"""
Transaction Store

Holds each user's transactions under its own storage key:
    transactions:<userId>  -> JSON array, most recent first

Every operation takes the acting user explicitly (a `User` or the
`Session` holding one). There is no implicit "current user" here;
the caller gets that from the CredentialStore. The user must be
registered in the same store, so no collection is written for an
unknown owner.

Every mutation is a read-modify-write of the whole collection.
Rejected input leaves the stored collection untouched.
"""

import datetime as dt
from typing import Any, Optional, Union
from uuid import UUID, uuid4

from pydantic import TypeAdapter

from budget_tracker.analytics import filter_transactions
from budget_tracker.audit import AuditLogger
from budget_tracker.errors import BudgetTrackerError, SessionRequiredError
from budget_tracker.models.transaction import Transaction
from budget_tracker.models.user import Session, User
from budget_tracker.services.auth import find_registered_user
from budget_tracker.services.storage import (
    KeyValueStore,
    load_document,
    save_document,
)
from budget_tracker.validation import TransactionValidator, ValidatedTransaction


_transactions_adapter = TypeAdapter(list[Transaction])

Actor = Union[User, Session, None]


def transactions_key(user_id: UUID) -> str:
    """Storage key for one user's transactions."""
    return f"transactions:{user_id}"


def _as_uuid(value: Union[UUID, str]) -> Optional[UUID]:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


class TransactionStore:
    """
    Add, delete, list and search a user's transactions.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._validator = validator or TransactionValidator()
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def validator(self) -> TransactionValidator:
        return self._validator

    def _require_user(self, actor: Actor) -> User:
        """The acting user, who must be registered in the same store."""
        if isinstance(actor, Session):
            actor = actor.user
        if not isinstance(actor, User):
            raise SessionRequiredError()
        if find_registered_user(self._storage, actor.id, self._audit_logger) is None:
            raise SessionRequiredError()
        return actor

    def _load(self, user: User) -> list[Transaction]:
        transactions = load_document(
            self._storage,
            transactions_key(user.id),
            _transactions_adapter,
            self._audit_logger,
        )
        return transactions or []

    def _save(self, user: User, transactions: list[Transaction]) -> None:
        save_document(
            self._storage,
            transactions_key(user.id),
            _transactions_adapter,
            transactions,
        )

    def record(
        self,
        actor: Actor,
        kind: Any,
        amount: Any,
        category: Any,
        date: Any,
        note: Optional[str] = None,
        today: Optional[dt.date] = None,
    ) -> ValidatedTransaction:
        """
        Validate and store a new transaction, keeping the warnings.

        Raises:
            SessionRequiredError: If no registered user is given
            MissingFieldError, InvalidFieldError, InvalidAmountError:
                If the input is rejected (nothing is stored)
        """
        user = self._require_user(actor)

        try:
            result = self._validator.validate(
                kind=kind,
                amount=amount,
                category=category,
                date=date,
                note=note,
                today=today,
            )
        except BudgetTrackerError as e:
            self._audit_logger.log_transaction_rejected(
                user_id=user.id,
                error_code=e.code,
                field=e.field,
            )
            raise

        transactions = self._load(user)
        transaction = result.transaction
        taken = {t.id for t in transactions}
        while transaction.id in taken:
            transaction = transaction.model_copy(update={"id": uuid4()})

        self._save(user, [transaction] + transactions)

        self._audit_logger.log_transaction_added(
            user_id=user.id,
            transaction_id=transaction.id,
            kind=transaction.kind.value,
            amount=str(transaction.amount),
            category=transaction.category,
        )
        return result.model_copy(update={"transaction": transaction})

    def add(
        self,
        actor: Actor,
        kind: Any,
        amount: Any,
        category: Any,
        date: Any,
        note: Optional[str] = None,
    ) -> Transaction:
        """
        Validate and store a new transaction at the front of the list.

        Returns:
            The stored transaction with its assigned ID
        """
        return self.record(actor, kind, amount, category, date, note).transaction

    def delete(self, actor: Actor, transaction_id: Union[UUID, str]) -> None:
        """
        Remove a transaction by ID.

        An unknown ID is a no-op, so deleting twice is safe.
        """
        user = self._require_user(actor)
        wanted = _as_uuid(transaction_id)
        if wanted is None:
            return

        transactions = self._load(user)
        remaining = [t for t in transactions if t.id != wanted]
        if len(remaining) == len(transactions):
            return

        self._save(user, remaining)
        self._audit_logger.log_transaction_deleted(
            user_id=user.id,
            transaction_id=wanted,
        )

    def get(self, actor: Actor, transaction_id: Union[UUID, str]) -> Optional[Transaction]:
        user = self._require_user(actor)
        wanted = _as_uuid(transaction_id)
        return next((t for t in self._load(user) if t.id == wanted), None)

    def search(self, actor: Actor, term: Optional[str]) -> list[Transaction]:
        """Transactions whose category, note or amount contains `term`."""
        return filter_transactions(self.list(actor), term)

    # Defined last: the name shadows the builtin for the rest of the class body.
    def list(self, actor: Actor) -> list[Transaction]:
        """All of the user's transactions, most recent first."""
        user = self._require_user(actor)
        return self._load(user)
