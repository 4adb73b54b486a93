"""Services package."""

from budget_tracker.services.auth import CredentialStore
from budget_tracker.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    StorageError,
    StorageWriteError,
)
from budget_tracker.services.transactions import TransactionStore, transactions_key

__all__ = [
    # Stores
    "CredentialStore",
    "TransactionStore",
    "transactions_key",
    # Storage services
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "StorageError",
    "StorageWriteError",
]
