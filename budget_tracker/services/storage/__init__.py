"""
Storage Services Package

Provides the abstract keyed store and its implementations.
The JSON file store is the default backend; the in-memory store
backs tests and throwaway sessions.
"""

from budget_tracker.services.storage.interface import (
    KeyValueStore,
    StorageError,
    StorageWriteError,
)
from budget_tracker.services.storage.json_file import JsonFileKeyValueStore
from budget_tracker.services.storage.memory import InMemoryKeyValueStore
from budget_tracker.services.storage.codec import load_document, save_document

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "StorageError",
    "StorageWriteError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    # Typed documents
    "load_document",
    "save_document",
]
