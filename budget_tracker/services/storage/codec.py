"""
Typed JSON documents on top of a KeyValueStore.

DESIGN DECISION: Stored values are validated on load and fail closed.
A value that is not valid JSON, or does not match the expected schema,
is treated as absent. The problem is logged, never raised, so a
corrupted entry cannot lock a user out of the app.
"""

from typing import Optional, TypeVar

from pydantic import TypeAdapter, ValidationError

from budget_tracker.audit import AuditLogger
from budget_tracker.services.storage.interface import KeyValueStore


T = TypeVar("T")


def load_document(
    storage: KeyValueStore,
    key: str,
    adapter: TypeAdapter[T],
    audit_logger: Optional[AuditLogger] = None,
) -> Optional[T]:
    """
    Read and validate the document stored under `key`.

    Returns:
        The parsed value, or None if the key is absent or unreadable
    """
    raw = storage.get(key)
    if raw is None:
        return None

    try:
        return adapter.validate_json(raw)
    except ValidationError as e:
        if audit_logger:
            audit_logger.log_storage_recovered(
                key=key,
                error_message=f"{e.error_count()} validation error(s)",
            )
        return None


def save_document(
    storage: KeyValueStore,
    key: str,
    adapter: TypeAdapter[T],
    value: T,
) -> None:
    """Serialize `value` as JSON and overwrite `key`."""
    storage.set(key, adapter.dump_json(value).decode("utf-8"))
