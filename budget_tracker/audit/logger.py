"""
Audit Logger

DESIGN DECISION: Every store mutation and every rejected attempt is logged.
This provides:
1. Traceability of what happened to a user's data
2. Debugging capability when stored data turns out to be malformed
3. A recent-activity view for the presentation layer

The audit logger:
- Writes structured records through structlog
- Keeps a bounded buffer of recent events in memory
- Never raises: a failure to log must not break a user operation
"""

import logging
import sys
from collections import deque
from typing import Optional
from uuid import UUID

import structlog

from budget_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure stdlib logging and structlog once for the process.

    JSON output for machines by default; a console renderer when
    `json_logs` is False (debug mode).
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured log output (for debugging)
    2. An in-memory ring buffer (for the activity view and tests)
    """

    def __init__(self, buffer_size: int = 200):
        """
        Initialize audit logger.

        Args:
            buffer_size: How many recent events to retain.
                         0 disables the buffer.
        """
        self._events: deque[AuditEvent] = deque(maxlen=buffer_size)
        self._logger = structlog.get_logger("budget_tracker.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event locally and remember it."""
        log_dict = event.to_log_dict()

        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Logging must never break the operation being audited
            print(f"Warning: audit logging failed: {e}", file=sys.stderr)

        self._events.append(event)

    def recent_events(
        self,
        limit: Optional[int] = None,
        user_id: Optional[UUID] = None,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events, newest first.

        Args:
            limit: Maximum number of events to return
            user_id: Only events recorded on behalf of this user
        """
        events = [
            e for e in reversed(self._events)
            if user_id is None or e.user_id == user_id
        ]
        if limit is not None:
            events = events[:limit]
        return events

    def log_user_registered(self, user_id: UUID, email: str) -> None:
        """Log a successful registration."""
        self.log(AuditEventBuilder.user_registered(user_id=user_id, email=email))

    def log_registration_rejected(self, email: str, reason: str) -> None:
        """Log a rejected registration (duplicate email, blank field)."""
        self.log(AuditEventBuilder.registration_rejected(email=email, reason=reason))

    def log_login_succeeded(self, user_id: UUID, email: str) -> None:
        self.log(AuditEventBuilder.login_succeeded(user_id=user_id, email=email))

    def log_login_failed(self, email: str, reason: str) -> None:
        self.log(AuditEventBuilder.login_failed(email=email, reason=reason))

    def log_logged_out(self, user_id: UUID) -> None:
        self.log(AuditEventBuilder.logged_out(user_id=user_id))

    def log_transaction_added(
        self,
        user_id: UUID,
        transaction_id: UUID,
        kind: str,
        amount: str,
        category: str,
    ) -> None:
        """Log a recorded transaction."""
        self.log(
            AuditEventBuilder.transaction_added(
                user_id=user_id,
                transaction_id=transaction_id,
                kind=kind,
                amount=amount,
                category=category,
            )
        )

    def log_transaction_rejected(
        self,
        user_id: UUID,
        error_code: str,
        field: Optional[str],
    ) -> None:
        """Log a transaction that failed validation."""
        self.log(
            AuditEventBuilder.transaction_rejected(
                user_id=user_id,
                error_code=error_code,
                field=field,
            )
        )

    def log_transaction_deleted(self, user_id: UUID, transaction_id: UUID) -> None:
        self.log(
            AuditEventBuilder.transaction_deleted(
                user_id=user_id,
                transaction_id=transaction_id,
            )
        )

    def log_storage_recovered(self, key: str, error_message: str) -> None:
        """Log that a malformed stored value was discarded."""
        self.log(AuditEventBuilder.storage_recovered(key=key, error_message=error_message))
