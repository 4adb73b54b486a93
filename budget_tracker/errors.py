"""
Domain Errors

Every error a user can trigger through the forms lives here.
They are all recoverable: the presentation layer shows `message`
and the user corrects the input. None of them is a fault.

Storage failures are NOT in this module. See
`budget_tracker.services.storage.interface.StorageError`.
"""

from typing import Optional


class BudgetTrackerError(Exception):
    """Base exception for recoverable, user-facing errors."""

    code: str = "budget_tracker_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class DuplicateEmailError(BudgetTrackerError):
    """Registration attempted with an email that is already taken."""

    code = "duplicate_email"

    def __init__(self, email: str):
        super().__init__(
            f"An account with email {email} already exists",
            field="email",
        )
        self.email = email


class InvalidCredentialsError(BudgetTrackerError):
    """No stored user matches the email/secret pair."""

    code = "invalid_credentials"

    def __init__(self):
        super().__init__("Invalid email or password")


class InvalidAmountError(BudgetTrackerError):
    """Amount is not a finite number greater than zero."""

    code = "invalid_amount"

    def __init__(self, amount: object):
        super().__init__(
            f"Please enter a valid amount (got {amount!r})",
            field="amount",
        )
        self.amount = amount


class MissingFieldError(BudgetTrackerError):
    """A required form field was left blank."""

    code = "missing_field"

    def __init__(self, field: str):
        super().__init__(f"Please fill in all required fields ({field})", field=field)


class InvalidFieldError(BudgetTrackerError):
    """A field is present but cannot be interpreted (bad kind, bad date)."""

    code = "invalid_field"

    def __init__(self, field: str, reason: str):
        super().__init__(f"Invalid {field}: {reason}", field=field)
        self.reason = reason


class SessionRequiredError(BudgetTrackerError):
    """A per-user operation was called without an authenticated user."""

    code = "session_required"

    def __init__(self):
        super().__init__("You need to sign in first")
