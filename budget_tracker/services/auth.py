"""
Credential Store

Holds registered users and the active session.

DESIGN DECISION: Secrets are stored as given and compared in constant
time. This app keeps all state on the user's own machine with no
server; a deployment that shares the data file must hash them.

Persisted layout:
    users    -> JSON array of {id, name, email, secret}
    session  -> JSON {user: {id, name, email}, started_at} or absent

The user list is re-read from the store on every operation, so a
TransactionStore on the same store sees registrations as they happen.
The file backend reads its file once, so separate processes sharing
one data file do not see each other's changes until restarted.
"""

import hmac
from typing import Optional, Union
from uuid import UUID, uuid4

from pydantic import TypeAdapter

from budget_tracker.audit import AuditLogger
from budget_tracker.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    MissingFieldError,
)
from budget_tracker.models.user import Session, StoredUser, User
from budget_tracker.services.storage import (
    KeyValueStore,
    load_document,
    save_document,
)
from budget_tracker.validation import validate_login, validate_registration


USERS_KEY = "users"
SESSION_KEY = "session"

_users_adapter = TypeAdapter(list[StoredUser])
_session_adapter = TypeAdapter(Session)


def _secrets_match(stored: str, given: str) -> bool:
    return hmac.compare_digest(stored.encode("utf-8"), given.encode("utf-8"))


def find_registered_user(
    storage: KeyValueStore,
    user_id: Union[UUID, str],
    audit_logger: Optional[AuditLogger] = None,
) -> Optional[User]:
    """
    Look up a registered user by ID in the `users` document.

    Returns None for unknown or malformed IDs.
    """
    try:
        wanted = user_id if isinstance(user_id, UUID) else UUID(str(user_id))
    except ValueError:
        return None
    users = load_document(storage, USERS_KEY, _users_adapter, audit_logger) or []
    stored = next((u for u in users if u.id == wanted), None)
    return stored.to_public() if stored else None


class CredentialStore:
    """
    Register, log in and log out users.

    At most one session is active per instance. It is restored from
    storage at construction and dropped if its user no longer exists.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._session: Optional[Session] = self._restore_session()

    def _load_users(self) -> list[StoredUser]:
        users = load_document(
            self._storage, USERS_KEY, _users_adapter, self._audit_logger
        )
        return users or []

    def _restore_session(self) -> Optional[Session]:
        """Load the persisted session, clearing it if it dangles."""
        session = load_document(
            self._storage, SESSION_KEY, _session_adapter, self._audit_logger
        )
        if session is None:
            if SESSION_KEY in self._storage:
                self._storage.delete(SESSION_KEY)
            return None

        stored = self._find_by_id(self._load_users(), session.user.id)
        if stored is None:
            self._audit_logger.log_storage_recovered(
                key=SESSION_KEY,
                error_message="session user is not registered",
            )
            self._storage.delete(SESSION_KEY)
            return None

        return Session(user=stored.to_public(), started_at=session.started_at)

    @staticmethod
    def _find_by_id(users: list[StoredUser], user_id: UUID) -> Optional[StoredUser]:
        return next((u for u in users if u.id == user_id), None)

    def _start_session(self, user: User) -> Session:
        session = Session(user=user)
        save_document(self._storage, SESSION_KEY, _session_adapter, session)
        self._session = session
        return session

    def register(self, name: str, email: str, secret: str) -> User:
        """
        Create an account and log it in.

        Raises:
            MissingFieldError: If any field is blank
            DuplicateEmailError: If the email is already registered
        """
        try:
            name, email, secret = validate_registration(name, email, secret)
        except MissingFieldError as e:
            self._audit_logger.log_registration_rejected(
                email=str(email or ""), reason=e.code
            )
            raise

        users = self._load_users()
        if any(u.email == email for u in users):
            self._audit_logger.log_registration_rejected(
                email=email, reason=DuplicateEmailError.code
            )
            raise DuplicateEmailError(email)

        taken = {u.id for u in users}
        user_id = uuid4()
        while user_id in taken:
            user_id = uuid4()

        stored = StoredUser(id=user_id, name=name, email=email, secret=secret)
        users.append(stored)
        save_document(self._storage, USERS_KEY, _users_adapter, users)

        user = stored.to_public()
        self._start_session(user)
        self._audit_logger.log_user_registered(user_id=user.id, email=email)
        return user

    def login(self, email: str, secret: str) -> User:
        """
        Log in with an email and secret.

        Raises:
            MissingFieldError: If email or secret is blank
            InvalidCredentialsError: If no user matches both exactly
        """
        try:
            email, secret = validate_login(email, secret)
        except MissingFieldError as e:
            self._audit_logger.log_login_failed(email=str(email or ""), reason=e.code)
            raise

        match = next(
            (
                u for u in self._load_users()
                if u.email == email and _secrets_match(u.secret, secret)
            ),
            None,
        )
        if match is None:
            self._audit_logger.log_login_failed(
                email=email, reason=InvalidCredentialsError.code
            )
            raise InvalidCredentialsError()

        user = match.to_public()
        self._start_session(user)
        self._audit_logger.log_login_succeeded(user_id=user.id, email=email)
        return user

    def logout(self) -> None:
        """End the session. Safe to call when nobody is logged in."""
        if self._session is not None:
            self._audit_logger.log_logged_out(user_id=self._session.user.id)
        self._session = None
        self._storage.delete(SESSION_KEY)

    def current_session(self) -> Optional[Session]:
        return self._session

    def current_user(self) -> Optional[User]:
        """The logged-in user, or None."""
        return self._session.user if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def get_user(self, user_id: Union[UUID, str]) -> Optional[User]:
        """Look up a registered user by ID."""
        return find_registered_user(self._storage, user_id, self._audit_logger)
