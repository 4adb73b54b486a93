"""Tests for the CredentialStore."""

import json

import pytest

from budget_tracker.audit import AuditLogger
from budget_tracker.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    MissingFieldError,
)
from budget_tracker.models.audit import AuditEventType
from budget_tracker.services.auth import SESSION_KEY, USERS_KEY, CredentialStore
from budget_tracker.services.storage import InMemoryKeyValueStore


@pytest.fixture
def storage():
    return InMemoryKeyValueStore()


@pytest.fixture
def audit():
    return AuditLogger()


@pytest.fixture
def store(storage, audit):
    return CredentialStore(storage, audit_logger=audit)


class TestRegister:
    """Tests for CredentialStore.register."""

    def test_register_creates_user_and_session(self, store, storage):
        """Test registration logs the new user in."""
        user = store.register("Ada", "ada@example.com", "s3cret")

        assert user.name == "Ada"
        assert store.current_user() == user

        users = json.loads(storage.get(USERS_KEY))
        assert users == [{
            "id": str(user.id),
            "name": "Ada",
            "email": "ada@example.com",
            "secret": "s3cret",
        }]

    def test_session_is_persisted_without_secret(self, store, storage):
        """Test the session document never contains the secret."""
        store.register("Ada", "ada@example.com", "s3cret")
        session = json.loads(storage.get(SESSION_KEY))
        assert session["user"]["email"] == "ada@example.com"
        assert "secret" not in session["user"]
        assert "s3cret" not in storage.get(SESSION_KEY)

    def test_duplicate_email_rejected(self, store, storage):
        """Test registering an existing email fails and keeps the original."""
        original = store.register("Ada", "ada@example.com", "first")
        before = storage.get(USERS_KEY)

        with pytest.raises(DuplicateEmailError) as exc_info:
            store.register("Impostor", "ada@example.com", "second")

        assert exc_info.value.code == "duplicate_email"
        assert storage.get(USERS_KEY) == before
        assert store.login("ada@example.com", "first").id == original.id

    def test_email_is_case_sensitive(self, store):
        """Test emails differing only by case are distinct accounts."""
        a = store.register("Ada", "ada@example.com", "pw")
        b = store.register("Ada", "Ada@example.com", "pw")
        assert a.id != b.id

    def test_blank_fields_rejected(self, store, storage):
        """Test MissingFieldError and nothing stored."""
        with pytest.raises(MissingFieldError):
            store.register("", "ada@example.com", "pw")
        assert storage.get(USERS_KEY) is None
        assert store.current_user() is None

    def test_register_is_audited(self, store, audit):
        """Test the audit trail."""
        user = store.register("Ada", "ada@example.com", "pw")
        events = audit.recent_events(user_id=user.id)
        assert events[0].event_type == AuditEventType.USER_REGISTERED


class TestLogin:
    """Tests for CredentialStore.login."""

    def test_login_returns_registered_user(self, store):
        """Test register-then-login gives the same identifier."""
        registered = store.register("Ada", "ada@example.com", "pw")
        store.logout()

        user = store.login("ada@example.com", "pw")

        assert user.id == registered.id
        assert store.current_user() == user

    @pytest.mark.parametrize("email,secret", [
        ("ada@example.com", "wrong"),
        ("nobody@example.com", "pw"),
        ("ADA@example.com", "pw"),
    ])
    def test_invalid_credentials(self, store, email, secret):
        """Test both email and secret must match exactly."""
        store.register("Ada", "ada@example.com", "pw")
        store.logout()

        with pytest.raises(InvalidCredentialsError):
            store.login(email, secret)
        assert store.current_user() is None

    def test_failed_login_keeps_existing_session(self, store):
        """Test a bad attempt does not log the current user out."""
        user = store.register("Ada", "ada@example.com", "pw")
        with pytest.raises(InvalidCredentialsError):
            store.login("ada@example.com", "nope")
        assert store.current_user() == user

    def test_failed_login_is_audited(self, store, audit):
        """Test failures are recorded without the secret."""
        with pytest.raises(InvalidCredentialsError):
            store.login("ghost@example.com", "topsecret")
        event = audit.recent_events(limit=1)[0]
        assert event.event_type == AuditEventType.LOGIN_FAILED
        assert "topsecret" not in json.dumps(event.to_log_dict())

    def test_secret_whitespace_is_significant(self, store):
        """Test secrets are compared exactly as registered."""
        user = store.register("Ada", "ada@example.com", " pw ")
        store.logout()
        with pytest.raises(InvalidCredentialsError):
            store.login("ada@example.com", "pw")
        assert store.login("ada@example.com", " pw ").id == user.id

    def test_blank_login_fields(self, store):
        """Test MissingFieldError."""
        with pytest.raises(MissingFieldError):
            store.login("", "pw")


class TestSession:
    """Tests for logout and session restore."""

    def test_logout_is_idempotent(self, store, storage):
        """Test logging out twice."""
        store.register("Ada", "ada@example.com", "pw")
        store.logout()
        store.logout()
        assert store.current_user() is None
        assert storage.get(SESSION_KEY) is None

    def test_session_restored_on_startup(self, storage):
        """Test a new instance picks up the persisted session."""
        first = CredentialStore(storage)
        user = first.register("Ada", "ada@example.com", "pw")

        second = CredentialStore(storage)

        assert second.current_user() == user
        assert second.is_authenticated is True

    def test_dangling_session_is_cleared(self, storage):
        """Test a session whose user vanished is dropped."""
        CredentialStore(storage).register("Ada", "ada@example.com", "pw")
        storage.set(USERS_KEY, "[]")

        restored = CredentialStore(storage)

        assert restored.current_user() is None
        assert storage.get(SESSION_KEY) is None

    def test_corrupt_session_is_cleared(self, storage, audit):
        """Test unreadable session data fails closed."""
        storage.set(SESSION_KEY, "{broken")

        restored = CredentialStore(storage, audit_logger=audit)

        assert restored.current_user() is None
        assert storage.get(SESSION_KEY) is None
        assert audit.recent_events()[0].event_type == AuditEventType.STORAGE_RECOVERED

    def test_corrupt_user_list_treated_as_empty(self, storage):
        """Test unreadable users data fails closed."""
        storage.set(USERS_KEY, '[{"id": "not-a-uuid"}]')
        store = CredentialStore(storage)

        user = store.register("Ada", "ada@example.com", "pw")

        assert store.get_user(user.id) == user

    def test_get_user(self, store):
        """Test lookup by ID, UUID or string."""
        user = store.register("Ada", "ada@example.com", "pw")
        assert store.get_user(user.id) == user
        assert store.get_user(str(user.id)) == user
        assert store.get_user("nope") is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
