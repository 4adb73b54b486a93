"""
User and Session Models

DESIGN DECISION: The secret never leaves `StoredUser`.
Everything the rest of the app sees (the session, the presentation
layer, the audit log) is a plain `User` with the secret stripped.
"""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(BaseModel):
    """Public view of a registered user."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique, stable user ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display name"
    )
    email: str = Field(
        ...,
        min_length=1,
        max_length=320,
        description="Login email, unique and case-sensitive as stored"
    )


class StoredUser(User):
    """
    A user record as persisted under the `users` key.

    CRITICAL: `secret` is compared, never displayed or logged.
    It is kept byte-for-byte; name and email arrive already trimmed.
    """
    model_config = ConfigDict(str_strip_whitespace=False, frozen=True)

    secret: str = Field(
        ...,
        min_length=1,
        description="Opaque credential comparison value"
    )

    def to_public(self) -> User:
        """Strip the secret."""
        return User(id=self.id, name=self.name, email=self.email)


class Session(BaseModel):
    """
    The single authenticated user of a running app instance.

    Passed explicitly to every per-user operation instead of being
    read from a global.
    """
    model_config = ConfigDict(frozen=True)

    user: User
    started_at: datetime = Field(
        default_factory=utc_now,
        description="When the user logged in or registered"
    )
