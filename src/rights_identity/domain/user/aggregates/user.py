"""User aggregate for identity concerns only."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime

from rights.domain.shared.time import ensure_tz_aware, utc_now


@dataclass
class User:
    """
    Marketplace user record as seen by the identity core.

    Accounts authenticate either with a password (``password`` holds the
    bcrypt hash) or through a connected wallet (``wallet_address``), so
    both fields are optional. Sessions only ever hold the ``id``.
    """

    id: int
    username: str
    email: str | None = None
    password: str | None = None
    wallet_address: str | None = None
    email_verified: bool = False
    email_verification_token: str | None = None
    email_verification_expires: datetime | None = None
    is_banned: bool = False
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def without_password(self) -> User:
        """Return a copy safe to hand out past the credential boundary."""
        return replace(self, password=None)

    def is_verification_expired(self, now: datetime) -> bool:
        if self.email_verification_expires is None:
            return False
        # Stores may hand back naive UTC timestamps
        return now > ensure_tz_aware(self.email_verification_expires)

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username!r})"
