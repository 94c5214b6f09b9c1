"""Session data structures.

These are immutable records. The store replaces a session wholesale when
its activity timestamp moves, so callers never share mutable state with
the store.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

TOKEN_PREVIEW_LENGTH = 8


def mask_token(token: object) -> str:
    """Shorten a session token for logs and admin listings.

    Anything that is not a non-empty string renders as ``<none>``.
    """
    if not token or not isinstance(token, str):
        return "<none>"
    return f"{token[:TOKEN_PREVIEW_LENGTH]}..."


@dataclass(frozen=True)
class SessionData:
    """A live authenticated session.

    Attributes
    ----------
    token
        Opaque random session token, also the store key
    user_id
        Id of the user the session belongs to (reference only)
    wallet_address
        Wallet the session was opened with, if any
    wallet_type
        Connector that produced the identity ("hashpack", "password", ...)
    created_at
        When the session was opened; never changes
    last_activity
        Last successful lookup; never earlier than ``created_at``
    """

    token: str
    user_id: int
    wallet_address: str | None
    wallet_type: str
    created_at: datetime
    last_activity: datetime
    hedera_account_id: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None

    def touch(self, now: datetime) -> SessionData:
        """Return a copy with ``last_activity`` moved forward to ``now``."""
        return replace(self, last_activity=max(now, self.last_activity))

    def summary(self) -> SessionSummary:
        return SessionSummary(
            token_preview=mask_token(self.token),
            user_id=self.user_id,
            wallet_address=self.wallet_address,
            hedera_account_id=self.hedera_account_id,
            wallet_type=self.wallet_type,
            created_at=self.created_at,
            last_activity=self.last_activity,
        )

    def __repr__(self) -> str:
        return (
            f"SessionData(token={mask_token(self.token)}, user_id={self.user_id}, "
            f"wallet_type={self.wallet_type!r})"
        )


@dataclass(frozen=True)
class SessionSummary:
    """Sanitized session view for admin debugging (no full token, no provenance)."""

    token_preview: str
    user_id: int
    wallet_address: str | None
    hedera_account_id: str | None
    wallet_type: str
    created_at: datetime
    last_activity: datetime


@dataclass(frozen=True)
class SessionStats:
    total_sessions: int
    active_users: int
