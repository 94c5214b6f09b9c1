"""Token-based session management."""

from rights_identity.sessions.backend import (
    InMemorySessionBackend,
    SessionBackend,
)
from rights_identity.sessions.expiry import SessionExpiryPolicy
from rights_identity.sessions.models import (
    SessionData,
    SessionStats,
    SessionSummary,
    mask_token,
)
from rights_identity.sessions.store import SessionStore, generate_session_token
from rights_identity.sessions.sweeper import SessionSweeper

__all__ = [
    "InMemorySessionBackend",
    "SessionBackend",
    "SessionData",
    "SessionExpiryPolicy",
    "SessionStats",
    "SessionStore",
    "SessionSummary",
    "SessionSweeper",
    "generate_session_token",
    "mask_token",
]
