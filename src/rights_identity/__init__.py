"""Rights Identity - Credentials and sessions for marketplace users.

This module handles all identity-related concerns:
- Password hashing and login by email or username
- Email verification tokens
- Opaque session tokens with idle and absolute expiry
- Bridging password accounts and wallet-connected accounts into one
  session model

User persistence is owned by the application through the UserStore
port. Marketplace features only reference user ids.
"""

from rights_identity.application.context import (
    AuthenticatedSession,
    RequestContext,
)
from rights_identity.application.services import (
    AuthGateway,
    CredentialService,
)
from rights_identity.domain.user import User, UserStore
from rights_identity.exceptions import (
    AccountSuspendedError,
    AuthError,
    InvalidCredentialsError,
    SessionError,
    TokenExpiredError,
    TokenGenerationError,
    TokenInvalidError,
    UnauthenticatedError,
)
from rights_identity.infrastructure.email import EmailService
from rights_identity.services import PasswordHashingService
from rights_identity.sessions import (
    InMemorySessionBackend,
    SessionBackend,
    SessionData,
    SessionExpiryPolicy,
    SessionStats,
    SessionStore,
    SessionSummary,
    SessionSweeper,
)

__all__ = [
    # Domain - User
    "User",
    "UserStore",
    # Exceptions
    "AccountSuspendedError",
    "AuthError",
    "InvalidCredentialsError",
    "SessionError",
    "TokenExpiredError",
    "TokenGenerationError",
    "TokenInvalidError",
    "UnauthenticatedError",
    # Sessions
    "InMemorySessionBackend",
    "SessionBackend",
    "SessionData",
    "SessionExpiryPolicy",
    "SessionStats",
    "SessionStore",
    "SessionSummary",
    "SessionSweeper",
    # Services
    "EmailService",
    "PasswordHashingService",
    # Application Context
    "AuthenticatedSession",
    "RequestContext",
    # Application Services
    "AuthGateway",
    "CredentialService",
]
