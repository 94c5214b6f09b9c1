"""Identity and authentication exceptions.

These exceptions are raised by the rights_identity package and should be
caught and handled by the application layer. All of them describe
recoverable, caller-visible outcomes except TokenGenerationError, which
aborts the operation that needed fresh random bytes.
"""


class AuthError(Exception):
    """Base exception for all authentication errors."""

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class InvalidCredentialsError(AuthError):
    """Raised when the identifier is unknown or the password is wrong.

    Both cases share one message so callers cannot enumerate accounts.
    """

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class TokenInvalidError(AuthError):
    """Raised when an email verification token matches no user."""

    def __init__(self, message: str = "Invalid or expired verification token"):
        super().__init__(message)


class TokenExpiredError(AuthError):
    """Raised when an email verification token matched but has expired."""

    def __init__(self, message: str = "Verification token has expired"):
        super().__init__(message)


class UnauthenticatedError(AuthError):
    """Raised when a request carries no valid session.

    Covers absent, malformed, expired and orphaned sessions alike.
    """

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class AccountSuspendedError(AuthError):
    """Raised when a banned user presents a valid session or credentials."""

    def __init__(self, message: str = "Account suspended"):
        super().__init__(message)


class SessionError(AuthError):
    """Raised when the session store cannot complete an operation."""

    def __init__(self, message: str = "Session operation failed"):
        super().__init__(message)


class TokenGenerationError(SessionError):
    """Raised when the platform cannot supply secure random bytes."""

    def __init__(self, message: str = "Secure random source unavailable"):
        super().__init__(message)
