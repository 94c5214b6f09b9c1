"""Credential service for password login and email verification."""

from __future__ import annotations

import asyncio
import logging
import secrets
from datetime import datetime, timedelta
from functools import cached_property
from typing import TYPE_CHECKING, Callable, Optional

from rights.domain.shared.time import utc_now
from rights_identity.exceptions import (
    InvalidCredentialsError,
    TokenExpiredError,
    TokenGenerationError,
    TokenInvalidError,
)

if TYPE_CHECKING:
    from rights_config.settings import Settings
    from rights_identity.domain.user import User, UserStore
    from rights_identity.infrastructure.email import EmailService
    from rights_identity.services import PasswordHashingService

logger = logging.getLogger(__name__)


def _random_hex(num_bytes: int) -> str:
    try:
        return secrets.token_hex(num_bytes)
    except (NotImplementedError, OSError) as e:
        raise TokenGenerationError from e


class CredentialService:
    """
    Application service for password and token based identity operations.

    Covers:
    - Password hashing and verification
    - Login by email or username
    - Email verification token issuance, dispatch and consumption

    It never touches session state; the AuthGateway turns its results
    into sessions.
    """

    TOKEN_BYTES = 32
    DEFAULT_VERIFICATION_EXPIRY = timedelta(hours=24)

    def __init__(  # noqa: PLR0913
        self,
        user_store: UserStore,
        password_service: PasswordHashingService,
        email_service: EmailService,
        app_base_url: str,
        verification_expiry: timedelta = DEFAULT_VERIFICATION_EXPIRY,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._user_store = user_store
        self._password_service = password_service
        self._email_service = email_service
        self._app_base_url = app_base_url.rstrip("/")
        self._verification_expiry = verification_expiry
        self._clock = clock

    @classmethod
    def from_settings(
        cls,
        user_store: UserStore,
        password_service: PasswordHashingService,
        email_service: EmailService,
        settings: Settings,
    ) -> CredentialService:
        return cls(
            user_store=user_store,
            password_service=password_service,
            email_service=email_service,
            app_base_url=settings.app_base_url,
            verification_expiry=settings.email_verification_expiry,
        )

    @cached_property
    def _dummy_hash(self) -> str:
        # Compared against when the identifier matches no user
        return self._password_service.hash(_random_hex(16))

    # -------------------------------------------------------------------------
    # Passwords
    # -------------------------------------------------------------------------

    def hash_password(self, plaintext: str) -> str:
        return self._password_service.hash(plaintext)

    def verify_password(self, plaintext: str, password_hash: str | None) -> bool:
        return self._password_service.verify(plaintext, password_hash)

    @staticmethod
    def generate_secure_password() -> str:
        """Random placeholder password for wallet-only accounts."""
        return _random_hex(CredentialService.TOKEN_BYTES)

    async def _find_by_identifier(self, identifier: str) -> Optional[User]:
        user = await self._user_store.get_user_by_email(identifier)
        if user is not None:
            return user
        return await self._user_store.get_user_by_username(identifier)

    async def login_with_password(self, identifier: str, password: str) -> User:
        """Authenticate with an email address or username and a password.

        The identifier is matched exactly as given.

        Returns
        -------
        The user, without its password hash

        Raises
        ------
        InvalidCredentialsError
            If no user matches or the password is wrong (same error for both)
        """
        # Never log the identifier
        user = await self._find_by_identifier(identifier) if identifier else None

        if user is None or not user.password:
            self._password_service.verify(password, self._dummy_hash)
            logger.info("Login failed: no password account matches the identifier")
            raise InvalidCredentialsError

        if not self._password_service.verify(password, user.password):
            logger.info("Login failed: wrong password for user %s", user.id)
            raise InvalidCredentialsError

        logger.info("User logged in: %s", user.username)
        return user.without_password()

    # -------------------------------------------------------------------------
    # Email verification
    # -------------------------------------------------------------------------

    @staticmethod
    def generate_email_verification_token() -> str:
        """Return a 64 character hex token (32 random bytes)."""
        return _random_hex(CredentialService.TOKEN_BYTES)

    def _verification_link(self, token: str) -> str:
        return f"{self._app_base_url}/verify-email?token={token}"

    async def send_email_verification(
        self,
        email: str,
        token: str,
        username: str,
    ) -> bool:
        """Dispatch a verification email.

        Returns whether the dispatch was accepted, not whether the mail
        arrived. Failures are logged, never raised.
        """
        link = self._verification_link(token)
        try:
            await asyncio.to_thread(
                self._email_service.send_verification_email,
                email,
                username,
                link,
            )
        except Exception as e:
            logger.error("Failed to send verification email to %s: %s", email, e)
            return False

        logger.info("Verification email dispatched to %s", email)
        return True

    async def issue_email_verification(self, user: User) -> str | None:
        """Store a fresh verification token on the user.

        Any earlier token is overwritten and stops working.

        Returns
        -------
        The new token, or None if the user no longer exists
        """
        token = self.generate_email_verification_token()
        expires_at = self._clock() + self._verification_expiry

        updated = await self._user_store.update_user(
            user.id,
            email_verification_token=token,
            email_verification_expires=expires_at,
        )
        if updated is None:
            logger.warning("Cannot issue verification token, user %s gone", user.id)
            return None
        return token

    async def verify_email_token(self, token: str) -> User:
        """Consume a verification token and mark the email verified.

        The lookup and the clearing update are separate store calls, so a
        token is single-use only across sequential calls. Concurrent calls
        with the same token may both succeed; both only set
        ``email_verified``.

        Raises
        ------
        TokenInvalidError
            If the token matches no user (including already consumed tokens)
        TokenExpiredError
            If the token matched but expired; it stays stored so the user
            can ask for a new one
        """
        if not token:
            raise TokenInvalidError

        user = await self._user_store.get_user_by_email_verification_token(token)
        if user is None:
            raise TokenInvalidError

        if user.is_verification_expired(self._clock()):
            logger.info("Expired verification token used by user %s", user.id)
            raise TokenExpiredError

        updated = await self._user_store.update_user(
            user.id,
            email_verified=True,
            email_verification_token=None,
            email_verification_expires=None,
        )
        if updated is None:
            raise TokenInvalidError

        logger.info("Email verified for user %s", user.id)
        return updated.without_password()

    async def resend_email_verification(self, email: str) -> bool:
        user = await self._user_store.get_user_by_email(email)
        if user is None:
            logger.debug("Verification resend requested for unknown email: %s", email)
            return False

        if user.email_verified:
            return False

        token = await self.issue_email_verification(user)
        if token is None:
            return False

        return await self.send_email_verification(email, token, user.username)
