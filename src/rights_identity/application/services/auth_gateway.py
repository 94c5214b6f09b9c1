"""Auth gateway: turns verified identities into sessions and back."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rights_identity.application.context.request_context import (
    AuthenticatedSession,
    RequestContext,
)
from rights_identity.exceptions import AccountSuspendedError, UnauthenticatedError
from rights_identity.sessions.models import mask_token

if TYPE_CHECKING:
    from rights_identity.application.services.credential_service import (
        CredentialService,
    )
    from rights_identity.domain.user import User
    from rights_identity.sessions.store import SessionStore

logger = logging.getLogger(__name__)


class AuthGateway:
    """
    Composition point between identity sources and the session store.

    Password logins go through the CredentialService, wallet connections
    arrive already resolved to a user by the wallet connector. Both end
    up as a session token. On later requests the token is resolved back
    to a fresh user, with every failure collapsed into
    UnauthenticatedError.
    """

    PASSWORD_WALLET_TYPE = "password"

    def __init__(
        self,
        credential_service: CredentialService,
        session_store: SessionStore,
    ):
        self._credentials = credential_service
        self._sessions = session_store

    @property
    def sessions(self) -> SessionStore:
        return self._sessions

    @property
    def credentials(self) -> CredentialService:
        return self._credentials

    def _ensure_not_banned(self, user: User) -> None:
        if user.is_banned:
            logger.warning("Suspended user %s tried to sign in", user.id)
            raise AccountSuspendedError

    async def login_with_password(
        self,
        identifier: str,
        password: str,
        context: RequestContext | None = None,
    ) -> AuthenticatedSession:
        user = await self._credentials.login_with_password(identifier, password)
        self._ensure_not_banned(user)

        token = await self._sessions.create_session(
            user.id,
            user.wallet_address,
            wallet_type=self.PASSWORD_WALLET_TYPE,
            request_context=context,
        )
        return AuthenticatedSession(token=token, user=user)

    async def connect_wallet(  # noqa: PLR0913
        self,
        user: User,
        wallet_address: str,
        hedera_account_id: str | None = None,
        wallet_type: str = "hashpack",
        context: RequestContext | None = None,
    ) -> AuthenticatedSession:
        self._ensure_not_banned(user)

        token = await self._sessions.create_session(
            user.id,
            wallet_address,
            hedera_account_id=hedera_account_id,
            wallet_type=wallet_type,
            request_context=context,
        )
        logger.info("Wallet %s connected for user %s", wallet_type, user.id)
        return AuthenticatedSession(token=token, user=user.without_password())

    async def authenticate(self, token: str | None) -> User:
        """Resolve the acting user for a request.

        Raises
        ------
        UnauthenticatedError
            For any missing, unknown, expired or orphaned session
        AccountSuspendedError
            If the user behind a valid session is banned
        """
        user = await self._sessions.get_user_from_session(token)
        if user is None:
            logger.debug("Rejected session token %s", mask_token(token))
            raise UnauthenticatedError

        self._ensure_not_banned(user)
        return user

    async def authenticate_optional(self, token: str | None) -> User | None:
        """Like ``authenticate`` but yields None instead of raising."""
        if not token:
            return None
        user = await self._sessions.get_user_from_session(token)
        if user is None or user.is_banned:
            return None
        return user

    async def logout(self, token: str | None) -> bool:
        return await self._sessions.destroy_session(token)

    async def logout_everywhere(self, user_id: int) -> int:
        return await self._sessions.destroy_user_sessions(user_id)
