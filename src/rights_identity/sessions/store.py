"""Session store: opaque tokens mapped to authenticated session context.

Sessions are created after a successful password login or wallet
connection, refreshed on every validated lookup, and removed on logout,
on expiry (idle or absolute), or when their user disappears from the
user store. Absence is the only "logged out" state.

Sessions are held in process memory by default, so a restart logs
everyone out. Plug in a durable ``SessionBackend`` if that matters.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
from datetime import datetime
from typing import Callable

from rights.domain.shared.time import utc_now
from rights_identity.application.context.request_context import RequestContext
from rights_identity.domain.user import User, UserStore
from rights_identity.exceptions import SessionError, TokenGenerationError
from rights_identity.sessions.backend import InMemorySessionBackend, SessionBackend
from rights_identity.sessions.expiry import SessionExpiryPolicy
from rights_identity.sessions.models import (
    SessionData,
    SessionStats,
    SessionSummary,
    mask_token,
)

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


def generate_session_token() -> str:
    """Return 32 random bytes as hex.

    Raises
    ------
    TokenGenerationError
        If the OS has no secure random source
    """
    try:
        return secrets.token_hex(TOKEN_BYTES)
    except (NotImplementedError, OSError) as e:
        raise TokenGenerationError from e


class SessionStore:
    """Authoritative map from session token to session data.

    Every logical operation (create, check-then-refresh, delete, sweep)
    runs under one ``asyncio.Lock``, which makes each of them atomic with
    respect to the others. User store lookups happen outside the lock.

    Parameters
    ----------
    user_store
        Source of fresh user records for ``get_user_from_session``
    policy
        Expiry limits; defaults to 24h idle / 7 days absolute
    backend
        Raw session storage; defaults to an in-memory dict
    clock
        Returns the current aware datetime
    token_factory
        Produces new session tokens
    """

    MAX_TOKEN_ATTEMPTS = 5

    def __init__(  # noqa: PLR0913
        self,
        user_store: UserStore,
        policy: SessionExpiryPolicy | None = None,
        backend: SessionBackend | None = None,
        clock: Callable[[], datetime] = utc_now,
        token_factory: Callable[[], str] = generate_session_token,
    ):
        self._user_store = user_store
        self._policy = policy or SessionExpiryPolicy()
        self._backend = backend or InMemorySessionBackend()
        self._clock = clock
        self._token_factory = token_factory
        self._lock = asyncio.Lock()

    @property
    def policy(self) -> SessionExpiryPolicy:
        return self._policy

    async def create_session(  # noqa: PLR0913
        self,
        user_id: int,
        wallet_address: str | None,
        hedera_account_id: str | None = None,
        wallet_type: str = "hashpack",
        request_context: RequestContext | None = None,
    ) -> str:
        """Open a session and return its token.

        Raises
        ------
        TokenGenerationError
            If no secure random bytes are available
        SessionError
            If no unused token could be generated
        """
        context = request_context or RequestContext()

        async with self._lock:
            for _ in range(self.MAX_TOKEN_ATTEMPTS):
                token = self._token_factory()
                now = self._clock()
                session = SessionData(
                    token=token,
                    user_id=user_id,
                    wallet_address=wallet_address,
                    hedera_account_id=hedera_account_id,
                    wallet_type=wallet_type,
                    created_at=now,
                    last_activity=now,
                    ip_address=context.ip_address,
                    user_agent=context.user_agent,
                )
                if await self._backend.put_if_absent(session):
                    logger.info(
                        "Session created for user %s with token %s",
                        user_id,
                        mask_token(token),
                    )
                    return token

                logger.warning(
                    "Session token collision on %s, regenerating",
                    mask_token(token),
                )

        msg = "Could not allocate a unique session token"
        raise SessionError(msg)

    async def _lookup(self, token: str | None) -> SessionData | None:
        if not token or not isinstance(token, str):
            return None

        async with self._lock:
            session = await self._backend.get(token)
            if session is None:
                return None

            now = self._clock()
            if self._policy.is_expired(session, now):
                await self._backend.delete(token)
                logger.info("Session expired for token %s", mask_token(token))
                return None

            refreshed = session.touch(now)
            await self._backend.replace(refreshed)
            return refreshed

    async def get_session(self, token: str | None) -> SessionData | None:
        """Return the session for a token, refreshing its activity.

        Expired sessions are deleted on the spot and reported as None.
        """
        session = await self._lookup(token)
        if session is None:
            logger.debug("No valid session for token %s", mask_token(token))
        return session

    async def validate_session(self, token: str | None) -> SessionData | None:
        """Hot-path variant of ``get_session`` with identical expiry rules."""
        return await self._lookup(token)

    async def get_user_from_session(self, token: str | None) -> User | None:
        """Resolve a token to a fresh user record.

        The session is dropped if its user no longer exists. Returned
        users never carry a password hash.
        """
        session = await self.validate_session(token)
        if session is None:
            return None

        try:
            user = await self._user_store.get_user_by_id(session.user_id)
        except Exception:
            logger.exception(
                "Error fetching user %s for session %s",
                session.user_id,
                mask_token(token),
            )
            return None

        if user is None:
            await self._discard_orphan(session)
            logger.info(
                "User %s not found, invalidated session %s",
                session.user_id,
                mask_token(token),
            )
            return None

        return user.without_password()

    async def _discard_orphan(self, session: SessionData) -> None:
        async with self._lock:
            current = await self._backend.get(session.token)
            if current is not None and current.user_id == session.user_id:
                await self._backend.delete(session.token)

    async def destroy_session(self, token: str | None) -> bool:
        """Remove a session. Returns whether one was actually present."""
        if not token or not isinstance(token, str):
            return False

        async with self._lock:
            removed = await self._backend.delete(token)

        if removed is None:
            return False
        logger.info("Session destroyed for token %s", mask_token(token))
        return True

    async def destroy_user_sessions(self, user_id: int) -> int:
        """Remove every session of a user ("log out everywhere")."""
        async with self._lock:
            count = await self._backend.delete_where(lambda s: s.user_id == user_id)

        logger.info("Destroyed %d sessions for user %s", count, user_id)
        return count

    async def cleanup_expired_sessions(self) -> int:
        """Evict all expired sessions. Returns the number removed."""
        async with self._lock:
            now = self._clock()
            count = await self._backend.delete_where(
                lambda s: self._policy.is_expired(s, now),
            )

        if count > 0:
            logger.info("Cleaned up %d expired sessions", count)
        return count

    async def get_stats(self) -> SessionStats:
        """Count stored sessions and distinct users without touching them."""
        async with self._lock:
            sessions = await self._backend.values()

        return SessionStats(
            total_sessions=len(sessions),
            active_users=len({s.user_id for s in sessions}),
        )

    async def list_sessions(self) -> list[SessionSummary]:
        """Sanitized snapshot of all sessions for admin debugging."""
        async with self._lock:
            sessions = await self._backend.values()

        return [s.summary() for s in sorted(sessions, key=lambda s: s.created_at)]
