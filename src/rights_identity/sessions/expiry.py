"""Session expiry policy.

Every read path of the session store and the background sweep ask this
one policy whether a session is still alive.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rights_config.settings import Settings
    from rights_identity.sessions.models import SessionData


class SessionExpiryPolicy:
    """Idle and absolute session lifetime limits.

    A session is expired once ``now - last_activity`` exceeds the idle
    timeout or ``now - created_at`` exceeds the maximum duration. Sitting
    exactly on either limit still counts as alive.

    Examples
    --------
    >>> policy = SessionExpiryPolicy(idle_timeout=timedelta(hours=24))
    >>> policy.is_expired(session, now)
    False
    """

    DEFAULT_IDLE_TIMEOUT = timedelta(hours=24)
    DEFAULT_MAX_DURATION = timedelta(days=7)

    def __init__(
        self,
        idle_timeout: timedelta = DEFAULT_IDLE_TIMEOUT,
        max_duration: timedelta = DEFAULT_MAX_DURATION,
    ):
        if idle_timeout <= timedelta(0) or max_duration <= timedelta(0):
            msg = "Session limits must be positive"
            raise ValueError(msg)

        self._idle_timeout = idle_timeout
        self._max_duration = max_duration

    @classmethod
    def from_settings(cls, settings: Settings) -> SessionExpiryPolicy:
        return cls(
            idle_timeout=settings.session_idle_timeout,
            max_duration=settings.session_max_duration,
        )

    @property
    def idle_timeout(self) -> timedelta:
        return self._idle_timeout

    @property
    def max_duration(self) -> timedelta:
        return self._max_duration

    def is_idle(self, session: SessionData, now: datetime) -> bool:
        return now - session.last_activity > self._idle_timeout

    def is_too_old(self, session: SessionData, now: datetime) -> bool:
        return now - session.created_at > self._max_duration

    def is_expired(self, session: SessionData, now: datetime) -> bool:
        return self.is_idle(session, now) or self.is_too_old(session, now)
