"""Storage backends for the session store.

The session store keeps its lifecycle rules to itself and delegates raw
storage to a backend. The in-memory backend is the default; a durable
key-value engine can implement the same interface.
"""

from abc import ABC, abstractmethod
from typing import Callable

from rights_identity.sessions.models import SessionData

SessionPredicate = Callable[[SessionData], bool]


class SessionBackend(ABC):
    """Abstract storage for sessions keyed by token.

    Implementations need not be safe for concurrent use on their own;
    the session store serializes every call.
    """

    @abstractmethod
    async def put_if_absent(self, session: SessionData) -> bool:
        """Store a new session.

        Returns
        -------
        True if stored, False if the token is already taken (the existing
        session is left untouched)
        """

    @abstractmethod
    async def get(self, token: str) -> SessionData | None:
        """Return the session stored under a token."""

    @abstractmethod
    async def replace(self, session: SessionData) -> None:
        """Overwrite an existing session with an updated copy."""

    @abstractmethod
    async def delete(self, token: str) -> SessionData | None:
        """Remove a session, returning it if it existed."""

    @abstractmethod
    async def delete_where(self, predicate: SessionPredicate) -> int:
        """Remove all sessions matching a predicate.

        Returns
        -------
        Number of sessions removed
        """

    @abstractmethod
    async def values(self) -> list[SessionData]:
        """Return a snapshot of all stored sessions."""


class InMemorySessionBackend(SessionBackend):
    """Dict-backed session storage. Contents die with the process."""

    def __init__(self) -> None:
        self._sessions: dict[str, SessionData] = {}

    async def put_if_absent(self, session: SessionData) -> bool:
        if session.token in self._sessions:
            return False
        self._sessions[session.token] = session
        return True

    async def get(self, token: str) -> SessionData | None:
        return self._sessions.get(token)

    async def replace(self, session: SessionData) -> None:
        if session.token not in self._sessions:
            msg = "Cannot replace a session that is not stored"
            raise KeyError(msg)
        self._sessions[session.token] = session

    async def delete(self, token: str) -> SessionData | None:
        return self._sessions.pop(token, None)

    async def delete_where(self, predicate: SessionPredicate) -> int:
        doomed = [token for token, s in self._sessions.items() if predicate(s)]
        for token in doomed:
            del self._sessions[token]
        return len(doomed)

    async def values(self) -> list[SessionData]:
        return list(self._sessions.values())

    def __len__(self) -> int:
        return len(self._sessions)
