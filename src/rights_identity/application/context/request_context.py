"""Request-scoped context handed to the identity core."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rights_identity.domain.user import User


@dataclass(frozen=True)
class RequestContext:
    """Provenance of the request that opened a session."""

    ip_address: str | None = None
    user_agent: str | None = None

    @classmethod
    def from_values(
        cls,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> RequestContext:
        return cls(ip_address=ip_address or None, user_agent=user_agent or None)


@dataclass(frozen=True)
class AuthenticatedSession:
    """A freshly minted session token together with its user."""

    token: str
    user: User

    def __repr__(self) -> str:
        # Never print the full token
        return f"AuthenticatedSession(token={self.token[:8]}..., user={self.user!r})"
