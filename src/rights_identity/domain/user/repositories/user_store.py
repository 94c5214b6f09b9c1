"""User store interface.

The identity core never persists users itself. Applications provide a
concrete store (database, remote service, ...) implementing this port.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from rights_identity.domain.user.aggregates.user import User


class UserStore(ABC):
    """Repository interface for marketplace users."""

    @abstractmethod
    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Find a user by their ID."""

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email address."""

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[User]:
        """Find a user by their username."""

    @abstractmethod
    async def get_user_by_email_verification_token(
        self,
        token: str,
    ) -> Optional[User]:
        """Find the user holding a pending email verification token."""

    @abstractmethod
    async def update_user(self, user_id: int, **changes: Any) -> Optional[User]:
        """Apply field changes to a user in one write.

        Returns the updated user, or None if the user no longer exists.
        """
