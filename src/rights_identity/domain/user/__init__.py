"""User domain manages user identity only.

This domain handles:
- User record (identity: id, username, email, wallet address)
- The UserStore port implemented by the owning application

Marketplace data (rights, listings, earnings) lives elsewhere and only
references user ids.
"""

from rights_identity.domain.user.aggregates import User
from rights_identity.domain.user.repositories import UserStore

__all__ = [
    "User",
    "UserStore",
]
