"""Identity infrastructure services."""

from rights_identity.services.password_service import PasswordHashingService

__all__ = ["PasswordHashingService"]
