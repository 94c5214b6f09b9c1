"""Application services for identity management."""

from rights_identity.application.services.auth_gateway import AuthGateway
from rights_identity.application.services.credential_service import (
    CredentialService,
)

__all__ = ["AuthGateway", "CredentialService"]
