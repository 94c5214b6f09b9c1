"""FastAPI dependency injection for identity.

Provides dependencies for:
- The session store and auth gateway owned by the application
- Extracting the session token from cookie or headers
- Resolving the current (or optional) user
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rights_config.settings import Settings
from rights_identity import AuthGateway, RequestContext, SessionStore, User

logger = logging.getLogger(__name__)

# Security scheme for "Authorization: Bearer <session token>"
security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_auth_gateway(request: Request) -> AuthGateway:
    return request.app.state.auth_gateway


def get_request_context(request: Request) -> RequestContext:
    """Provenance recorded on sessions opened by this request."""
    client_host = request.client.host if request.client else None
    return RequestContext.from_values(
        ip_address=client_host,
        user_agent=request.headers.get("user-agent"),
    )


def extract_session_token(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
    credentials: Annotated[
        Optional[HTTPAuthorizationCredentials],
        Depends(security),
    ],
) -> str | None:
    """Find the session token: cookie first, then custom header, then Bearer.

    Every source is trimmed the same way; a blank value counts as absent.
    """
    candidates = (
        request.cookies.get(settings.session_cookie_name),
        request.headers.get(settings.session_header_name),
        credentials.credentials if credentials is not None else None,
    )
    for candidate in candidates:
        token = (candidate or "").strip()
        if token:
            return token

    return None


async def get_current_user(
    token: Annotated[Optional[str], Depends(extract_session_token)],
    gateway: Annotated[AuthGateway, Depends(get_auth_gateway)],
) -> User:
    """Resolve the acting user or raise UnauthenticatedError (401)."""
    return await gateway.authenticate(token)


async def get_optional_user(
    token: Annotated[Optional[str], Depends(extract_session_token)],
    gateway: Annotated[AuthGateway, Depends(get_auth_gateway)],
) -> Optional[User]:
    return await gateway.authenticate_optional(token)


CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[Optional[User], Depends(get_optional_user)]
SessionToken = Annotated[Optional[str], Depends(extract_session_token)]
