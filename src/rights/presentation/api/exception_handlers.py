"""Centralized exception handlers for identity errors.

Auth exceptions are mapped to HTTP responses with a consistent error
format. Session failures of any kind surface as the same 401 so clients
only ever learn "re-authenticate", never why.

Error Response Format:
    {
        "detail": "Human-readable error message",
        "code": "MACHINE_READABLE_ERROR_CODE"
    }

Usage:
    from rights.presentation.api.exception_handlers import setup_exception_handlers

    app = FastAPI()
    setup_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from rights_identity.exceptions import (
    AccountSuspendedError,
    AuthError,
    InvalidCredentialsError,
    SessionError,
    TokenExpiredError,
    TokenInvalidError,
    UnauthenticatedError,
)

logger = logging.getLogger(__name__)

# Checked in order, first match wins (subclasses before their bases)
AUTH_ERROR_RESPONSES: list[tuple[type[AuthError], int, str]] = [
    (UnauthenticatedError, status.HTTP_401_UNAUTHORIZED, "UNAUTHENTICATED"),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED, "INVALID_CREDENTIALS"),
    (AccountSuspendedError, status.HTTP_403_FORBIDDEN, "ACCOUNT_SUSPENDED"),
    (TokenExpiredError, status.HTTP_400_BAD_REQUEST, "VERIFICATION_TOKEN_EXPIRED"),
    (TokenInvalidError, status.HTTP_400_BAD_REQUEST, "VERIFICATION_TOKEN_INVALID"),
    (SessionError, status.HTTP_500_INTERNAL_SERVER_ERROR, "SESSION_ERROR"),
]


def _status_and_code(exc: AuthError) -> tuple[int, str]:
    for exc_type, status_code, code in AUTH_ERROR_RESPONSES:
        if isinstance(exc, exc_type):
            return status_code, code
    return status.HTTP_400_BAD_REQUEST, "AUTH_ERROR"


def _create_error_response(
    status_code: int,
    message: str,
    code: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": message,
            "code": code,
        },
        headers=headers,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register identity exception handlers on the FastAPI application."""

    @app.exception_handler(AuthError)
    async def auth_exception_handler(
        request: Request,
        exc: AuthError,
    ) -> JSONResponse:
        status_code, code = _status_and_code(exc)

        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "Session failure on %s %s: %s",
                request.method,
                request.url.path,
                exc.message,
            )
        else:
            logger.info(
                "Auth error on %s %s: %s (code=%s)",
                request.method,
                request.url.path,
                exc.message,
                code,
            )

        headers = None
        if isinstance(exc, UnauthenticatedError):
            headers = {"WWW-Authenticate": "Session"}

        return _create_error_response(
            status_code=status_code,
            message=exc.message,
            code=code,
            headers=headers,
        )
