"""FastAPI application factory for the identity core.

The application owns exactly one SessionStore for its lifetime. The
store, the auth gateway and the settings are placed on ``app.state`` and
handed to endpoints through ``rights.presentation.api.dependencies``.
The lifespan starts and stops the background session sweeper.

Routers are mounted by the embedding application.
"""

import logging
import sys
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import FastAPI

from rights.presentation.api.exception_handlers import setup_exception_handlers
from rights_config.settings import Settings, get_settings
from rights_identity import (
    AuthGateway,
    CredentialService,
    EmailService,
    PasswordHashingService,
    SessionBackend,
    SessionExpiryPolicy,
    SessionStore,
    SessionSweeper,
    UserStore,
)

API_VERSION = "1.0.0"


@lru_cache(maxsize=1)
def configure_logging() -> None:
    """Configure application logging.

    Sets up logging for the rights packages with:
    - Console output with timestamps and module names
    - Configurable log level for our modules (from settings)
    """
    settings = get_settings()
    log_level_str = settings.log_level.upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,  # Override any existing config
    )

    logging.getLogger("rights").setLevel(log_level)
    logging.getLogger("rights_identity").setLevel(log_level)


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    sweeper: SessionSweeper = app.state.session_sweeper

    logger.info("Starting %s identity API v%s...", app.title, API_VERSION)
    sweeper.start()
    yield

    logger.info("Shutting down identity API...")
    await sweeper.stop()
    stats = await app.state.session_store.get_stats()
    # Sessions are memory-only; a restart logs everyone out
    logger.info("Dropping %d in-memory sessions", stats.total_sessions)


def create_app(
    user_store: UserStore,
    settings: Settings | None = None,
    email_service: EmailService | None = None,
    session_backend: SessionBackend | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    user_store
        The application's user persistence
    settings
        Settings to use instead of the cached environment settings
    email_service
        Mail dispatcher; built from settings when omitted
    session_backend
        Session storage; in-memory when omitted
    """
    settings = settings or get_settings()
    configure_logging()

    password_service = PasswordHashingService(rounds=settings.bcrypt_rounds)
    credential_service = CredentialService.from_settings(
        user_store=user_store,
        password_service=password_service,
        email_service=email_service or EmailService(settings),
        settings=settings,
    )
    session_store = SessionStore(
        user_store=user_store,
        policy=SessionExpiryPolicy.from_settings(settings),
        backend=session_backend,
    )

    app = FastAPI(
        title=settings.app_name,
        version=API_VERSION,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_store = session_store
    app.state.auth_gateway = AuthGateway(credential_service, session_store)
    app.state.session_sweeper = SessionSweeper(
        session_store,
        interval_seconds=settings.session_cleanup_interval_seconds,
    )

    setup_exception_handlers(app)

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """Health check endpoint with session counts."""
        stats = await session_store.get_stats()
        return {
            "status": "healthy",
            "version": API_VERSION,
            "sessions": stats.total_sessions,
            "active_users": stats.active_users,
        }

    return app
