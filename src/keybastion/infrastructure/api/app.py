"""FastAPI application factory and configuration.

This module provides the application factory function for creating
and configuring the FastAPI application with all middleware, routes,
and lifecycle handlers.
"""

import asyncio
import uuid
from contextlib import asynccontextmanager, suppress
from datetime import timedelta
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from keybastion.core.config import Settings, get_settings
from keybastion.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
)
from keybastion.domain.services.password_forge import PasswordForge
from keybastion.infrastructure.api.middleware import SecurityHeadersMiddleware
from keybastion.infrastructure.auth import (
    SessionRegistry,
    TokenAuthority,
    load_signing_keys,
)
from keybastion.infrastructure.persistence.database import (
    close_database,
    get_db_manager,
    init_database,
)
from keybastion.infrastructure.security.secret_cipher import SecretCipher

logger = get_logger(__name__)


async def prune_sessions_periodically(registry: SessionRegistry, interval_seconds: int) -> None:
    """Drop expired refresh tokens and revocation records until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        removed = registry.prune_expired()
        if removed:
            logger.info("Session registry pruned", removed=removed)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Initializes the database and runs the session pruning task for the
    lifetime of the application.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control is yielded to the application during its lifetime.
    """
    settings = app.state.settings

    logger.info(
        "Starting KeyBastion",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    try:
        await init_database()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    prune_task = asyncio.create_task(
        prune_sessions_periodically(
            app.state.session_registry, settings.session_prune_interval_seconds
        )
    )

    yield

    logger.info("Shutting down KeyBastion")

    prune_task.cancel()
    with suppress(asyncio.CancelledError):
        await prune_task

    await close_database()
    logger.info("Database connection closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Builds the long-lived security components once and stores them on
    ``app.state``.

    Args:
        settings: Settings to use. Defaults to the cached settings.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Credential vault backend",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    register_components(app, settings)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    app.add_middleware(SecurityHeadersMiddleware)

    register_health_check(app, settings)
    register_routes(app, settings)
    register_exception_handlers(app)
    register_middleware(app)

    return app


def register_components(app: FastAPI, settings: Settings) -> None:
    """Create the shared security components.

    Args:
        app: FastAPI application instance.
        settings: Application settings.
    """
    if settings.uses_default_encryption_key:
        logger.warning("Using the default encryption key; set KEYBASTION_ENCRYPTION_KEY")

    keys = load_signing_keys(settings.rsa_private_key_path, settings.rsa_public_key_path)

    app.state.secret_cipher = SecretCipher(settings.encryption_key)
    app.state.password_forge = PasswordForge()
    app.state.token_authority = TokenAuthority(
        private_key=keys.private_key,
        public_key=keys.public_key,
        issuer=settings.token_issuer,
        access_token_ttl=timedelta(minutes=settings.access_token_expire_minutes),
    )
    app.state.session_registry = SessionRegistry(
        refresh_token_ttl=timedelta(days=settings.refresh_token_expire_days),
    )
    logger.info("Security components initialized", issuer=settings.token_issuer)


def register_health_check(app: FastAPI, settings: Settings) -> None:
    """Register health check endpoints.

    Args:
        app: FastAPI application instance.
        settings: Application settings.
    """

    @app.get("/health", tags=["health"])
    async def health_check():
        """Basic health check endpoint. Does not touch the database."""
        return {
            "status": "healthy",
            "service": "KeyBastion",
            "version": settings.app_version,
        }

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        """Readiness check endpoint, including database connectivity."""
        db = get_db_manager()
        if await db.check_connection():
            return {
                "status": "ready",
                "service": "KeyBastion",
                "version": settings.app_version,
                "database": "connected",
            }
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "service": "KeyBastion",
                "database": "disconnected",
            },
        )


def register_routes(app: FastAPI, settings: Settings) -> None:
    """Register API routes.

    Args:
        app: FastAPI application instance.
        settings: Application settings.
    """
    from keybastion.infrastructure.api.routes import (
        auth_router,
        credential_security_router,
        credentials_router,
        passwords_router,
    )

    prefix = settings.api_prefix

    app.include_router(auth_router, prefix=f"{prefix}/auth", tags=["auth"])
    app.include_router(passwords_router, prefix=f"{prefix}/passwords", tags=["passwords"])
    app.include_router(
        credentials_router, prefix=f"{prefix}/credentials", tags=["credentials"]
    )
    app.include_router(
        credential_security_router,
        prefix=f"{prefix}/credential-security",
        tags=["credential-security"],
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": (
                    str(exc)
                    if request.app.state.settings.debug
                    else "An unexpected error occurred"
                ),
            },
        )


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware.

    Args:
        app: FastAPI application instance.
    """

    @app.middleware("http")
    async def logging_middleware(request, call_next):
        """Log every request and attach a correlation ID."""
        correlation_id = request.headers.get("X-Correlation-ID", f"cid_{uuid.uuid4().hex[:12]}")
        bind_correlation_id(correlation_id)

        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
            )
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            clear_context()


# Create the application instance
app = create_app()
