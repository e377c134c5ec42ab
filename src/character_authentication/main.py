"""Character Authentication Service

FastAPI application entry point. Mounts every enabled authenticator under
``/api/v1/authentication/<name>``.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from character_authentication.api.session import AuthenticatorDeps
from character_authentication.audit import attach_audit_log
from character_authentication.authenticators import load_authenticators
from character_authentication.character import Character
from character_authentication.config.settings import Settings, get_settings
from character_authentication.database import Database

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

AUTHENTICATION_PREFIX = "/api/v1/authentication"


def create_app(settings: Optional[Settings] = None, character: Optional[Character] = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to use (defaults to environment settings)
        character: Host context to use (defaults to one built from settings)
    """
    settings = settings or get_settings()
    logging.getLogger("character_authentication").setLevel(settings.log_level.upper())

    if character is None:
        character = Character(Database(settings.database_url, echo=settings.sql_echo))
        attach_audit_log(character)

    authenticators = load_authenticators(character, settings, AuthenticatorDeps())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events"""
        # Startup
        logger.info(f"Starting {settings.service_name} v{settings.service_version}")
        logger.info(f"Environment: {settings.environment}")

        try:
            await character.database.init_db()
            logger.info("Database schema ready")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

        yield

        # Shutdown
        logger.info("Shutting down Authentication Service")
        await character.database.close()
        logger.info("Database connections closed")

    app = FastAPI(
        title="Character Authentication Service",
        version=settings.service_version,
        description="Pluggable authenticators for the character host application",
        lifespan=lifespan,
    )
    app.state.character = character
    app.state.authenticators = {authenticator.name: authenticator for authenticator in authenticators}

    # Session cookie (itsdangerous-signed)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret_key,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age,
        https_only=settings.session_https_only,
    )

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    for authenticator in authenticators:
        app.include_router(
            authenticator.router,
            prefix=f"{AUTHENTICATION_PREFIX}/{authenticator.name}",
            tags=["authentication"],
        )

    @app.get("/health")
    async def health_check():
        """Root health check endpoint"""
        return {
            "status": "healthy",
            "service": settings.service_name,
            "version": settings.service_version,
            "environment": settings.environment,
        }

    @app.get("/")
    async def root():
        """Root endpoint with service information"""
        return {
            "service": settings.service_name,
            "version": settings.service_version,
            "authenticators": sorted(app.state.authenticators),
            "docs": "/docs",
            "health": "/health",
        }

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Global exception handler for unhandled errors"""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later."
            }
        )

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "character_authentication.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
