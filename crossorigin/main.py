"""
Cross-Origin Gateway - Main Application
=======================================
FastAPI application entry point
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from .api.middleware.cors import setup_cors_middleware
from .core.config import settings
from .core.logging import logger
from .services.cors import PolicyConfig


# =============================================================================
# Application Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Log startup and shutdown."""
    logger.info(
        "Starting Cross-Origin Gateway",
        version=settings.app_version,
        dev_mode=settings.dev_mode,
    )

    yield

    logger.info("Shutting down Cross-Origin Gateway")


# =============================================================================
# Application Factory
# =============================================================================


def create_application(policy: Optional[PolicyConfig] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        policy: CORS policy to enforce; read from settings when omitted

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url="/docs" if settings.dev_mode else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.dev_mode else None,
        lifespan=lifespan,
    )

    app.state.cors_policy = setup_cors_middleware(app, policy)

    register_routes(app)

    return app


# =============================================================================
# Route Registration
# =============================================================================


def register_routes(app: FastAPI) -> None:
    """Register service routes."""

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        policy: PolicyConfig = app.state.cors_policy
        return {
            "status": "healthy",
            "version": settings.app_version,
            "cors": {
                "origins": list(policy.origins),
                "credentials": policy.credentials,
            },
        }

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with service information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs" if settings.dev_mode else None,
        }

    logger.info("Routes registered")


# =============================================================================
# Development Server
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "crossorigin.main:create_application",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=settings.dev_mode,
        log_level=settings.log_level.lower(),
    )
