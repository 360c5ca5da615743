"""Main FastAPI application entry point for the sharecite citation service.

This module initializes the FastAPI application, configures logging and
middleware, and includes the API routes.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sharecite.api.routes import citations_router
from sharecite.config import get_settings
from sharecite.lookup import get_document_lookup

# Get settings
settings = get_settings()

logger = structlog.get_logger()


def configure_logging(level: str) -> None:
    """Filter structlog output below the configured level."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level)
        ),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager.

    Handles startup and shutdown events for the application.

    Args:
        app: FastAPI application instance

    Yields:
        None
    """
    # Startup
    configure_logging(settings.log_level)
    logger.info("sharecite_starting", api_base_url=settings.api_base_url)

    yield

    # Shutdown
    lookup = get_document_lookup()
    lookup.clear_document_cache()
    await lookup.client.close()
    logger.info("sharecite_stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="sharecite",
        description="Citation parsing, lookup and rendering for shared document chats",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routes
    app.include_router(citations_router, prefix="/api/v1")

    @app.get("/api/health")
    async def health_check() -> dict:
        """Health check endpoint.

        Returns:
            Health status information
        """
        return {
            "status": "healthy",
            "version": "0.1.0",
            "service": "sharecite",
        }

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
